# Domain Services - Business logic that doesn't belong to a single entity

from .password_policy import check_password_strength, ensure_strong_password
from .site_reconciler import SiteReconciler
from .site_schema import check_shape, normalize_site_payload, parse_site_id
from .site_search import SiteSearchSpecification
from .site_validator import SiteValidator, ValidationResult, flatten_details, flatten_payload
from .status_rule import apply_status_transition

__all__ = [
    'SiteReconciler',
    'SiteSearchSpecification',
    'SiteValidator',
    'ValidationResult',
    'apply_status_transition',
    'check_password_strength',
    'check_shape',
    'ensure_strong_password',
    'flatten_details',
    'flatten_payload',
    'normalize_site_payload',
    'parse_site_id',
]
