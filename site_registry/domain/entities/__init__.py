# Domain Entities
from .base import (
    Specification,
    ensure_utc,
    format_timestamp,
    parse_timestamp,
    utc_now,
)
from .power_source import (
    BatteryDetails,
    BatteryType,
    GeneratorDetails,
    GeneratorType,
    GridConnectionType,
    GridDetails,
    OtherDetails,
    POWER_SOURCE_DETAILS,
    PowerSourceDetails,
    PowerSourceKind,
    SolarDetails,
    SolarType,
    details_type_for,
)
from .site import (
    Location,
    Site,
    SiteCapacity,
    SiteStatus,
    Technician,
)
from .user import (
    Identity,
    IdentityKind,
    User,
    UserRole,
)

__all__ = [
    # Base
    'Specification',
    'ensure_utc',
    'format_timestamp',
    'parse_timestamp',
    'utc_now',
    # Power sources
    'BatteryDetails',
    'BatteryType',
    'GeneratorDetails',
    'GeneratorType',
    'GridConnectionType',
    'GridDetails',
    'OtherDetails',
    'POWER_SOURCE_DETAILS',
    'PowerSourceDetails',
    'PowerSourceKind',
    'SolarDetails',
    'SolarType',
    'details_type_for',
    # Sites
    'Location',
    'Site',
    'SiteCapacity',
    'SiteStatus',
    'Technician',
    # Users
    'Identity',
    'IdentityKind',
    'User',
    'UserRole',
]
