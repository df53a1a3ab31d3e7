"""
Pydantic request/response schemas for API endpoints.
"""
# Auth schemas
from .auth_schemas import (
    AuthResponse,
    ErrorResponse,
    LoginRequest,
    RegisterRequest,
    UserSummary,
    VerifyResponse,
)

# Site schemas
from .site_schemas import (
    CamelModel,
    DeleteSiteResponse,
    LocationSchema,
    SiteResponse,
    SiteStatusUpdate,
    TechnicianSchema,
)

__all__ = [
    'AuthResponse',
    'CamelModel',
    'DeleteSiteResponse',
    'ErrorResponse',
    'LocationSchema',
    'LoginRequest',
    'RegisterRequest',
    'SiteResponse',
    'SiteStatusUpdate',
    'TechnicianSchema',
    'UserSummary',
    'VerifyResponse',
]
