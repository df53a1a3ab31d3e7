"""
Application services - orchestration and cross-cutting concerns.
"""
from .auth_service import AuthResult, AuthService, BreakGlassCredentials
from .site_service import SiteService

__all__ = [
    'AuthResult',
    'AuthService',
    'BreakGlassCredentials',
    'SiteService',
]
