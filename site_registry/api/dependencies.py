"""
FastAPI dependency injection providers.
"""
from typing import AsyncGenerator, List, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..application.interfaces.unit_of_work import UnitOfWork
from ..application.services.auth_service import AuthService, BreakGlassCredentials
from ..application.services.site_service import SiteService
from ..config import get_settings
from ..domain.entities.user import Identity, UserRole
from ..domain.exceptions import AuthorizationException, InvalidTokenError
from ..infrastructure.database.connection import get_unit_of_work as create_unit_of_work
from ..infrastructure.security import BcryptPasswordHasher, JWTHandler

# Security scheme
bearer_scheme = HTTPBearer(auto_error=False)


# Singleton instances for services
_password_hasher: Optional[BcryptPasswordHasher] = None
_jwt_handler: Optional[JWTHandler] = None


def get_password_hasher() -> BcryptPasswordHasher:
    """Get password hasher instance."""
    global _password_hasher
    if _password_hasher is None:
        _password_hasher = BcryptPasswordHasher(rounds=get_settings().security.bcrypt_rounds)
    return _password_hasher


def get_jwt_handler() -> JWTHandler:
    """Get JWT handler instance."""
    global _jwt_handler
    if _jwt_handler is None:
        jwt_settings = get_settings().jwt
        _jwt_handler = JWTHandler(
            secret_key=jwt_settings.secret_key,
            algorithm=jwt_settings.algorithm,
            token_expire_minutes=jwt_settings.token_expire_minutes,
            issuer=jwt_settings.issuer,
            audience=jwt_settings.audience,
        )
    return _jwt_handler


def get_break_glass_credentials() -> Optional[BreakGlassCredentials]:
    """Environment administrator, only while both values are configured."""
    admin = get_settings().admin
    if not admin.enabled:
        return None
    return BreakGlassCredentials(
        username=admin.username,
        password=admin.password.get_secret_value(),
    )


async def get_unit_of_work() -> AsyncGenerator[UnitOfWork, None]:
    """
    Provide Unit of Work for request lifecycle.

    Handles transaction management per request.
    """
    uow = create_unit_of_work()
    async with uow:
        yield uow


def get_site_service(uow: UnitOfWork = Depends(get_unit_of_work)) -> SiteService:
    """Get site service instance."""
    return SiteService(uow)


def get_auth_service(
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: BcryptPasswordHasher = Depends(get_password_hasher),
    jwt_handler: JWTHandler = Depends(get_jwt_handler),
    break_glass: Optional[BreakGlassCredentials] = Depends(get_break_glass_credentials),
) -> AuthService:
    """Get authentication service instance."""
    return AuthService(
        uow=uow,
        password_hasher=password_hasher,
        token_service=jwt_handler,
        break_glass=break_glass,
    )


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> Identity:
    """
    Get the identity behind the bearer token.

    Raises InvalidTokenError if no valid token is presented.
    """
    if credentials is None:
        raise InvalidTokenError("No token provided")
    return await auth_service.authenticate(credentials.credentials)


class RoleChecker:
    """
    Dependency for checking identity roles.

    Usage:
        @router.post("/sites")
        async def create_site(identity: Identity = Depends(require_admin)):
            ...
    """

    def __init__(self, allowed_roles: List[UserRole]):
        self.allowed_roles = allowed_roles

    async def __call__(
        self,
        identity: Identity = Depends(get_current_identity),
    ) -> Identity:
        if identity.role not in self.allowed_roles:
            raise AuthorizationException(
                message="Insufficient permissions",
                required_role=self.allowed_roles[0].value,
            )
        return identity


# Common role checkers
require_admin = RoleChecker([UserRole.ADMIN])
