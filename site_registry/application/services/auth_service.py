"""
Authentication application service.
"""
import hmac
import logging
from dataclasses import dataclass
from typing import Optional

from ..interfaces.services import PasswordHasher, TokenService
from ..interfaces.unit_of_work import UnitOfWork
from ...domain.entities.user import Identity, IdentityKind, User, UserRole
from ...domain.exceptions import (
    DuplicateUserError,
    InvalidCredentialsError,
    InvalidTokenError,
)
from ...domain.services.password_policy import ensure_strong_password

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    """Result of a successful login or registration."""
    token: str
    identity: Identity


@dataclass(frozen=True)
class BreakGlassCredentials:
    """Administrator credentials configured outside the user store."""
    username: str
    password: str

    def matches(self, username: str, password: str) -> bool:
        """Constant-time comparison of both values."""
        username_ok = hmac.compare_digest(username.encode(), self.username.encode())
        password_ok = hmac.compare_digest(password.encode(), self.password.encode())
        return username_ok and password_ok

    def to_identity(self) -> Identity:
        return Identity(
            username=self.username,
            role=UserRole.ADMIN,
            kind=IdentityKind.BREAK_GLASS
        )


class AuthService:
    """
    Authentication service handling registration, login and token checks.

    Login failures are reported identically whether the username or the
    password was wrong.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        password_hasher: PasswordHasher,
        token_service: TokenService,
        break_glass: Optional[BreakGlassCredentials] = None,
    ):
        self._uow = uow
        self._password_hasher = password_hasher
        self._token_service = token_service
        self._break_glass = break_glass

    async def login(self, username: str, password: str) -> AuthResult:
        """
        Authenticate and issue a token.

        Raises:
            InvalidCredentialsError: unknown user or wrong password
        """
        username = (username or '').strip()
        password = password or ''

        if self._break_glass and self._break_glass.matches(username, password):
            identity = self._break_glass.to_identity()
            logger.info(f"Break-glass administrator '{username}' logged in")
            return AuthResult(token=self._token_service.issue_token(identity), identity=identity)

        user = await self._uow.users.get_by_username(username)
        if user is None or not self._password_hasher.verify(password, user.password_hash):
            logger.warning(f"Failed login for '{username}'")
            raise InvalidCredentialsError()

        identity = user.to_identity()
        logger.info(f"User '{username}' logged in")
        return AuthResult(token=self._token_service.issue_token(identity), identity=identity)

    async def register(self, username: str, password: str) -> AuthResult:
        """
        Register a new account with the user role.

        Raises:
            DuplicateUserError: username taken or reserved
            WeakPasswordError: password breaks the policy
        """
        username = (username or '').strip()

        if self._break_glass and username == self._break_glass.username:
            raise DuplicateUserError(username)
        if await self._uow.users.get_by_username(username) is not None:
            raise DuplicateUserError(username)

        ensure_strong_password(password)

        user = User(
            username=username,
            password_hash=self._password_hasher.hash(password),
            role=UserRole.USER,
        )
        saved = await self._uow.users.add(user)
        await self._uow.commit()

        identity = saved.to_identity()
        logger.info(f"Registered user '{username}'")
        return AuthResult(token=self._token_service.issue_token(identity), identity=identity)

    async def authenticate(self, token: str) -> Identity:
        """
        Resolve a bearer token to the current identity.

        Account identities are re-read from the store so role changes
        and deletions take effect immediately.

        Raises:
            InvalidTokenError: bad token, unknown account, or break-glass
                access no longer configured
        """
        identity = self._token_service.verify_token(token)

        if identity.is_break_glass:
            if self._break_glass is None or identity.username != self._break_glass.username:
                raise InvalidTokenError()
            return self._break_glass.to_identity()

        user = None
        if identity.user_id is not None:
            user = await self._uow.users.get_by_id(identity.user_id)
        if user is None:
            raise InvalidTokenError("User not found")
        return user.to_identity()
