"""
JWT token handling implementation.
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import UUID

import jwt

from ...application.interfaces.services import TokenService
from ...domain.entities.user import Identity, IdentityKind, UserRole
from ...domain.exceptions import InvalidTokenError

logger = logging.getLogger(__name__)


@dataclass
class TokenPayload:
    """JWT token payload data."""
    sub: str  # Subject (user ID, or username for break-glass)
    username: str
    role: str
    kind: str  # Identity kind (account/break_glass)
    exp: datetime  # Expiration time
    iat: datetime  # Issued at time
    jti: str  # JWT ID (unique identifier)


class JWTHandler(TokenService):
    """JWT token service implementation."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        token_expire_minutes: int = 7 * 24 * 60,
        issuer: Optional[str] = None,
        audience: Optional[str] = None,
    ):
        """
        Initialize JWT handler.

        Args:
            secret_key: Secret key for signing tokens
            algorithm: JWT signing algorithm
            token_expire_minutes: Token validity period
            issuer: Token issuer claim
            audience: Token audience claim
        """
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._token_expire_minutes = token_expire_minutes
        self._issuer = issuer
        self._audience = audience

    def issue_token(self, identity: Identity) -> str:
        """Create a signed token for the identity."""
        now = datetime.now(timezone.utc)
        expires = now + timedelta(minutes=self._token_expire_minutes)

        payload: Dict[str, Any] = {
            "sub": str(identity.user_id) if identity.user_id else identity.username,
            "username": identity.username,
            "role": identity.role.value,
            "kind": identity.kind.value,
            "exp": expires,
            "iat": now,
            "jti": str(uuid.uuid4()),
        }
        if self._issuer:
            payload["iss"] = self._issuer
        if self._audience:
            payload["aud"] = self._audience

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def decode(self, token: str) -> TokenPayload:
        """
        Verify signature, expiry and claims.

        Raises:
            InvalidTokenError: on any verification failure
        """
        options = {}
        if self._audience:
            options["audience"] = self._audience
        if self._issuer:
            options["issuer"] = self._issuer

        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                **options
            )
            return TokenPayload(
                sub=payload["sub"],
                username=payload["username"],
                role=payload["role"],
                kind=payload["kind"],
                exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
                iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                jti=payload["jti"],
            )
        except jwt.ExpiredSignatureError:
            raise InvalidTokenError("Token has expired")
        except jwt.InvalidTokenError as exc:
            logger.warning(f"Rejected token: {exc}")
            raise InvalidTokenError()
        except KeyError as exc:
            logger.warning(f"Token missing claim {exc}")
            raise InvalidTokenError()

    def verify_token(self, token: str) -> Identity:
        """Decode a token into the identity it was issued for."""
        payload = self.decode(token)
        try:
            kind = IdentityKind(payload.kind)
            role = UserRole(payload.role)
            user_id = UUID(payload.sub) if kind == IdentityKind.ACCOUNT else None
        except ValueError:
            raise InvalidTokenError()
        return Identity(username=payload.username, role=role, kind=kind, user_id=user_id)
