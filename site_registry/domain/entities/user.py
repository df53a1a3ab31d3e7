"""
User domain entity and the authenticated identity value object.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID, uuid4

from .base import utc_now
from ..exceptions import ValidationException


class UserRole(str, Enum):
    """User roles within the system."""
    ADMIN = "admin"    # Can create, edit and delete sites
    USER = "user"      # Read access plus status changes


class IdentityKind(str, Enum):
    """How an identity was established."""
    ACCOUNT = "account"          # Stored user account
    BREAK_GLASS = "break_glass"  # Administrator configured in the environment


@dataclass
class User:
    """
    Registered user account.

    Passwords are only ever held as a hash.
    """
    username: str
    password_hash: str
    role: UserRole = UserRole.USER
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: Optional[datetime] = None

    USERNAME_MIN_LENGTH = 3
    USERNAME_MAX_LENGTH = 50

    def __post_init__(self) -> None:
        """Validate user data on construction."""
        self.username = (self.username or '').strip()
        length = len(self.username)
        if not self.USERNAME_MIN_LENGTH <= length <= self.USERNAME_MAX_LENGTH:
            raise ValidationException(
                message="Invalid user data",
                errors={'username': [
                    f'Username must be between {self.USERNAME_MIN_LENGTH} '
                    f'and {self.USERNAME_MAX_LENGTH} characters'
                ]}
            )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def to_identity(self) -> 'Identity':
        return Identity(
            username=self.username,
            role=self.role,
            kind=IdentityKind.ACCOUNT,
            user_id=self.id
        )


@dataclass(frozen=True)
class Identity:
    """
    The authenticated principal behind a request.

    Break-glass identities have no user_id; they exist only while the
    administrator credentials are configured.
    """
    username: str
    role: UserRole
    kind: IdentityKind = IdentityKind.ACCOUNT
    user_id: Optional[UUID] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_break_glass(self) -> bool:
        return self.kind == IdentityKind.BREAK_GLASS

    def to_summary(self) -> Dict[str, Any]:
        return {'username': self.username, 'role': self.role.value}
