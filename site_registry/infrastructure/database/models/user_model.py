"""
SQLAlchemy model for User entity.
"""
from uuid import uuid4

from sqlalchemy import Column, Enum, String, Uuid

from .base import Base, TimestampMixin
from ....domain.entities.base import ensure_utc
from ....domain.entities.user import User, UserRole


class UserModel(TimestampMixin, Base):
    """SQLAlchemy model for users table."""

    __tablename__ = 'users'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4, nullable=False)

    # Authentication
    username = Column(String(50), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    role = Column(
        Enum(UserRole, name='user_role'),
        default=UserRole.USER,
        nullable=False
    )

    def to_domain(self) -> User:
        """Convert ORM model to domain entity."""
        return User(
            id=self.id,
            username=self.username,
            password_hash=self.password_hash,
            role=self.role,
            created_at=ensure_utc(self.created_at),
            updated_at=ensure_utc(self.updated_at),
        )

    @classmethod
    def from_domain(cls, user: User) -> 'UserModel':
        """Create ORM model from domain entity."""
        return cls(
            id=user.id,
            username=user.username,
            password_hash=user.password_hash,
            role=user.role,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
