"""
External service interfaces (ports).

These interfaces define contracts for external services
that the application depends on.
"""
from abc import ABC, abstractmethod

from ...domain.entities.user import Identity


class PasswordHasher(ABC):
    """Interface for password hashing service."""

    @abstractmethod
    def hash(self, password: str) -> str:
        """Hash a plain text password."""
        pass

    @abstractmethod
    def verify(self, password: str, hashed: str) -> bool:
        """Verify a password against its hash."""
        pass


class TokenService(ABC):
    """Interface for bearer token issuance and verification."""

    @abstractmethod
    def issue_token(self, identity: Identity) -> str:
        """Create a signed token for the identity."""
        pass

    @abstractmethod
    def verify_token(self, token: str) -> Identity:
        """
        Decode and validate a token.

        Raises:
            InvalidTokenError: token is malformed, expired or tampered with
        """
        pass
