"""
Repository interfaces (ports) for domain entities.

These interfaces define the contract for persistence operations
without specifying the implementation details.
"""
from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from ...domain.entities.site import Site, SiteStatus
from ...domain.entities.user import User


class SiteRepository(ABC):
    """Repository interface for Site documents, keyed by integer id."""

    FIRST_SITE_ID = 1010

    @abstractmethod
    async def get_by_id(self, site_id: int) -> Optional[Site]:
        """
        Get site by id.

        Returns:
            Site if found, None otherwise
        """
        pass

    @abstractmethod
    async def list(self, status: Optional[SiteStatus] = None) -> List[Site]:
        """List sites newest first, optionally filtered by status."""
        pass

    @abstractmethod
    async def next_id(self) -> int:
        """One more than the highest id, or FIRST_SITE_ID when empty."""
        pass

    @abstractmethod
    async def exists(self, site_id: int) -> bool:
        pass

    @abstractmethod
    async def add(self, site: Site) -> Site:
        """
        Add new site.

        Raises:
            DuplicateIdError: the store already holds this id
        """
        pass

    @abstractmethod
    async def update(self, site: Site) -> Site:
        """Replace the stored document with this site."""
        pass

    @abstractmethod
    async def delete(self, site_id: int) -> Optional[Site]:
        """
        Delete site by id.

        Returns:
            The deleted site, None if not found
        """
        pass


class UserRepository(ABC):
    """Repository interface for User entities."""

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username (exact match)."""
        pass

    @abstractmethod
    async def add(self, user: User) -> User:
        """
        Add new user.

        Raises:
            DuplicateUserError: username already taken
        """
        pass
