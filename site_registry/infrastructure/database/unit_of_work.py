"""
SQLAlchemy Unit of Work implementation.

One session per unit; the site and user repositories share it, so a
site change and the commit that persists it happen in one transaction.
"""
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ...application.interfaces.unit_of_work import UnitOfWork
from .repositories.site_repository import SQLAlchemySiteRepository
from .repositories.user_repository import SQLAlchemyUserRepository

logger = logging.getLogger(__name__)


class SQLAlchemyUnitOfWork(UnitOfWork):
    """
    Transaction boundary for one request or one scripted operation.

    Usage:
        async with SQLAlchemyUnitOfWork(session_factory) as uow:
            site = await uow.sites.get_by_id(2001)
            await uow.sites.update(changed)
            await uow.commit()

    Leaving the block without commit discards every flushed change.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None
        self._sites: Optional[SQLAlchemySiteRepository] = None
        self._users: Optional[SQLAlchemyUserRepository] = None

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        self._session = self._session_factory()
        self._sites = SQLAlchemySiteRepository(self._session)
        self._users = SQLAlchemyUserRepository(self._session)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is not None:
            logger.debug(f"Rolling back after {exc_type.__name__}")
            await self.rollback()
        await self.close()

    @property
    def sites(self) -> SQLAlchemySiteRepository:
        if self._sites is None:
            raise RuntimeError("Unit of work not started. Use 'async with' context.")
        return self._sites

    @property
    def users(self) -> SQLAlchemyUserRepository:
        if self._users is None:
            raise RuntimeError("Unit of work not started. Use 'async with' context.")
        return self._users

    async def commit(self) -> None:
        if self._session is not None:
            await self._session.commit()

    async def rollback(self) -> None:
        if self._session is not None:
            await self._session.rollback()

    async def close(self) -> None:
        """Close the session; uncommitted work is rolled back by SQLAlchemy."""
        if self._session is not None:
            await self._session.close()
        self._session = None
        self._sites = None
        self._users = None
