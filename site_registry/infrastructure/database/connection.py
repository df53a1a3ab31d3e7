"""
Database engine and session factory.

PostgreSQL through asyncpg in deployment. Tests and local runs may set
DB_DSN to an SQLite URL (aiosqlite), which takes no pool sizing.
"""
import logging
from typing import Any, Dict, Optional

from sqlalchemy import MetaData, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from ...config import get_settings

logger = logging.getLogger(__name__)


# Deterministic constraint names
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Declarative base shared by the site and user models."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def _engine_options() -> Dict[str, Any]:
    db = get_settings().database
    options: Dict[str, Any] = {'echo': db.echo_sql}
    if not db.is_sqlite:
        options.update(
            pool_size=db.pool_size,
            max_overflow=db.max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
    return options


class DatabaseManager:
    """
    Process-wide engine and session factory, created on first use.

    close() disposes the pool; the next call to get_engine() starts a
    new one.
    """

    _engine: Optional[AsyncEngine] = None
    _session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @classmethod
    def get_engine(cls) -> AsyncEngine:
        if cls._engine is None:
            cls._engine = create_async_engine(get_settings().database.url, **_engine_options())
        return cls._engine

    @classmethod
    def get_session_factory(cls) -> async_sessionmaker[AsyncSession]:
        if cls._session_factory is None:
            # Sites are serialized after commit, so keep loaded attributes
            cls._session_factory = async_sessionmaker(
                bind=cls.get_engine(),
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
        return cls._session_factory

    @classmethod
    async def close(cls) -> None:
        if cls._engine is not None:
            await cls._engine.dispose()
        cls._engine = None
        cls._session_factory = None


async def init_db() -> None:
    """Create the sites and users tables when missing. Runs at startup."""
    from .models import site_model, user_model  # noqa: F401

    async with DatabaseManager.get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ready")


async def health_check() -> bool:
    """True when a trivial query succeeds."""
    try:
        async with DatabaseManager.get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except (SQLAlchemyError, OSError) as exc:
        logger.warning(f"Database health check failed: {exc}")
        return False


def get_unit_of_work():
    """
    Unit of work bound to the shared session factory.

    Usage:
        async with get_unit_of_work() as uow:
            site = await uow.sites.get_by_id(site_id)
            await uow.commit()
    """
    from .unit_of_work import SQLAlchemyUnitOfWork
    return SQLAlchemyUnitOfWork(DatabaseManager.get_session_factory())
