"""
SQLAlchemy implementation of SiteRepository.
"""
import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ....application.interfaces.repositories import SiteRepository
from ....domain.entities.site import Site, SiteStatus
from ....domain.exceptions import DuplicateIdError
from ..models.site_model import SiteModel

logger = logging.getLogger(__name__)


class SQLAlchemySiteRepository(SiteRepository):
    """SQLAlchemy implementation of site repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def _get_model(self, site_id: int) -> Optional[SiteModel]:
        result = await self._session.execute(
            select(SiteModel).where(SiteModel.id == site_id)
        )
        return result.scalar_one_or_none()

    async def get_by_id(self, site_id: int) -> Optional[Site]:
        """Get site by id."""
        model = await self._get_model(site_id)
        return model.to_domain() if model else None

    async def list(self, status: Optional[SiteStatus] = None) -> List[Site]:
        """List sites newest first."""
        query = select(SiteModel)
        if status is not None:
            query = query.where(SiteModel.status == status)
        query = query.order_by(SiteModel.created_at.desc(), SiteModel.id.desc())

        result = await self._session.execute(query)
        return [m.to_domain() for m in result.scalars().all()]

    async def next_id(self) -> int:
        result = await self._session.execute(select(func.max(SiteModel.id)))
        current = result.scalar()
        return current + 1 if current is not None else self.FIRST_SITE_ID

    async def exists(self, site_id: int) -> bool:
        result = await self._session.execute(
            select(func.count()).select_from(SiteModel).where(SiteModel.id == site_id)
        )
        return (result.scalar() or 0) > 0

    async def add(self, entity: Site) -> Site:
        """
        Add new site.

        A primary-key clash raised by the store (e.g. a concurrent create
        with the same id) surfaces as DuplicateIdError.
        """
        model = SiteModel.from_domain(entity)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            logger.warning(f"Store rejected site {entity.id}: {exc.orig}")
            raise DuplicateIdError("Site", entity.id) from exc
        return model.to_domain()

    async def update(self, entity: Site) -> Site:
        """Update existing site."""
        model = await self._get_model(entity.id)
        if model:
            model.update_from_domain(entity)
            await self._session.flush()
            return model.to_domain()
        return entity

    async def delete(self, site_id: int) -> Optional[Site]:
        """Delete site by id, returning what was deleted."""
        model = await self._get_model(site_id)
        if model is None:
            return None
        site = model.to_domain()
        await self._session.delete(model)
        await self._session.flush()
        return site
