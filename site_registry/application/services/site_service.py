"""
Site application service.

Orchestrates the site schema, reconciler and persistence. Each method
runs inside the caller's unit of work and commits only on success, so a
rejected update leaves the stored record untouched.
"""
import logging
from typing import Any, Callable, List, Mapping, Optional

from ..interfaces.unit_of_work import UnitOfWork
from ...domain.entities.base import utc_now
from ...domain.entities.site import Site, SiteStatus
from ...domain.exceptions import DomainException, DuplicateIdError, NotFoundError
from ...domain.services.site_reconciler import SiteReconciler
from ...domain.services.site_schema import check_shape, normalize_site_payload, parse_site_id
from ...domain.services.site_search import SiteSearchSpecification

logger = logging.getLogger(__name__)


class SiteService:
    """
    Application service for the site registry.

    Handles listing, creation, the three update scopes and deletion.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        reconciler: Optional[SiteReconciler] = None,
        clock: Callable = utc_now,
    ):
        self._uow = uow
        self._reconciler = reconciler or SiteReconciler()
        self._clock = clock

    # =========================================================================
    # Queries
    # =========================================================================

    async def list_sites(
        self,
        status: Optional[str] = None,
        query: Optional[str] = None,
    ) -> List[Site]:
        """
        List sites newest first.

        Args:
            status: Optional status filter, trimmed and lower-cased
            query: Optional free-text search

        Raises:
            InvalidEnumError: status is not a known value
        """
        status_filter = None
        if status is not None and status.strip():
            status_filter = SiteStatus.parse(status)

        sites = await self._uow.sites.list(status=status_filter)
        if query and query.strip():
            spec = SiteSearchSpecification(query)
            sites = [site for site in sites if spec.is_satisfied_by(site)]
        return sites

    async def get_site(self, site_id: int) -> Site:
        """
        Raises:
            NotFoundError: no site with this id
        """
        site = await self._uow.sites.get_by_id(site_id)
        if site is None:
            raise NotFoundError("Site", site_id)
        return site

    # =========================================================================
    # Commands
    # =========================================================================

    async def create_site(
        self,
        payload: Mapping[str, Any],
        created_by: Optional[str] = None,
    ) -> Site:
        """
        Create a site from a raw payload.

        A missing id is assigned as one more than the current maximum.

        Raises:
            ShapeError, InvalidEnumError, SiteValidationError: invalid payload
            DuplicateIdError: id already in use
        """
        check_shape(payload)
        now = self._clock()

        if payload.get('id') is not None:
            site_id = parse_site_id(payload['id'])
            if await self._uow.sites.exists(site_id):
                raise DuplicateIdError("Site", site_id)
        else:
            site_id = await self._uow.sites.next_id()

        try:
            site = normalize_site_payload(
                payload,
                site_id=site_id,
                now=now,
                created_by=created_by,
                validator=self._reconciler.validator,
            )
        except DomainException as exc:
            logger.warning(f"Rejected new site {site_id}: {exc.message}")
            raise

        created = await self._uow.sites.add(site)
        await self._uow.commit()

        logger.info(f"Created site {created.id} ({created.name})")
        return created

    async def update_site(self, site_id: int, payload: Mapping[str, Any]) -> Site:
        """
        Full update with reconciliation against the stored record.

        Raises:
            NotFoundError: no site with this id
            ImmutableFieldError: payload tries to change the id
            ShapeError, InvalidEnumError, SiteValidationError: invalid result
        """
        stored = await self.get_site(site_id)
        try:
            site = self._reconciler.full_update(stored, payload, self._clock())
        except DomainException as exc:
            logger.warning(f"Rejected update of site {site_id}: {exc.message}")
            raise

        updated = await self._uow.sites.update(site)
        await self._uow.commit()

        logger.info(f"Updated site {site_id}")
        return updated

    async def update_power_source(
        self,
        site_id: int,
        kind: str,
        fields: Mapping[str, Any],
    ) -> Site:
        """
        Power-only update of a single kind's details.

        Raises:
            NotFoundError: no site with this id
            InvalidEnumError: unknown kind
            SiteValidationError: invalid details
        """
        stored = await self.get_site(site_id)
        site = self._reconciler.power_only_update(stored, kind, fields, self._clock())

        updated = await self._uow.sites.update(site)
        await self._uow.commit()

        logger.info(f"Updated {kind} details of site {site_id}")
        return updated

    async def change_status(self, site_id: int, status: Any) -> Site:
        """
        Status-only update.

        Raises:
            NotFoundError: no site with this id
            InvalidEnumError: status is not active, inactive or maintenance
        """
        stored = await self.get_site(site_id)
        site = self._reconciler.change_status(stored, status, self._clock())

        updated = await self._uow.sites.update(site)
        await self._uow.commit()

        logger.info(f"Site {site_id} status {stored.status.value} -> {updated.status.value}")
        return updated

    async def delete_site(self, site_id: int) -> Site:
        """
        Delete a site immediately.

        Returns:
            The deleted site

        Raises:
            NotFoundError: no site with this id
        """
        deleted = await self._uow.sites.delete(site_id)
        if deleted is None:
            raise NotFoundError("Site", site_id)
        await self._uow.commit()

        logger.info(f"Deleted site {site_id}")
        return deleted
