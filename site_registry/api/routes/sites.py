"""
Site management API endpoints.

Reads are public. Changing status needs any signed-in identity; every
other write needs an administrator.
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from ..dependencies import get_current_identity, get_site_service, require_admin
from ..schemas.auth_schemas import ErrorResponse
from ..schemas.site_schemas import DeleteSiteResponse, SiteResponse, SiteStatusUpdate
from ...application.services.site_service import SiteService
from ...domain.entities.user import Identity

router = APIRouter(prefix="/sites", tags=["Sites"])

SITE_EXAMPLE = {
    "id": 2001,
    "name": "Tower A",
    "address": "X",
    "height": "30m",
    "location": {"lat": 9.03, "lng": 38.74},
    "powerSources": ["Generator"],
    "powerSourceDetails": {"generator": {"type": "cat", "capacity": 100}},
}


@router.get(
    "",
    response_model=List[SiteResponse],
    responses={400: {"model": ErrorResponse, "description": "Invalid status filter"}},
)
async def list_sites(
    status_filter: Optional[str] = Query(None, alias="status", description="active, inactive or maintenance"),
    q: Optional[str] = Query(None, description="Free-text search"),
    site_service: SiteService = Depends(get_site_service),
):
    """List sites, newest first."""
    sites = await site_service.list_sites(status=status_filter, query=q)
    return [SiteResponse.from_domain(site) for site in sites]


@router.get(
    "/{site_id}",
    response_model=SiteResponse,
    responses={404: {"model": ErrorResponse, "description": "Site not found"}},
)
async def get_site(
    site_id: int,
    site_service: SiteService = Depends(get_site_service),
):
    """Fetch one site by id."""
    site = await site_service.get_site(site_id)
    return SiteResponse.from_domain(site)


@router.post(
    "",
    response_model=SiteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Duplicate id or invalid site"}},
)
async def create_site(
    payload: Dict[str, Any] = Body(..., examples=[SITE_EXAMPLE]),
    identity: Identity = Depends(require_admin),
    site_service: SiteService = Depends(get_site_service),
):
    """
    Create a site.

    When no id is given the next one is assigned (highest + 1, starting at 1010).
    """
    site = await site_service.create_site(payload, created_by=identity.username)
    return SiteResponse.from_domain(site)


@router.put(
    "/{site_id}",
    response_model=SiteResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid site or id change"},
        404: {"model": ErrorResponse, "description": "Site not found"},
    },
)
async def update_site(
    site_id: int,
    payload: Dict[str, Any] = Body(...),
    identity: Identity = Depends(require_admin),
    site_service: SiteService = Depends(get_site_service),
):
    """
    Full update.

    Details of power sources missing from powerSources are removed.
    """
    site = await site_service.update_site(site_id, payload)
    return SiteResponse.from_domain(site)


@router.patch(
    "/{site_id}/power-sources/{kind}",
    response_model=SiteResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Unknown kind or invalid details"},
        404: {"model": ErrorResponse, "description": "Site not found"},
    },
)
async def update_power_source(
    site_id: int,
    kind: str,
    fields: Dict[str, Any] = Body(...),
    identity: Identity = Depends(require_admin),
    site_service: SiteService = Depends(get_site_service),
):
    """Replace the details of one power-source kind, leaving the rest of the site alone."""
    site = await site_service.update_power_source(site_id, kind, fields)
    return SiteResponse.from_domain(site)


@router.patch(
    "/{site_id}/status",
    response_model=SiteResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid status value"},
        404: {"model": ErrorResponse, "description": "Site not found"},
    },
)
async def change_status(
    site_id: int,
    request: SiteStatusUpdate,
    identity: Identity = Depends(get_current_identity),
    site_service: SiteService = Depends(get_site_service),
):
    """Change only the status. Moving to active records a maintenance visit."""
    site = await site_service.change_status(site_id, request.status)
    return SiteResponse.from_domain(site)


@router.delete(
    "/{site_id}",
    response_model=DeleteSiteResponse,
    responses={404: {"model": ErrorResponse, "description": "Site not found"}},
)
async def delete_site(
    site_id: int,
    identity: Identity = Depends(require_admin),
    site_service: SiteService = Depends(get_site_service),
):
    """Delete a site permanently."""
    site = await site_service.delete_site(site_id)
    return DeleteSiteResponse(
        message="Site deleted successfully",
        site=SiteResponse.from_domain(site),
    )
