"""
Pydantic schemas for site endpoints.

Request bodies for create, update and power-only edits are plain JSON
objects handed to the domain schema, so every problem is reported in
one aggregated error. The models here describe responses.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ...domain.entities.site import Site


class CamelModel(BaseModel):
    """Base model using camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LocationSchema(CamelModel):
    """Geographic coordinates."""
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class TechnicianSchema(CamelModel):
    name: Optional[str] = None
    phone: Optional[str] = None


class SiteResponse(CamelModel):
    """Site as returned by the API."""
    id: int
    name: str
    address: str
    height: str
    location: LocationSchema
    status: str
    uptime: str
    power_sources: List[str]
    power_source_details: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict,
        description="Kind-specific details keyed by lower-case kind"
    )
    capacity: str
    tags: List[str]
    installation_date: Optional[str] = Field(None, description="ISO-8601 timestamp")
    last_maintenance: Optional[str] = Field(None, description="ISO-8601 timestamp")
    technician: Optional[TechnicianSchema] = None
    notes: Optional[str] = None
    created_by: Optional[str] = None
    created_at: str
    updated_at: str

    @classmethod
    def from_domain(cls, site: Site) -> 'SiteResponse':
        return cls.model_validate(site.to_dict())


class SiteStatusUpdate(BaseModel):
    """Request to change only the status."""
    status: Optional[str] = Field(None, description="active, inactive or maintenance")


class DeleteSiteResponse(BaseModel):
    message: str
    site: SiteResponse
