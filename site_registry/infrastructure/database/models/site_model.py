"""
SQLAlchemy model for Site entity.

A site row is a self-contained document: scalars are columns, nested
values are JSON.
"""
from typing import Any, Dict

from sqlalchemy import Column, DateTime, Enum, Integer, String, Text

from .base import Base, JSONDocument, TimestampMixin
from ....domain.entities.base import ensure_utc
from ....domain.entities.power_source import PowerSourceKind, details_type_for
from ....domain.entities.site import (
    Location,
    Site,
    SiteCapacity,
    SiteStatus,
    Technician,
)


class SiteModel(TimestampMixin, Base):
    """SQLAlchemy model for sites table."""

    __tablename__ = 'sites'

    # Client- or server-assigned, never auto-incremented
    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(200), nullable=False)
    address = Column(String(500), nullable=False)
    height = Column(String(50), nullable=False)
    status = Column(
        Enum(SiteStatus, name='site_status'),
        default=SiteStatus.ACTIVE,
        nullable=False,
        index=True
    )
    capacity = Column(
        Enum(SiteCapacity, name='site_capacity'),
        default=SiteCapacity.MEDIUM,
        nullable=False
    )
    uptime = Column(String(20), default='0%', nullable=False)

    # Nested documents
    location = Column(JSONDocument, nullable=False)
    power_sources = Column(JSONDocument, default=list, nullable=False)
    power_source_details = Column(JSONDocument, default=dict, nullable=False)
    tags = Column(JSONDocument, default=list, nullable=False)
    technician = Column(JSONDocument, nullable=True)

    installation_date = Column(DateTime(timezone=True), nullable=True)
    last_maintenance = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)
    created_by = Column(String(50), nullable=True)

    def to_domain(self) -> Site:
        """Convert ORM model to domain entity."""
        kinds = tuple(PowerSourceKind.parse(value) for value in self.power_sources or [])
        stored = self.power_source_details or {}
        details = {
            kind: details_type_for(kind).from_dict(stored[kind.key])
            for kind in kinds
            if kind.key in stored
        }
        return Site(
            id=self.id,
            name=self.name,
            address=self.address,
            height=self.height,
            location=Location(lat=self.location['lat'], lng=self.location['lng']),
            status=self.status,
            uptime=self.uptime,
            power_sources=kinds,
            power_source_details=details,
            capacity=self.capacity,
            tags=tuple(self.tags or ()),
            installation_date=ensure_utc(self.installation_date),
            last_maintenance=ensure_utc(self.last_maintenance),
            technician=Technician.from_dict(self.technician) if self.technician else None,
            notes=self.notes,
            created_by=self.created_by,
            created_at=ensure_utc(self.created_at),
            updated_at=ensure_utc(self.updated_at) or ensure_utc(self.created_at),
        )

    @classmethod
    def from_domain(cls, site: Site) -> 'SiteModel':
        """Create ORM model from domain entity."""
        model = cls(id=site.id, created_at=site.created_at, created_by=site.created_by)
        model.update_from_domain(site)
        return model

    def update_from_domain(self, site: Site) -> None:
        """Update ORM model from domain entity."""
        self.name = site.name
        self.address = site.address
        self.height = site.height
        self.status = site.status
        self.capacity = site.capacity
        self.uptime = site.uptime
        self.location = site.location.to_dict()
        self.power_sources = [kind.value for kind in site.power_sources]
        self.power_source_details = _details_document(site)
        self.tags = list(site.tags)
        self.technician = site.technician.to_dict() if site.technician else None
        self.installation_date = site.installation_date
        self.last_maintenance = site.last_maintenance
        self.notes = site.notes
        self.updated_at = site.updated_at


def _details_document(site: Site) -> Dict[str, Any]:
    return {
        kind.key: details.to_dict()
        for kind, details in site.power_source_details.items()
        if kind in site.power_sources
    }
