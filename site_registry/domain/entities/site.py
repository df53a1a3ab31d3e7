"""
Site domain entity and related value objects.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from .base import format_timestamp
from .power_source import PowerSourceDetails, PowerSourceKind
from ..exceptions import InvalidEnumError


class SiteStatus(str, Enum):
    """Site operational status."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    MAINTENANCE = "maintenance"

    @classmethod
    def parse(cls, value: Any, field: str = 'status') -> 'SiteStatus':
        """Trim and lower-case before matching."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidEnumError(field, value, [s.value for s in cls])


class SiteCapacity(str, Enum):
    """Coarse capacity class of a site."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def parse(cls, value: Any, field: str = 'capacity') -> 'SiteCapacity':
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            wanted = value.strip().lower()
            for capacity in cls:
                if capacity.value.lower() == wanted:
                    return capacity
        raise InvalidEnumError(field, value, [c.value for c in cls])


@dataclass(frozen=True)
class Location:
    """Geographic coordinates value object."""
    lat: float
    lng: float

    def to_dict(self) -> Dict[str, float]:
        return {'lat': self.lat, 'lng': self.lng}


@dataclass(frozen=True)
class Technician:
    """Field technician responsible for a site."""
    name: Optional[str] = None
    phone: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {'name': self.name, 'phone': self.phone}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Technician':
        return cls(name=data.get('name'), phone=data.get('phone'))


@dataclass(frozen=True)
class Site:
    """
    Site aggregate.

    Immutable: every update path returns a new instance. Only kinds
    listed in power_sources carry an entry in power_source_details.
    """
    id: int
    name: str
    address: str
    height: str
    location: Location
    created_at: datetime
    updated_at: datetime
    status: SiteStatus = SiteStatus.ACTIVE
    uptime: str = "0%"
    power_sources: Tuple[PowerSourceKind, ...] = ()
    power_source_details: Dict[PowerSourceKind, PowerSourceDetails] = field(default_factory=dict)
    capacity: SiteCapacity = SiteCapacity.MEDIUM
    tags: Tuple[str, ...] = ()
    installation_date: Optional[datetime] = None
    last_maintenance: Optional[datetime] = None
    technician: Optional[Technician] = None
    notes: Optional[str] = None
    created_by: Optional[str] = None

    def details_for(self, kind: PowerSourceKind) -> Optional[PowerSourceDetails]:
        return self.power_source_details.get(kind)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase wire format."""
        return {
            'id': self.id,
            'name': self.name,
            'address': self.address,
            'height': self.height,
            'location': self.location.to_dict(),
            'status': self.status.value,
            'uptime': self.uptime,
            'powerSources': [kind.value for kind in self.power_sources],
            'powerSourceDetails': {
                kind.key: self.power_source_details[kind].to_dict()
                for kind in self.power_sources
                if kind in self.power_source_details
            },
            'capacity': self.capacity.value,
            'tags': list(self.tags),
            'installationDate': format_timestamp(self.installation_date),
            'lastMaintenance': format_timestamp(self.last_maintenance),
            'technician': self.technician.to_dict() if self.technician else None,
            'notes': self.notes,
            'createdBy': self.created_by,
            'createdAt': format_timestamp(self.created_at),
            'updatedAt': format_timestamp(self.updated_at),
        }
