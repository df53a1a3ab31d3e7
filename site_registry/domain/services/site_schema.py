"""
Site record schema.

Turns a raw camelCase payload into a normalized Site: checks the shape
of top-level fields, parses enums, applies defaults, validates the
power-source details of the selected kinds, and drops details for kinds
that are not selected.
"""
import math
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..entities.base import parse_timestamp
from ..entities.power_source import (
    PowerSourceDetails,
    PowerSourceKind,
    details_type_for,
    is_blank,
)
from ..entities.site import Location, Site, SiteCapacity, SiteStatus, Technician
from ..exceptions import InvalidEnumError, ShapeError
from .site_validator import DETAILS_PREFIX, SiteValidator, flatten_details

REQUIRED_TEXT_FIELDS = ('name', 'address', 'height')
OPTIONAL_TEXT_FIELDS = ('uptime', 'notes')
TIMESTAMP_FIELDS = ('installationDate', 'lastMaintenance')

DEFAULT_UPTIME = "0%"


def _coordinate(value: Any, limit: float) -> Optional[float]:
    """Return the coordinate as float, or None when it is not a usable number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value) or not -limit <= value <= limit:
        return None
    return float(value)


def parse_location(value: Any) -> Optional[Location]:
    if not isinstance(value, Mapping):
        return None
    lat = _coordinate(value.get('lat'), 90)
    lng = _coordinate(value.get('lng'), 180)
    if lat is None or lng is None:
        return None
    return Location(lat=lat, lng=lng)


def is_valid_location(value: Any) -> bool:
    return parse_location(value) is not None


def parse_site_id(value: Any) -> int:
    """
    Parse a client-supplied site id.

    Raises:
        ShapeError: if the id is not a positive integer
    """
    site_id: Optional[int] = None
    if isinstance(value, int) and not isinstance(value, bool):
        site_id = value
    elif isinstance(value, str) and value.strip().isdigit():
        site_id = int(value.strip())
    if site_id is None or site_id <= 0:
        raise ShapeError(errors={'id': ['Site id must be a positive integer']})
    return site_id


def normalize_tags(value: Any) -> Tuple[str, ...]:
    """Accept a list or a comma-separated string; trim, drop empties, de-duplicate."""
    if value is None:
        return ()
    items = value.split(',') if isinstance(value, str) else value
    tags: List[str] = []
    for item in items:
        tag = item.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tuple(tags)


def _selected_keys(sources: Any) -> List[str]:
    """Detail keys of the recognized kinds in a raw powerSources value."""
    if not isinstance(sources, list):
        return []
    keys: List[str] = []
    for item in sources:
        try:
            key = PowerSourceKind.parse(item).key
        except InvalidEnumError:
            continue
        if key not in keys:
            keys.append(key)
    return keys


def check_shape(payload: Any) -> None:
    """
    Check top-level field presence and primitive types.

    Raises:
        ShapeError: listing every problem found
    """
    if not isinstance(payload, Mapping):
        raise ShapeError("Site payload must be a JSON object")

    error = ShapeError()

    for name in REQUIRED_TEXT_FIELDS:
        value = payload.get(name)
        if value is None:
            error.add_error(name, f"Site {name} is required")
        elif not isinstance(value, str):
            error.add_error(name, f"Site {name} must be a string")
        elif not value.strip():
            error.add_error(name, f"Site {name} is required")

    for name in OPTIONAL_TEXT_FIELDS:
        value = payload.get(name)
        if value is not None and not isinstance(value, str):
            error.add_error(name, f"Site {name} must be a string")

    location = payload.get('location')
    if not isinstance(location, Mapping):
        error.add_error('location', "Site location is required")
    else:
        if _coordinate(location.get('lat'), 90) is None:
            error.add_error('location.lat', "Latitude must be a number between -90 and 90")
        if _coordinate(location.get('lng'), 180) is None:
            error.add_error('location.lng', "Longitude must be a number between -180 and 180")

    if payload.get('id') is not None:
        try:
            parse_site_id(payload['id'])
        except ShapeError as exc:
            for field, messages in exc.errors.items():
                for message in messages:
                    error.add_error(field, message)

    sources = payload.get('powerSources')
    if sources is not None and not isinstance(sources, list):
        error.add_error('powerSources', "Power sources must be a list")

    details = payload.get('powerSourceDetails')
    if details is not None:
        if not isinstance(details, Mapping):
            error.add_error(DETAILS_PREFIX, "Power source details must be an object")
        else:
            for key in _selected_keys(sources):
                sub = details.get(key)
                if sub is not None and not isinstance(sub, Mapping):
                    error.add_error(f"{DETAILS_PREFIX}.{key}", "Power source details must be an object")

    tags = payload.get('tags')
    if tags is not None:
        if isinstance(tags, list):
            if not all(isinstance(tag, str) for tag in tags):
                error.add_error('tags', "Tags must be strings")
        elif not isinstance(tags, str):
            error.add_error('tags', "Tags must be a list or a comma-separated string")

    technician = payload.get('technician')
    if technician is not None:
        if not isinstance(technician, Mapping):
            error.add_error('technician', "Technician must be an object")
        else:
            for name in ('name', 'phone'):
                value = technician.get(name)
                if value is not None and not isinstance(value, str):
                    error.add_error(f"technician.{name}", f"Technician {name} must be a string")

    for name in TIMESTAMP_FIELDS:
        value = payload.get(name)
        if is_blank(value):
            continue
        try:
            parse_timestamp(value)
        except ValueError:
            error.add_error(name, f"Site {name} must be an ISO-8601 timestamp")

    if error.has_errors:
        raise error


def parse_power_sources(value: Any) -> Tuple[PowerSourceKind, ...]:
    """Parse selected kinds, keeping first occurrence order."""
    kinds: List[PowerSourceKind] = []
    for item in value or []:
        kind = PowerSourceKind.parse(item)
        if kind not in kinds:
            kinds.append(kind)
    return tuple(kinds)


def selected_details(
    kinds: Tuple[PowerSourceKind, ...],
    details: Optional[Mapping[str, Any]],
) -> Dict[PowerSourceKind, Mapping[str, Any]]:
    """Raw sub-records for the selected kinds only."""
    details = details or {}
    return {kind: details.get(kind.key) or {} for kind in kinds}


def normalize_site_payload(
    payload: Mapping[str, Any],
    *,
    site_id: int,
    now: datetime,
    created_by: Optional[str] = None,
    created_at: Optional[datetime] = None,
    validator: Optional[SiteValidator] = None,
) -> Site:
    """
    Build a normalized Site from a raw payload.

    Args:
        payload: camelCase site payload
        site_id: Identifier to assign
        now: Operation timestamp, used for defaults
        created_by: Username recorded as the creator
        created_at: Creation time to keep (updates), defaults to now
        validator: Power-source validator

    Raises:
        ShapeError: malformed top-level fields
        InvalidEnumError: unknown status, capacity or power-source kind
        SiteValidationError: power-source detail violations
    """
    check_shape(payload)
    validator = validator or SiteValidator()

    status = SiteStatus.ACTIVE
    if not is_blank(payload.get('status')):
        status = SiteStatus.parse(payload['status'])

    capacity = SiteCapacity.MEDIUM
    if not is_blank(payload.get('capacity')):
        capacity = SiteCapacity.parse(payload['capacity'])

    kinds = parse_power_sources(payload.get('powerSources'))
    raw_details = selected_details(kinds, payload.get('powerSourceDetails'))
    flat = flatten_details({kind.key: sub for kind, sub in raw_details.items()})
    validator.validate(kinds, flat).raise_if_invalid()

    details: Dict[PowerSourceKind, PowerSourceDetails] = {
        kind: details_type_for(kind).from_dict(sub) for kind, sub in raw_details.items()
    }

    technician = payload.get('technician')
    created_at = created_at or now

    return Site(
        id=site_id,
        name=payload['name'].strip(),
        address=payload['address'].strip(),
        height=payload['height'].strip(),
        location=parse_location(payload['location']),
        status=status,
        uptime=payload.get('uptime') or DEFAULT_UPTIME,
        power_sources=kinds,
        power_source_details=details,
        capacity=capacity,
        tags=normalize_tags(payload.get('tags')),
        installation_date=_optional_timestamp(payload.get('installationDate')),
        last_maintenance=_optional_timestamp(payload.get('lastMaintenance')),
        technician=Technician.from_dict(technician) if technician else None,
        notes=payload.get('notes'),
        created_by=created_by,
        created_at=created_at,
        updated_at=max(now, created_at),
    )


def _optional_timestamp(value: Any) -> Optional[datetime]:
    if is_blank(value):
        return None
    return parse_timestamp(value)
