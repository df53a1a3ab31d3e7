"""
Site Reconciler Domain Service.

Computes the next persisted state of a site from the stored record and
an update. Stored records are never mutated; every path returns a new
Site.
"""
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from ..entities.power_source import PowerSourceKind, details_type_for
from ..entities.site import Site, SiteStatus
from ..exceptions import ImmutableFieldError, ShapeError
from .site_schema import is_valid_location, normalize_site_payload, parse_site_id
from .site_validator import DETAILS_PREFIX, SiteValidator, flatten_details
from .status_rule import apply_status_transition

# Owned by the server, ignored when sent by clients
READ_ONLY_FIELDS = frozenset({'id', 'createdAt', 'updatedAt', 'createdBy'})
POWER_FIELDS = frozenset({'powerSources', DETAILS_PREFIX})


class SiteReconciler:
    """
    Pure domain service merging updates into stored sites.

    Supports three update scopes: the whole site, a single power-source
    kind, and the status alone.
    """

    def __init__(self, validator: Optional[SiteValidator] = None):
        self._validator = validator or SiteValidator()

    @property
    def validator(self) -> SiteValidator:
        return self._validator

    def full_update(self, stored: Site, payload: Mapping[str, Any], now: datetime) -> Site:
        """
        Merge a full update over the stored site.

        Non-null top-level values replace stored ones; an invalid
        location keeps the stored one. Incoming sub-records replace stored
        ones per kind; kinds without one keep their stored details. When
        powerSources is given, details of every kind left out of it are
        purged.

        Raises:
            ImmutableFieldError: payload id differs from the stored id
            ShapeError, InvalidEnumError, SiteValidationError: merged
                record is invalid
        """
        if not isinstance(payload, Mapping):
            raise ShapeError("Site payload must be a JSON object")
        self._check_id(stored, payload.get('id'))

        current = stored.to_dict()
        merged: Dict[str, Any] = dict(current)
        for key, value in payload.items():
            if key in READ_ONLY_FIELDS or key in POWER_FIELDS or value is None:
                continue
            if key == 'location' and not is_valid_location(value):
                continue
            merged[key] = value

        if payload.get('powerSources') is not None:
            merged['powerSources'] = payload['powerSources']

        # Deselected kinds are dropped later by normalize_site_payload
        incoming_details = payload.get(DETAILS_PREFIX)
        if isinstance(incoming_details, Mapping):
            details = dict(current[DETAILS_PREFIX])
            for key, sub in incoming_details.items():
                if sub is not None:
                    details[key] = sub
            merged[DETAILS_PREFIX] = details
        elif incoming_details is not None:
            merged[DETAILS_PREFIX] = incoming_details

        site = normalize_site_payload(
            merged,
            site_id=stored.id,
            now=now,
            created_by=stored.created_by,
            created_at=stored.created_at,
            validator=self._validator,
        )

        if payload.get('status') is not None:
            status, last_maintenance = apply_status_transition(
                stored.status, site.last_maintenance, site.status, now
            )
            site = replace(site, status=status, last_maintenance=last_maintenance)
        return site

    def power_only_update(
        self,
        stored: Site,
        kind: Any,
        fields: Mapping[str, Any],
        now: datetime,
    ) -> Site:
        """
        Replace the details of one power-source kind.

        The kind is added to the selection when absent. Nothing else on
        the site changes apart from updatedAt.

        Raises:
            InvalidEnumError: unknown kind
            SiteValidationError: the new details are invalid
        """
        kind = PowerSourceKind.parse(kind, field='kind')
        if not isinstance(fields, Mapping):
            raise ShapeError(errors={
                f"{DETAILS_PREFIX}.{kind.key}": ["Power source details must be an object"]
            })

        flat = flatten_details({kind.key: fields})
        self._validator.validate([kind], flat).raise_if_invalid()

        power_sources = stored.power_sources
        if kind not in power_sources:
            power_sources = power_sources + (kind,)
        details = dict(stored.power_source_details)
        details[kind] = details_type_for(kind).from_dict(fields)

        return replace(
            stored,
            power_sources=power_sources,
            power_source_details=details,
            updated_at=self._touch(stored, now),
        )

    def change_status(self, stored: Site, new_status: Any, now: datetime) -> Site:
        """
        Set the status, applying the active-status maintenance rule.

        Raises:
            InvalidEnumError: status is not active, inactive or maintenance
        """
        status = SiteStatus.parse(new_status)
        status, last_maintenance = apply_status_transition(
            stored.status, stored.last_maintenance, status, now
        )
        return replace(
            stored,
            status=status,
            last_maintenance=last_maintenance,
            updated_at=self._touch(stored, now),
        )

    @staticmethod
    def _check_id(stored: Site, attempted: Any) -> None:
        if attempted is None:
            return
        try:
            same = parse_site_id(attempted) == stored.id
        except ShapeError:
            same = False
        if not same:
            raise ImmutableFieldError('id', stored.id, attempted)

    @staticmethod
    def _touch(stored: Site, now: datetime) -> datetime:
        return max(now, stored.created_at)
