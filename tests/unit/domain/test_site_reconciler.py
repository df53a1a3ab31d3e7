"""
Unit tests for SiteReconciler.

Tests the three update scopes: full update, power-only update and
status-only update.
"""
from datetime import datetime, timezone

import pytest

from site_registry.domain.entities.power_source import PowerSourceKind
from site_registry.domain.entities.site import SiteStatus
from site_registry.domain.exceptions import (
    ImmutableFieldError,
    InvalidEnumError,
    ShapeError,
    SiteValidationError,
)
from site_registry.domain.services.site_reconciler import SiteReconciler
from tests.factories import GridDetailsFactory, SolarDetailsFactory, build_site

CREATED = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
LATER = datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc)
MAINTAINED = datetime(2026, 2, 1, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def reconciler():
    return SiteReconciler()


@pytest.fixture
def stored():
    """Tower A with generator and grid power, last maintained in February."""
    return build_site(
        now=CREATED,
        id=2001,
        name="Tower A",
        address="X",
        powerSources=["Generator", "Grid"],
        powerSourceDetails={
            "generator": {"type": "cat", "capacity": 100},
            "grid": GridDetailsFactory(voltage=230),
        },
        lastMaintenance=MAINTAINED.isoformat(),
        tags=["north"],
    )


class TestFullUpdate:
    """Test full updates."""

    def test_merges_top_level_fields(self, reconciler, stored):
        """Test non-null incoming values replace stored ones and the rest is kept."""
        site = reconciler.full_update(stored, {"name": "Tower B", "address": None}, LATER)

        assert site.name == "Tower B"
        assert site.address == "X"
        assert site.tags == ("north",)
        assert site.created_at == CREATED
        assert site.updated_at == LATER
        assert site.created_by == stored.created_by

    def test_power_sources_replace_selection_and_purge(self, reconciler, stored):
        """Test kinds dropped from powerSources lose their details."""
        payload = {
            "powerSources": ["Grid", "Solar"],
            "powerSourceDetails": {
                "grid": GridDetailsFactory(voltage=400),
                "solar": SolarDetailsFactory(),
                "generator": {"type": "cat", "capacity": 100},
            },
        }

        site = reconciler.full_update(stored, payload, LATER)

        assert site.power_sources == (PowerSourceKind.GRID, PowerSourceKind.SOLAR)
        assert set(site.to_dict()["powerSourceDetails"]) == {"grid", "solar"}
        assert site.details_for(PowerSourceKind.GRID).voltage == 400

    def test_empty_power_sources_purges_all_details(self, reconciler, stored):
        site = reconciler.full_update(stored, {"powerSources": []}, LATER)

        assert site.power_sources == ()
        assert site.power_source_details == {}

    def test_omitted_power_sources_merge_details_per_kind(self, reconciler, stored):
        """Test sub-records replace stored ones kind by kind when powerSources is absent."""
        payload = {"powerSourceDetails": {"generator": {"type": "perkins", "capacity": 250}}}

        site = reconciler.full_update(stored, payload, LATER)

        assert site.power_sources == stored.power_sources
        assert site.to_dict()["powerSourceDetails"]["generator"] == {"type": "perkins", "capacity": 250}
        assert site.details_for(PowerSourceKind.GRID) == stored.details_for(PowerSourceKind.GRID)

    def test_power_sources_without_details_keep_remaining_kinds(self, reconciler, stored):
        """Test deselecting a kind leaves the details of the kinds still selected intact."""
        site = reconciler.full_update(stored, {"powerSources": ["Grid"]}, LATER)

        assert site.power_sources == (PowerSourceKind.GRID,)
        assert set(site.power_source_details) == {PowerSourceKind.GRID}
        assert site.details_for(PowerSourceKind.GRID) == stored.details_for(PowerSourceKind.GRID)

    def test_newly_selected_kind_needs_details(self, reconciler, stored):
        with pytest.raises(SiteValidationError) as exc_info:
            reconciler.full_update(stored, {"powerSources": ["Grid", "Solar"]}, LATER)

        assert "Solar type is required" in exc_info.value.message

    def test_invalid_location_keeps_stored(self, reconciler, stored):
        site = reconciler.full_update(stored, {"location": {"lat": 200, "lng": "east"}}, LATER)

        assert site.location == stored.location

    def test_valid_location_replaces_stored(self, reconciler, stored):
        site = reconciler.full_update(stored, {"location": {"lat": 8.98, "lng": 38.79}}, LATER)

        assert site.location.to_dict() == {"lat": 8.98, "lng": 38.79}

    def test_same_id_allowed(self, reconciler, stored):
        site = reconciler.full_update(stored, {"id": "2001", "name": "Tower A2"}, LATER)

        assert site.id == 2001

    @pytest.mark.parametrize("attempted", [2002, "abc", 0])
    def test_id_change_rejected(self, reconciler, stored, attempted):
        with pytest.raises(ImmutableFieldError) as exc_info:
            reconciler.full_update(stored, {"id": attempted}, LATER)

        assert exc_info.value.message == "Site id cannot be changed"

    def test_read_only_fields_ignored(self, reconciler, stored):
        payload = {"createdAt": "1999-01-01T00:00:00Z", "createdBy": "mallory"}

        site = reconciler.full_update(stored, payload, LATER)

        assert site.created_at == CREATED
        assert site.created_by == stored.created_by

    def test_invalid_merged_record_rejected(self, reconciler, stored):
        """Test the stored record is unchanged when the update is invalid."""
        before = stored.to_dict()
        payload = {"powerSources": ["Grid"], "powerSourceDetails": {"grid": {"connectionType": "single_phase", "load": 5}}}

        with pytest.raises(SiteValidationError) as exc_info:
            reconciler.full_update(stored, payload, LATER)

        assert exc_info.value.message == "Grid voltage is required"
        assert stored.to_dict() == before

    def test_non_object_payload(self, reconciler, stored):
        with pytest.raises(ShapeError):
            reconciler.full_update(stored, ["name"], LATER)

    def test_status_active_records_maintenance(self, reconciler, stored):
        stored = reconciler.change_status(stored, "inactive", CREATED)

        site = reconciler.full_update(stored, {"status": "active"}, LATER)

        assert site.status == SiteStatus.ACTIVE
        assert site.last_maintenance == LATER

    def test_active_overrides_incoming_maintenance(self, reconciler, stored):
        payload = {"status": "active", "lastMaintenance": "2025-01-01T00:00:00Z"}

        site = reconciler.full_update(stored, payload, LATER)

        assert site.last_maintenance == LATER

    def test_without_status_maintenance_untouched(self, reconciler, stored):
        site = reconciler.full_update(stored, {"name": "Tower A"}, LATER)

        assert site.status == SiteStatus.ACTIVE
        assert site.last_maintenance == MAINTAINED

    def test_non_active_status_keeps_maintenance(self, reconciler, stored):
        site = reconciler.full_update(stored, {"status": "Maintenance"}, LATER)

        assert site.status == SiteStatus.MAINTENANCE
        assert site.last_maintenance == MAINTAINED


class TestPowerOnlyUpdate:
    """Test single-kind detail updates."""

    def test_replaces_one_kind(self, reconciler, stored):
        site = reconciler.power_only_update(stored, "grid", {"connectionType": "three_phase", "voltage": 400, "load": 20}, LATER)

        assert site.details_for(PowerSourceKind.GRID).voltage == 400
        assert site.details_for(PowerSourceKind.GENERATOR) == stored.details_for(PowerSourceKind.GENERATOR)
        assert site.name == stored.name
        assert site.status == stored.status
        assert site.updated_at == LATER

    def test_adds_kind_when_absent(self, reconciler, stored):
        site = reconciler.power_only_update(stored, "Solar", SolarDetailsFactory(), LATER)

        assert site.power_sources == (
            PowerSourceKind.GENERATOR,
            PowerSourceKind.GRID,
            PowerSourceKind.SOLAR,
        )

    def test_idempotent(self, reconciler, stored):
        """Test applying the same update twice yields the same details."""
        fields = {"type": "perkins", "capacity": 80}

        once = reconciler.power_only_update(stored, "generator", fields, LATER)
        twice = reconciler.power_only_update(once, "generator", fields, LATER)

        assert once.to_dict() == twice.to_dict()

    def test_unknown_kind(self, reconciler, stored):
        with pytest.raises(InvalidEnumError) as exc_info:
            reconciler.power_only_update(stored, "wind", {}, LATER)

        assert exc_info.value.field == "kind"

    def test_invalid_details(self, reconciler, stored):
        with pytest.raises(SiteValidationError) as exc_info:
            reconciler.power_only_update(stored, "generator", {"type": "cat", "capacity": 0}, LATER)

        assert exc_info.value.message == "Generator capacity must be a positive number"

    def test_non_object_body(self, reconciler, stored):
        with pytest.raises(ShapeError):
            reconciler.power_only_update(stored, "grid", [1, 2], LATER)


class TestChangeStatus:
    """Test status-only updates."""

    def test_to_active_stamps_maintenance(self, reconciler, stored):
        site = reconciler.change_status(stored, "ACTIVE", LATER)

        assert site.status == SiteStatus.ACTIVE
        assert site.last_maintenance == LATER
        assert site.updated_at == LATER

    def test_to_inactive_keeps_everything_else(self, reconciler, stored):
        site = reconciler.change_status(stored, " inactive ", LATER)

        assert site.status == SiteStatus.INACTIVE
        assert site.last_maintenance == MAINTAINED
        assert site.power_source_details == stored.power_source_details

    @pytest.mark.parametrize("status", ["closed", "", None])
    def test_invalid_status(self, reconciler, stored, status):
        with pytest.raises(InvalidEnumError):
            reconciler.change_status(stored, status, LATER)
