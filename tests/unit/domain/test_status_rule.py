"""
Unit tests for the active-status maintenance rule.
"""
from datetime import datetime, timezone

import pytest

from site_registry.domain.entities.site import SiteStatus
from site_registry.domain.services.status_rule import apply_status_transition

NOW = datetime(2026, 3, 3, 11, 0, tzinfo=timezone.utc)
EARLIER = datetime(2025, 12, 1, 0, 0, tzinfo=timezone.utc)


class TestApplyStatusTransition:
    """Test status transitions."""

    @pytest.mark.parametrize("current", list(SiteStatus))
    def test_active_records_maintenance_now(self, current):
        """Test moving to active always stamps lastMaintenance, even from active."""
        status, last_maintenance = apply_status_transition(current, EARLIER, SiteStatus.ACTIVE, NOW)

        assert status == SiteStatus.ACTIVE
        assert last_maintenance == NOW

    @pytest.mark.parametrize("target", [SiteStatus.INACTIVE, SiteStatus.MAINTENANCE])
    def test_other_statuses_keep_maintenance(self, target):
        status, last_maintenance = apply_status_transition(SiteStatus.ACTIVE, EARLIER, target, NOW)

        assert status == target
        assert last_maintenance == EARLIER

    def test_none_maintenance_is_kept(self):
        _, last_maintenance = apply_status_transition(SiteStatus.ACTIVE, None, SiteStatus.INACTIVE, NOW)

        assert last_maintenance is None
