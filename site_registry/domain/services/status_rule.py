"""
Status transition rule.

Moving a site to active records a maintenance visit at the moment of
the transition, overriding any other last-maintenance value.
"""
from datetime import datetime
from typing import Optional, Tuple

from ..entities.site import SiteStatus


def apply_status_transition(
    current_status: SiteStatus,
    current_last_maintenance: Optional[datetime],
    new_status: SiteStatus,
    now: datetime,
) -> Tuple[SiteStatus, Optional[datetime]]:
    """
    Compute the status and last-maintenance pair after a status change.

    Returns:
        (active, now) when the new status is active, otherwise the new
        status with the last-maintenance value unchanged
    """
    if new_status == SiteStatus.ACTIVE:
        return SiteStatus.ACTIVE, now
    return new_status, current_last_maintenance
