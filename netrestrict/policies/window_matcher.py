"""Decides whether a schedule's time window is open for a device.

All matching happens in the device's own time zone at minute granularity.
Nothing here raises: missing zones, unknown zones and malformed times all
make the schedule inactive.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional, Union

from netrestrict.models import Device, Schedule
from netrestrict.policies.timeutil import local_clock, parse_time_of_day, utcnow

logger = logging.getLogger(__name__)


def window_contains(start_minutes: int, end_minutes: int, current_minutes: int) -> bool:
    """Check a minute-of-day against a window, handling midnight wrap.

    Both ends are inclusive. A zero-length window (start == end) never
    matches.
    """
    if start_minutes == end_minutes:
        return False
    if start_minutes < end_minutes:
        return start_minutes <= current_minutes <= end_minutes
    # Overnight, e.g. 22:00-06:00
    return current_minutes >= start_minutes or current_minutes <= end_minutes


def is_schedule_active(
    schedule: Schedule,
    device: Device,
    instant: Optional[Union[datetime, str]] = None,
) -> bool:
    """Check if a schedule is active for a device at an instant.

    The weekday test uses the device's current local day only. For an
    overnight window this means the early-morning part (e.g. 01:00 in a
    22:00-06:00 window) is gated on that morning's weekday, not on the day
    the window opened.

    Args:
        schedule: Schedule to test
        device: Device whose time zone scopes the evaluation
        instant: Moment to test (datetime or ISO-8601 string), defaults to now

    Returns:
        True if the schedule currently applies to the device
    """
    if not schedule.is_active or not device.time_zone:
        return False

    clock = local_clock(instant if instant is not None else utcnow(), device.time_zone)
    if clock is None:
        return False
    weekday, current_minutes = clock

    if weekday not in schedule.days_of_week:
        return False

    start_minutes = parse_time_of_day(schedule.start_time)
    end_minutes = parse_time_of_day(schedule.end_time)
    if start_minutes is None or end_minutes is None:
        logger.warning(
            f"Skipping schedule {schedule.id!r} ({schedule.name}): malformed window "
            f"{schedule.start_time!r}-{schedule.end_time!r}"
        )
        return False

    return window_contains(start_minutes, end_minutes, current_minutes)


def active_schedules_for(
    device: Device,
    schedules: Iterable[Schedule],
    instant: Optional[Union[datetime, str]] = None,
) -> list[Schedule]:
    """Return the schedules active for a device, keeping input order."""
    if instant is None:
        instant = utcnow()
    return [s for s in schedules if is_schedule_active(s, device, instant)]
