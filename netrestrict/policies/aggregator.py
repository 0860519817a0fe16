"""Folds a device's active schedules into a single restriction verdict.

Highest restriction level wins, and the winning schedule's whole bundle
(level, Wi-Fi block, mobile-data block, emergency access) becomes the
verdict. Flags are NOT merged field by field across schedules: a strict
schedule that leaves Wi-Fi open beats a lenient one that blocks it, and the
result has Wi-Fi open. Changing this to an OR/AND of flags changes what
devices are allowed to do.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional, Union

from netrestrict.models import UNRESTRICTED, Device, Schedule, Verdict
from netrestrict.policies.timeutil import utcnow
from netrestrict.policies.window_matcher import active_schedules_for

logger = logging.getLogger(__name__)


def select_governing_schedule(active_schedules: Iterable[Schedule]) -> Optional[Schedule]:
    """Pick the schedule whose bundle applies.

    A schedule takes over only when its level is strictly greater than the
    running maximum, which starts at the unrestricted level (0). Ties keep
    the earlier schedule, so input order is the tie-break. A level-0
    schedule therefore never governs, even if it sets block flags.

    Args:
        active_schedules: Schedules already known to be active, in caller order

    Returns:
        The governing schedule, or None if no schedule outranks the default
    """
    governing: Optional[Schedule] = None
    max_level = UNRESTRICTED.restriction_level

    for schedule in active_schedules:
        level = schedule.restriction_level
        # Raw out-of-range ints still compete; non-integers cannot be ranked
        if isinstance(level, bool) or not isinstance(level, int):
            logger.warning(
                f"Skipping schedule {schedule.id!r} ({schedule.name}): "
                f"restriction level {level!r} is not an integer"
            )
            continue
        if level > max_level:
            governing = schedule
            max_level = level

    return governing


def fold_verdict(active_schedules: Iterable[Schedule]) -> Verdict:
    """Build the verdict for an already-filtered list of active schedules."""
    governing = select_governing_schedule(active_schedules)
    if governing is None:
        return UNRESTRICTED
    return Verdict.from_schedule(governing)


def evaluate_restrictions(
    device: Device,
    assigned_schedules: Iterable[Schedule],
    instant: Optional[Union[datetime, str]] = None,
) -> Verdict:
    """Compute the effective restrictions for a device.

    Args:
        device: Device to evaluate
        assigned_schedules: Schedules assigned to the device. Order matters
            for equal-level ties; the first one wins.
        instant: Moment to evaluate (datetime or ISO-8601 string), defaults to now

    Returns:
        Verdict (the permissive default if nothing is active)
    """
    if instant is None:
        instant = utcnow()

    active = active_schedules_for(device, assigned_schedules, instant)
    verdict = fold_verdict(active)

    if active:
        logger.debug(
            f"Device {device.id!r}: {len(active)} active schedule(s), "
            f"level {verdict.restriction_level}"
        )
    return verdict
