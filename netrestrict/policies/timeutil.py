"""Time-of-day, weekday and time zone helpers.

Weekday indices follow the schedule convention: 0=Sunday through 6=Saturday.
"""

import json
import logging
import threading
from datetime import datetime, time, timezone
from typing import Any, Iterable, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from cachetools import LRUCache, cached

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60

DAY_ABBREVIATIONS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

# Accepts both abbreviated and full day names (Sunday=0)
DAY_MAP = {
    "sun": 0,
    "sunday": 0,
    "mon": 1,
    "monday": 1,
    "tue": 2,
    "tuesday": 2,
    "wed": 3,
    "wednesday": 3,
    "thu": 4,
    "thursday": 4,
    "fri": 5,
    "friday": 5,
    "sat": 6,
    "saturday": 6,
}


def parse_time_of_day(value: Union[str, time, None]) -> Optional[int]:
    """Convert a civil time of day to minutes since midnight.

    Args:
        value: "HH:MM" (seconds, if present, are ignored) or datetime.time

    Returns:
        Minutes since midnight, or None if the value is malformed
    """
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    if not isinstance(value, str):
        return None

    parts = value.strip().split(":")
    if len(parts) not in (2, 3):
        return None
    # Unsigned ASCII digits only; "+9:00" and "09:00:zz" are malformed
    if not all(part.isascii() and part.isdigit() for part in parts):
        return None
    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    if len(parts) == 3 and not 0 <= int(parts[2]) <= 59:
        return None
    return hour * 60 + minute


def parse_days(value: Union[str, Iterable[Any], None]) -> frozenset[int]:
    """Normalize a day-of-week specification to a set of indices.

    Accepts integers (0=Sunday), day names ("mon", "Monday") or a JSON
    encoded list of either, as stored by older schedule records.
    """
    if value is None:
        return frozenset()

    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            # A bare comma separated string: "mon,tue"
            value = [part for part in value.split(",") if part.strip()]
        if not isinstance(value, list):
            value = [value]

    days: set[int] = set()
    for entry in value:
        if isinstance(entry, bool):
            logger.warning(f"Ignoring day-of-week entry {entry!r}")
            continue
        if isinstance(entry, int):
            if 0 <= entry <= 6:
                days.add(entry)
            else:
                logger.warning(f"Ignoring out-of-range day index {entry}")
            continue
        if isinstance(entry, str):
            index = DAY_MAP.get(entry.strip().lower())
            if index is not None:
                days.add(index)
                continue
            if entry.strip().isdigit() and 0 <= int(entry) <= 6:
                days.add(int(entry))
                continue
        logger.warning(f"Ignoring day-of-week entry {entry!r}")

    return frozenset(days)


@cached(cache=LRUCache(maxsize=512), lock=threading.Lock())
def get_zone(name: str) -> Optional[ZoneInfo]:
    """Look up an IANA zone, caching the result process-wide.

    Returns:
        ZoneInfo, or None if the zone name is unknown or malformed
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        logger.warning(f"Unknown time zone {name!r}: {e}")
        return None


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_aware(instant: datetime) -> datetime:
    """Attach UTC to naive datetimes; aware values pass through."""
    if instant.tzinfo is None or instant.utcoffset() is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant


def parse_instant(text: str) -> datetime:
    """Parse an ISO-8601 timestamp into an aware datetime.

    A trailing "Z" is accepted. Naive timestamps are taken as UTC.

    Raises:
        ValueError: If the text is not an ISO-8601 timestamp
    """
    text = text.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return as_aware(datetime.fromisoformat(text))


def local_clock(
    instant: Union[datetime, str],
    zone_name: Optional[str],
) -> Optional[tuple[int, int]]:
    """Derive the local weekday and minutes since midnight in a zone.

    Args:
        instant: Moment to convert, as a datetime (naive values are UTC)
            or an ISO-8601 string
        zone_name: IANA zone name

    Returns:
        (weekday, minutes) with weekday 0=Sunday, or None if the zone or
        the instant is absent or unusable
    """
    if not zone_name:
        return None
    if not isinstance(zone_name, str):
        logger.warning(f"Time zone {zone_name!r} is not a zone name")
        return None
    zone = get_zone(zone_name)
    if zone is None:
        return None

    try:
        if isinstance(instant, str):
            instant = parse_instant(instant)
        if not isinstance(instant, datetime):
            logger.warning(f"Cannot evaluate at {instant!r}: not a datetime")
            return None
        local = as_aware(instant).astimezone(zone)
    except (OverflowError, ValueError) as e:
        logger.warning(f"Cannot convert {instant!r} to {zone_name}: {e}")
        return None

    # isoweekday: Monday=1 .. Sunday=7, so Sunday wraps to 0
    return local.isoweekday() % 7, local.hour * 60 + local.minute
