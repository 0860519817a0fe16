"""Human-readable labels for restriction levels and schedules."""

from typing import Iterable

from netrestrict.models import RestrictionLevel, Schedule
from netrestrict.policies.timeutil import DAY_ABBREVIATIONS, parse_time_of_day

RESTRICTION_LABELS = {
    RestrictionLevel.NONE: "No restrictions",
    RestrictionLevel.BASIC: "Basic",
    RestrictionLevel.MODERATE: "Moderate",
    RestrictionLevel.STRICT: "Strict",
}

# rich style names
RESTRICTION_STYLES = {
    RestrictionLevel.NONE: "green",
    RestrictionLevel.BASIC: "yellow",
    RestrictionLevel.MODERATE: "red",
    RestrictionLevel.STRICT: "red bold",
}


def restriction_label(level: int) -> str:
    """Label for a restriction level; unrecognized levels are "Unknown"."""
    return RESTRICTION_LABELS.get(level, "Unknown")


def restriction_style(level: int) -> str:
    return RESTRICTION_STYLES.get(level, "dim")


def format_days(days: Iterable[int]) -> str:
    """Format weekday indices as sorted abbreviations, e.g. "Mon, Tue"."""
    names = [DAY_ABBREVIATIONS[d] for d in sorted(set(days)) if 0 <= d <= 6]
    return ", ".join(names) if names else "No days"


def format_window(schedule: Schedule) -> str:
    """Format a schedule's window as "HH:MM-HH:MM"."""
    start = parse_time_of_day(schedule.start_time)
    end = parse_time_of_day(schedule.end_time)
    if start is None or end is None:
        return "invalid window"

    text = f"{start // 60:02d}:{start % 60:02d}-{end // 60:02d}:{end % 60:02d}"
    if start > end:
        text += " (overnight)"
    return text
