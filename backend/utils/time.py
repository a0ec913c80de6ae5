"""Time-related utility functions.

Times of day are "HH:MM" strings and minute offsets since midnight. Malformed
strings are a caller error and are not defended against here.
"""

from datetime import datetime, timezone

MINUTES_PER_DAY = 24 * 60
MINUTES_PER_WEEK = 7 * MINUTES_PER_DAY


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def time_to_minutes(time_str: str) -> int:
    parts = time_str.split(":")
    return int(parts[0]) * 60 + int(parts[1])


def minutes_to_time(minutes: int) -> str:
    """Convert minutes since midnight to "HH:MM", wrapping past midnight."""
    minutes = minutes % MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def duration_minutes(start_time: str, end_time: str) -> int:
    """
    Minutes between two times of day.

    An end before the start rolls over midnight (22:00 -> 06:00 is 480).
    """
    duration = time_to_minutes(end_time) - time_to_minutes(start_time)
    if duration < 0:
        duration += MINUTES_PER_DAY
    return duration


def effective_minutes(start_time: str, end_time: str, break_minutes: int = 0) -> int:
    """Worked minutes once the break is taken off, floored at zero."""
    return max(0, duration_minutes(start_time, end_time) - break_minutes)


def effective_hours(start_time: str, end_time: str, break_minutes: int = 0) -> float:
    return effective_minutes(start_time, end_time, break_minutes) / 60


def intervals_overlap(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    """Half-open [start, end) overlap test."""
    return a_start < b_end and b_start < a_end


def interval_contains(inner_start: int, inner_end: int, outer_start: int, outer_end: int) -> bool:
    """True when [inner_start, inner_end) lies fully inside [outer_start, outer_end)."""
    return outer_start <= inner_start and inner_end <= outer_end


def minutes_to_readable(minutes: int) -> str:
    """
    Format a minute count as "Xh" or "Xh YYmin".

    Examples:
        600 -> "10h"
        630 -> "10h 30min"
    """
    sign = "-" if minutes < 0 else ""
    minutes = abs(minutes)
    hours, rest = divmod(minutes, 60)
    if rest == 0:
        return f"{sign}{hours}h"
    return f"{sign}{hours}h {rest:02d}min"


def hours_to_readable(hours: float) -> str:
    return minutes_to_readable(round(hours * 60))
