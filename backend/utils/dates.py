"""Calendar helpers shared by the compliance and rotation engines.

Dates travel as ISO strings ("2026-02-09"); weeks start on Monday (ISO 8601).
"""

from datetime import date, timedelta

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def parse_iso_date(date_str: str) -> date:
    return date.fromisoformat(date_str)


def to_iso(value: date) -> str:
    return value.isoformat()


def add_days(date_str: str, days: int) -> str:
    return to_iso(parse_iso_date(date_str) + timedelta(days=days))


def days_between(start: str, end: str) -> int:
    """Signed number of calendar days from start to end."""
    return (parse_iso_date(end) - parse_iso_date(start)).days


def week_start(date_str: str) -> str:
    """Monday of the week containing the date."""
    day = parse_iso_date(date_str)
    return to_iso(day - timedelta(days=day.weekday()))


def week_dates(monday: str) -> list[str]:
    """The seven dates of the week starting at `monday`."""
    return [add_days(monday, offset) for offset in range(7)]


def week_windows(start: str, end: str) -> list[str]:
    """Mondays of every week intersecting [start, end]."""
    if end < start:
        return []
    mondays = []
    current = week_start(start)
    while current <= end:
        mondays.append(current)
        current = add_days(current, 7)
    return mondays


def iso_week_number(date_str: str) -> int:
    return parse_iso_date(date_str).isocalendar()[1]


def date_range(start: str, end: str) -> list[str]:
    """Every date from start to end inclusive; empty when end precedes start."""
    count = days_between(start, end)
    return [add_days(start, offset) for offset in range(count + 1)]


def day_name(date_str: str) -> str:
    return DAY_NAMES[parse_iso_date(date_str).weekday()]


def is_sunday(date_str: str) -> bool:
    return parse_iso_date(date_str).weekday() == 6
