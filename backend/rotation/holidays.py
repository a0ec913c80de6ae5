"""French statutory public holidays."""

from datetime import date, timedelta
from functools import lru_cache

from dateutil.easter import easter

from utils.dates import parse_iso_date

FIXED_HOLIDAYS = [
    (1, 1),  # New Year's Day
    (5, 1),  # Labour Day
    (5, 8),  # Victory in Europe Day
    (7, 14),  # Bastille Day
    (8, 15),  # Assumption
    (11, 1),  # All Saints' Day
    (11, 11),  # Armistice Day
    (12, 25),  # Christmas
]

# Days after Easter Sunday
EASTER_OFFSETS = [
    1,  # Easter Monday
    39,  # Ascension
    50,  # Whit Monday
]


@lru_cache(maxsize=32)
def french_public_holidays(year: int) -> tuple[str, ...]:
    """Sorted ISO dates of the public holidays of a year."""
    easter_sunday = easter(year)
    days = [date(year, month, day) for month, day in FIXED_HOLIDAYS]
    days.extend(easter_sunday + timedelta(days=offset) for offset in EASTER_OFFSETS)
    return tuple(sorted(d.isoformat() for d in days))


def holidays_between(start: str, end: str) -> frozenset[str]:
    """Public holidays for every year touched by [start, end]."""
    if end < start:
        return frozenset()
    first_year = parse_iso_date(start).year
    last_year = parse_iso_date(end).year
    dates: set[str] = set()
    for year in range(first_year, last_year + 1):
        dates.update(french_public_holidays(year))
    return frozenset(dates)
