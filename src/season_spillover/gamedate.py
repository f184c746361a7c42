"""
Game calendar arithmetic.

The host calendar has four fixed 28-day seasons. A date is fully described by
the number of days elapsed since the save started (day 1 = Spring 1, Year 1):

    season = ((total_days - 1) // 28) % 4
    day    = ((total_days - 1) % 28) + 1

Everything here is pure. Dates never go before the epoch; arithmetic that
would underflow clamps to day 1.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import Union

from .constants import SEASON_DAYS, SEASONS_PER_YEAR, YEAR_DAYS

_ALIASES = {
    "autumn": "fall",
}


class Season(Enum):
    """The four seasons, in calendar order."""
    SPRING = "spring"
    SUMMER = "summer"
    FALL = "fall"
    WINTER = "winter"

    @property
    def index(self) -> int:
        """Position in the year (spring = 0)."""
        return _ORDER.index(self)

    @classmethod
    def from_index(cls, index: int) -> "Season":
        return _ORDER[index % SEASONS_PER_YEAR]

    @classmethod
    def parse(cls, value: Union[str, "Season"]) -> "Season":
        """Parse a season name case-insensitively ("Spring", "fall", "autumn")."""
        if isinstance(value, Season):
            return value
        key = str(value).strip().lower()
        key = _ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown season: {value!r}") from None

    def next(self) -> "Season":
        return Season.from_index(self.index + 1)

    def previous(self) -> "Season":
        return Season.from_index(self.index - 1)

    def __str__(self) -> str:
        return self.value


_ORDER = [Season.SPRING, Season.SUMMER, Season.FALL, Season.WINTER]


@total_ordering
@dataclass(frozen=True)
class CalendarDate:
    """A day on the game calendar."""
    season: Season
    day: int                          # 1..28
    total_days: int                   # days since epoch, >= 1

    def __post_init__(self):
        if self.total_days < 1:
            raise ValueError(f"total_days must be >= 1, got {self.total_days}")
        expected_season, expected_day = _split(self.total_days)
        if (self.season, self.day) != (expected_season, expected_day):
            raise ValueError(
                f"Inconsistent date: day {self.total_days} is "
                f"{expected_season} {expected_day}, not {self.season} {self.day}"
            )

    @classmethod
    def of(cls, season: Union[str, Season], day: int, year: int = 1) -> "CalendarDate":
        """Build a date from its season, day of season and year."""
        season = Season.parse(season)
        if not 1 <= day <= SEASON_DAYS:
            raise ValueError(f"day must be in 1..{SEASON_DAYS}, got {day}")
        if year < 1:
            raise ValueError(f"year must be >= 1, got {year}")
        total = (year - 1) * YEAR_DAYS + season.index * SEASON_DAYS + day
        return date_from_day_count(total)

    @property
    def year(self) -> int:
        return (self.total_days - 1) // YEAR_DAYS + 1

    def add_days(self, delta: int) -> "CalendarDate":
        return add_days(self, delta)

    def __lt__(self, other: "CalendarDate") -> bool:
        if not isinstance(other, CalendarDate):
            return NotImplemented
        return self.total_days < other.total_days

    def __str__(self) -> str:
        return f"{self.season.value.title()} {self.day}, Year {self.year}"


def _split(total_days: int):
    offset = total_days - 1
    season = Season.from_index(offset // SEASON_DAYS)
    day = offset % SEASON_DAYS + 1
    return season, day


def date_from_day_count(total_days: int) -> CalendarDate:
    """Map a day count to its calendar date. Counts below 1 clamp to the epoch."""
    total_days = max(1, total_days)
    season, day = _split(total_days)
    return CalendarDate(season=season, day=day, total_days=total_days)


def add_days(date: CalendarDate, delta: int) -> CalendarDate:
    """Shift a date by delta days (negative allowed), clamped at the epoch."""
    return date_from_day_count(date.total_days + delta)


def season_start_date(date: CalendarDate) -> CalendarDate:
    """First day of the season instance containing date."""
    return date_from_day_count(date.total_days - (date.day - 1))


def season_end_date(date: CalendarDate) -> CalendarDate:
    """Last day of the season instance containing date."""
    return date_from_day_count(date.total_days + (SEASON_DAYS - date.day))
