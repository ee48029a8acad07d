"""Julian Day Number arithmetic for the proleptic Gregorian calendar."""

import datetime
import math
from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class CivilDate:
    """A proleptic Gregorian date without the 9999 ceiling of datetime.date."""

    year: int
    month: int
    day: int

    @classmethod
    def from_date(cls, date) -> "CivilDate":
        return cls(date.year, date.month, date.day)

    def to_date(self) -> datetime.date:
        return datetime.date(self.year, self.month, self.day)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


def to_jdn(date) -> int:
    """
    Return the Julian Day Number of a civil date.

    Accepts a CivilDate, datetime.date or anything with year/month/day.
    January and February are counted as months 13 and 14 of the previous year.
    """
    a = (14 - date.month) // 12
    y = date.year + 4800 - a
    m = date.month + 12 * a - 3
    return (
        date.day
        + (153 * m + 2) // 5
        + 365 * y
        + y // 4
        - y // 100
        + y // 400
        - 32045
    )


def from_jdn(jdn) -> CivilDate:
    """Convert a Julian Day Number back to a civil date (fraction is dropped)."""
    a = math.floor(jdn) + 32044
    b = (4 * a + 3) // 146097
    c = a - 146097 * b // 4
    d = (4 * c + 3) // 1461
    e = c - 1461 * d // 4
    m = (5 * e + 2) // 153
    day = e - (153 * m + 2) // 5 + 1
    month = m + 3 - 12 * (m // 10)
    year = 100 * b + d - 4800 + m // 10
    return CivilDate(year, month, day)


def weekday_index(jdn: int) -> int:
    """Day of week for a JDN, 0 = Sunday ... 6 = Saturday."""
    return (math.floor(jdn) + 1) % 7


def julian_date(year: int, month: int, day: float) -> float:
    """Astronomical Julian Date at 0h UT (Meeus), used for solar position."""
    if month <= 2:
        year -= 1
        month += 12
    a = math.floor(year / 100)
    b = 2 - a + math.floor(a / 4)
    return math.floor(365.25 * (year + 4716)) + math.floor(30.6001 * (month + 1)) + day + b - 1524.5
