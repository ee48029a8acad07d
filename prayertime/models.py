"""Value types shared by the provider, the local calculator and the resolver."""

import math
from dataclasses import dataclass, field
from typing import Dict, Optional

from prayertime.errors import InputError
from prayertime.hijri import HijriDate
from prayertime.julian import CivilDate

# The five daily prayers, in the order they fall
PRAYER_NAMES = ["Fajr", "Dhuhr", "Asr", "Maghrib", "Isha"]
EXTRA_TIMES = ["Imsak", "Sunrise", "Sunset", "Midnight"]

PRAYER_DISPLAY = {
    "Fajr": "Subuh / Fajr",
    "Sunrise": "Sunrise / Syuruq",
    "Dhuhr": "Dzuhur / Dhuhr",
    "Asr": "Ashar / Asr",
    "Maghrib": "Maghrib",
    "Isha": "Isya / Isha",
}


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float

    def rounded(self, places: int = 2) -> "Coordinates":
        return Coordinates(round(self.latitude, places), round(self.longitude, places))


def validate_coordinates(latitude, longitude) -> Coordinates:
    """
    Return Coordinates, or raise InputError for missing, non-numeric, NaN
    or out-of-range values.
    """
    for name, value, bound in (("latitude", latitude, 90), ("longitude", longitude, 180)):
        if value is None or isinstance(value, bool):
            raise InputError(f"{name} is required")
        try:
            value = float(value)
        except (TypeError, ValueError):
            raise InputError(f"{name} must be a number, got {value!r}") from None
        if math.isnan(value) or not -bound <= value <= bound:
            raise InputError(f"{name} must be between -{bound} and {bound}, got {value}")
    return Coordinates(float(latitude), float(longitude))


def ensure_coordinates(coordinates) -> Coordinates:
    """Accept Coordinates, a Location, or a (lat, lng) pair and validate it."""
    if coordinates is None:
        raise InputError("coordinates are required")
    if isinstance(coordinates, (tuple, list)):
        if len(coordinates) != 2:
            raise InputError(f"Expected (latitude, longitude), got {coordinates!r}")
        return validate_coordinates(*coordinates)
    try:
        return validate_coordinates(coordinates.latitude, coordinates.longitude)
    except AttributeError:
        raise InputError(f"Not a coordinate pair: {coordinates!r}") from None


@dataclass(frozen=True)
class PrayerTimes:
    """Wall-clock "HH:MM" times for one day at one place."""

    date: str  # DD-MM-YYYY
    timings: Dict[str, str]
    source: str  # "remote" or "local"
    extras: Dict[str, str] = field(default_factory=dict)
    timezone: Optional[str] = None

    def __getitem__(self, name: str) -> str:
        if name in self.timings:
            return self.timings[name]
        return self.extras[name]


@dataclass(frozen=True)
class CalendarDay:
    """One day of a Hijri month: both dates and, when known, the day's prayer times."""

    gregorian: CivilDate
    hijri: HijriDate
    prayer_times: Optional[PrayerTimes] = None
