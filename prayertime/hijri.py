"""Tabular (arithmetic) Hijri calendar: conversion, names and holidays."""

import logging
from dataclasses import dataclass
from typing import Optional

from prayertime.errors import InputError
from prayertime.julian import CivilDate, from_jdn, to_jdn, weekday_index

logger = logging.getLogger(__name__)

# 1 Muharram 1 AH
ISLAMIC_EPOCH_JDN = 1948440

CYCLE_YEARS = 30
CYCLE_DAYS = 10631
LEAP_YEARS_IN_CYCLE = frozenset({2, 5, 7, 10, 13, 16, 18, 21, 24, 26, 29})

ISLAMIC_MONTHS = [
    ("Muharram", "محرم"),
    ("Safar", "صفر"),
    ("Rabi' al-Awwal", "ربيع الأول"),
    ("Rabi' al-Thani", "ربيع الثاني"),
    ("Jumada al-Awwal", "جمادى الأولى"),
    ("Jumada al-Thani", "جمادى الآخرة"),
    ("Rajab", "رجب"),
    ("Sha'ban", "شعبان"),
    ("Ramadan", "رمضان"),
    ("Shawwal", "شوال"),
    ("Dhu al-Qi'dah", "ذو القعدة"),
    ("Dhu al-Hijjah", "ذو الحجة"),
]

# Indexed like julian.weekday_index: 0 = Sunday
DAY_NAMES = [
    ("Sunday", "الأحد"),
    ("Monday", "الإثنين"),
    ("Tuesday", "الثلاثاء"),
    ("Wednesday", "الأربعاء"),
    ("Thursday", "الخميس"),
    ("Friday", "الجمعة"),
    ("Saturday", "السبت"),
]

ISLAMIC_HOLIDAYS = {
    "1-1": "Islamic New Year",
    "1-10": "Day of Ashura",
    "3-12": "Mawlid al-Nabi",
    "7-27": "Laylat al-Mi'raj",
    "8-15": "Laylat al-Bara'ah",
    "9-1": "First Day of Ramadan",
    "9-27": "Laylat al-Qadr",
    "10-1": "Eid al-Fitr",
    "12-8": "Day of Tarwiyah",
    "12-9": "Day of Arafah",
    "12-10": "Eid al-Adha",
    "12-11": "Days of Tashriq",
    "12-12": "Days of Tashriq",
    "12-13": "Days of Tashriq",
}


@dataclass(frozen=True)
class HijriDate:
    day: int
    month: int
    year: int
    month_name: str
    month_name_arabic: str
    day_name: str
    day_name_arabic: str
    is_holiday: bool = False
    holiday_name: Optional[str] = None

    @property
    def full_date(self) -> str:
        return f"{self.day} {self.month_name} {self.year} AH"

    @property
    def full_date_arabic(self) -> str:
        return f"{self.day} {self.month_name_arabic} {self.year}"


def _require_int(name: str, value) -> int:
    # bool is an int subclass but never a valid date component
    if isinstance(value, bool) or not isinstance(value, int):
        raise InputError(f"{name} must be an integer, got {value!r}")
    return value


def _gregorian_month_length(year: int, month: int) -> int:
    if month == 2:
        leap = year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)
        return 29 if leap else 28
    return 30 if month in (4, 6, 9, 11) else 31


def validate_civil_date(date) -> CivilDate:
    """Check a civil date's components and return it as a CivilDate."""
    try:
        year, month, day = date.year, date.month, date.day
    except AttributeError:
        raise InputError(f"Not a date: {date!r}") from None
    for name, value in (("year", year), ("month", month), ("day", day)):
        _require_int(name, value)
    if year < 1:
        raise InputError(f"Year must be 1 or later, got {year}")
    if not 1 <= month <= 12:
        raise InputError(f"Month must be between 1 and 12, got {month}")
    if not 1 <= day <= _gregorian_month_length(year, month):
        raise InputError(f"Day {day} is out of range for {year}-{month:02d}")
    return CivilDate(year, month, day)


def is_leap_year(year: int) -> bool:
    """True if the Hijri year has 355 days."""
    return (year - 1) % CYCLE_YEARS + 1 in LEAP_YEARS_IN_CYCLE


def days_in_year(year: int) -> int:
    return 355 if is_leap_year(year) else 354


def days_in_month(year: int, month: int) -> int:
    if month == 12 and is_leap_year(year):
        return 30
    return 30 if month % 2 == 1 else 29


def holiday_for(month: int, day: int) -> Optional[str]:
    return ISLAMIC_HOLIDAYS.get(f"{month}-{day}")


def month_names() -> list:
    return [{"number": i + 1, "name": en, "arabic": ar} for i, (en, ar) in enumerate(ISLAMIC_MONTHS)]


def day_names() -> list:
    return [{"name": en, "arabic": ar} for en, ar in DAY_NAMES]


def build_hijri_date(day: int, month: int, year: int, weekday: int) -> HijriDate:
    """Assemble a HijriDate with names and holiday info attached."""
    month_en, month_ar = ISLAMIC_MONTHS[month - 1]
    day_en, day_ar = DAY_NAMES[weekday]
    holiday = holiday_for(month, day)
    return HijriDate(
        day=day,
        month=month,
        year=year,
        month_name=month_en,
        month_name_arabic=month_ar,
        day_name=day_en,
        day_name_arabic=day_ar,
        is_holiday=holiday is not None,
        holiday_name=holiday,
    )


def gregorian_to_hijri(date) -> HijriDate:
    """
    Convert a civil date to the tabular Hijri calendar.

    Dates before 1 Muharram 1 AH return 1 Muharram 1 AH instead of a
    negative year.
    """
    civil = validate_civil_date(date)
    jdn = to_jdn(civil)
    weekday = weekday_index(jdn)
    days_since_epoch = jdn - ISLAMIC_EPOCH_JDN

    if days_since_epoch < 0:
        logger.warning("%s predates the Hijri epoch, returning 1 Muharram 1 AH", civil)
        return build_hijri_date(1, 1, 1, weekday)

    cycles, remaining = divmod(days_since_epoch, CYCLE_DAYS)

    year_in_cycle = 0
    for candidate in range(1, CYCLE_YEARS + 1):
        length = 355 if candidate in LEAP_YEARS_IN_CYCLE else 354
        if remaining < length:
            year_in_cycle = candidate
            break
        remaining -= length
    year = cycles * CYCLE_YEARS + year_in_cycle

    month = day = 0
    for candidate in range(1, 13):
        length = days_in_month(year, candidate)
        if remaining < length:
            month = candidate
            day = remaining + 1
            break
        remaining -= length

    clamped_month = max(1, min(12, month))
    clamped_day = max(1, min(30, day))
    if (clamped_month, clamped_day) != (month, day):
        # The walk above covers every day of the cycle, so this is an arithmetic bug
        logger.warning(
            "Clamped Hijri date for %s from %s/%s to %s/%s",
            civil, day, month, clamped_day, clamped_month,
        )

    return build_hijri_date(clamped_day, clamped_month, max(1, year), weekday)


def validate_hijri(year, month, day) -> None:
    for name, value in (("year", year), ("month", month), ("day", day)):
        _require_int(name, value)
    if year < 1:
        raise InputError(f"Hijri year must be 1 or later, got {year}")
    if not 1 <= month <= 12:
        raise InputError(f"Hijri month must be between 1 and 12, got {month}")
    if not 1 <= day <= days_in_month(year, month):
        raise InputError(f"Day {day} is out of range for Hijri {year}-{month:02d}")


def to_gregorian(year: int, month: int, day: int) -> CivilDate:
    """Convert Hijri year/month/day components to a civil date."""
    validate_hijri(year, month, day)
    cycles, year_in_cycle = divmod(year - 1, CYCLE_YEARS)

    days = cycles * CYCLE_DAYS
    for earlier in range(1, year_in_cycle + 1):
        days += 355 if earlier in LEAP_YEARS_IN_CYCLE else 354
    for earlier in range(1, month):
        days += days_in_month(year, earlier)
    days += day - 1

    return from_jdn(ISLAMIC_EPOCH_JDN + days)


def hijri_to_gregorian(hijri) -> CivilDate:
    """Convert a HijriDate (or anything with day/month/year) to a civil date."""
    return to_gregorian(hijri.year, hijri.month, hijri.day)


def special_day(date) -> dict:
    """Return {"is_special": bool, "occasion": str|None} for a civil date."""
    hijri = gregorian_to_hijri(date)
    if hijri.is_holiday:
        return {"is_special": True, "occasion": hijri.holiday_name}
    if hijri.month == 9:
        return {"is_special": True, "occasion": "Ramadan"}
    return {"is_special": False, "occasion": None}


def month_days(year: int, month: int) -> list:
    """Every day of a tabular Hijri month as (CivilDate, HijriDate) pairs."""
    validate_hijri(year, month, 1)
    first = to_jdn(to_gregorian(year, month, 1))
    days = []
    for offset in range(days_in_month(year, month)):
        civil = from_jdn(first + offset)
        days.append((civil, gregorian_to_hijri(civil)))
    return days
