"""
Offline prayer time calculation from the sun's position.

The formulas are the usual hour-angle method: solar declination and the
equation of time give solar noon, and each prayer is the moment the sun
reaches a given altitude before or after noon. No network access, so this is
the last resort when the remote provider is unavailable.
"""

import datetime
import math

import pytz

from prayertime import config
from prayertime.errors import InputError
from prayertime.julian import julian_date
from prayertime.methods import get_method, get_school
from prayertime.models import PrayerTimes, ensure_coordinates

KAABA = (21.4225, 39.8262)

# Refraction plus the sun's apparent radius
SUNRISE_ANGLE = 0.833
IMSAK_MINUTES = 10

# Keeps the hour-angle denominator away from zero at the poles
_MAX_LATITUDE = 89.99


def _dtr(d):
    return (d * math.pi) / 180.0


def _rtd(r):
    return (r * 180.0) / math.pi


def _fix_angle(a):
    return a - 360.0 * math.floor(a / 360.0)


def _fix_hour(h):
    return h - 24.0 * math.floor(h / 24.0)


def sun_position(jd: float) -> tuple:
    """Return (declination in degrees, equation of time in hours) for a Julian Date."""
    d = jd - 2451545.0
    g = _fix_angle(357.529 + 0.98560028 * d)
    q = _fix_angle(280.459 + 0.98564736 * d)
    L = _fix_angle(q + 1.915 * math.sin(_dtr(g)) + 0.020 * math.sin(_dtr(2 * g)))
    e = 23.439 - 0.00000036 * d
    ra = _fix_hour(_rtd(math.atan2(math.cos(_dtr(e)) * math.sin(_dtr(L)), math.cos(_dtr(L)))) / 15.0)
    eqt = q / 15.0 - ra
    decl = _rtd(math.asin(math.sin(_dtr(e)) * math.sin(_dtr(L))))
    return decl, eqt


class _SolarDay:
    def __init__(self, lat: float, lng: float, date):
        self.lat = max(-_MAX_LATITUDE, min(_MAX_LATITUDE, lat))
        self.lng = lng
        self.jdate = julian_date(date.year, date.month, date.day) - lng / (15 * 24)

    def mid_day(self, time: float) -> float:
        _, eqt = sun_position(self.jdate + time)
        return _fix_hour(12 - eqt)

    def sun_angle_time(self, angle: float, time: float, before_noon: bool) -> float:
        decl, _ = sun_position(self.jdate + time)
        noon = self.mid_day(time)
        numerator = -math.sin(_dtr(angle)) - math.sin(_dtr(decl)) * math.sin(_dtr(self.lat))
        denominator = math.cos(_dtr(decl)) * math.cos(_dtr(self.lat))
        # Clamped so polar day/night yields noon/midnight instead of a domain error
        x = max(-1.0, min(1.0, numerator / denominator))
        t = _rtd(math.acos(x)) / 15.0
        return noon - t if before_noon else noon + t

    def asr_time(self, factor: int, time: float) -> float:
        decl, _ = sun_position(self.jdate + time)
        angle = -_rtd(math.atan(1.0 / (factor + math.tan(abs(_dtr(self.lat - decl))))))
        return self.sun_angle_time(angle, time, before_noon=False)


def utc_offset_hours(timezone: str, date) -> float:
    """UTC offset of a timezone at local noon on the given date, in hours."""
    try:
        tz = pytz.timezone(timezone)
    except pytz.UnknownTimeZoneError:
        raise InputError(f"Unknown timezone: {timezone}") from None
    noon = tz.localize(datetime.datetime(date.year, date.month, date.day, 12))
    return noon.utcoffset().total_seconds() / 3600.0


def format_hours(hours: float) -> str:
    """Fractional hours to "HH:MM", rounded to the nearest minute."""
    hours = _fix_hour(hours + 0.5 / 60)
    h = int(math.floor(hours))
    m = int(math.floor((hours - h) * 60))
    return f"{h:02d}:{m:02d}"


def compute_prayer_times(
    coordinates,
    date,
    method=config.DEFAULT_METHOD,
    school=config.DEFAULT_SCHOOL,
    timezone: str = None,
    utc_offset: float = None,
) -> PrayerTimes:
    """
    Compute the day's prayer times for a location.

    The UTC offset comes from utc_offset if given, else from timezone, else
    it is estimated from longitude (15 degrees per hour).
    """
    coords = ensure_coordinates(coordinates)
    method = get_method(method)
    school = get_school(school)
    params = method.params

    if utc_offset is None:
        if timezone:
            utc_offset = utc_offset_hours(timezone, date)
        else:
            utc_offset = round(coords.longitude / 15.0)

    day = _SolarDay(coords.latitude, coords.longitude, date)

    # Initial guesses as fractions of a day, refined by evaluating the sun at each
    fajr = day.sun_angle_time(params.fajr_angle, 5 / 24, before_noon=True)
    sunrise = day.sun_angle_time(SUNRISE_ANGLE, 6 / 24, before_noon=True)
    dhuhr = day.mid_day(12 / 24)
    asr = day.asr_time(school.shadow_factor, 13 / 24)
    sunset = day.sun_angle_time(SUNRISE_ANGLE, 18 / 24, before_noon=False)
    if params.maghrib_angle is not None:
        maghrib = day.sun_angle_time(params.maghrib_angle, 18 / 24, before_noon=False)
    else:
        maghrib = sunset
    if params.isha_minutes is not None:
        isha = maghrib + params.isha_minutes / 60.0
    else:
        isha = day.sun_angle_time(params.isha_angle, 18 / 24, before_noon=False)

    shift = utc_offset - coords.longitude / 15.0
    hours = {
        "Fajr": fajr + shift,
        "Dhuhr": dhuhr + shift,
        "Asr": asr + shift,
        "Maghrib": maghrib + shift,
        "Isha": isha + shift,
    }
    extras = {
        "Imsak": hours["Fajr"] - IMSAK_MINUTES / 60.0,
        "Sunrise": sunrise + shift,
        "Sunset": sunset + shift,
        "Midnight": sunset + shift + _fix_hour(sunrise - sunset) / 2.0,
    }

    return PrayerTimes(
        date=f"{date.day:02d}-{date.month:02d}-{date.year:04d}",
        timings={name: format_hours(value) for name, value in hours.items()},
        source="local",
        extras={name: format_hours(value) for name, value in extras.items()},
        timezone=timezone,
    )


def qibla_direction(coordinates) -> float:
    """Initial bearing to the Kaaba in degrees clockwise from north, in [0, 360)."""
    coords = ensure_coordinates(coordinates)
    lat1 = _dtr(coords.latitude)
    lat2 = _dtr(KAABA[0])
    delta_lng = _dtr(KAABA[1] - coords.longitude)
    y = math.sin(delta_lng) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(delta_lng)
    return _fix_angle(_rtd(math.atan2(y, x)))
