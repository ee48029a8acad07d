"""Fetch prayer times and Hijri dates from the AlAdhan API."""

import concurrent.futures
import datetime
import logging
from typing import Optional

import pytz
import requests

from prayertime import config
from prayertime.cache import TTLCache, make_cache_key
from prayertime.errors import ProviderError
from prayertime.hijri import DAY_NAMES, HijriDate, validate_civil_date, validate_hijri
from prayertime.julian import CivilDate, to_jdn, weekday_index
from prayertime.methods import get_method, get_school
from prayertime.models import EXTRA_TIMES, PRAYER_NAMES, CalendarDay, PrayerTimes, ensure_coordinates
from prayertime.schemas import parse_calendar_response, parse_date_response, parse_timings_response

logger = logging.getLogger(__name__)

TIMINGS_KIND = "prayer_times"
HIJRI_KIND = "hijri_date"
GREGORIAN_KIND = "gregorian_date"
CALENDAR_KIND = "hijri_calendar"

# Enough for the resolver and a background Hijri lookup to overlap
_MAX_WORKERS = 4


def format_api_date(date) -> str:
    """DD-MM-YYYY, the only date format AlAdhan accepts in paths."""
    return f"{date.day:02d}-{date.month:02d}-{date.year:04d}"


def today_in(timezone: str = None) -> datetime.date:
    """Today's date on the wall clock of the given timezone (local if None)."""
    if timezone:
        return datetime.datetime.now(pytz.timezone(timezone)).date()
    return datetime.date.today()


class AladhanClient:
    """
    AlAdhan client with a response cache.

    Every fetch_* method returns None when the service cannot give a usable
    answer (network error, timeout, non-OK status, malformed body). Only
    invalid input raises.
    """

    def __init__(self, cache: TTLCache = None, base_url: str = config.ALADHAN_BASE,
                 timeout: float = config.REQUEST_TIMEOUT, session: requests.Session = None):
        self.cache = cache if cache is not None else TTLCache()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session
        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=_MAX_WORKERS, thread_name_prefix="aladhan"
        )

    def fetch_prayer_times(
        self,
        coordinates,
        date=None,
        method=config.DEFAULT_METHOD,
        school=config.DEFAULT_SCHOOL,
        timezone: str = None,
    ) -> Optional[PrayerTimes]:
        """Prayer times for one day, or None if the service let us down."""
        coords = ensure_coordinates(coordinates)
        date = validate_civil_date(date or today_in(timezone))
        method = get_method(method)
        school = get_school(school)
        date_str = format_api_date(date)

        # AlAdhan answers in the requested timezone, so it is part of the key
        kind = f"{TIMINGS_KIND}_m{int(method)}_s{int(school)}_tz{timezone or 'auto'}"
        key = make_cache_key(kind, coords.latitude, coords.longitude)
        cached = self.cache.get(key, date=date_str)
        if cached is not None:
            try:
                logger.debug("Using cached prayer times for %s on %s", key, date_str)
                return self._to_prayer_times(parse_timings_response(cached).data, timezone)
            except ProviderError:
                self.cache.delete(key)

        params = {
            "latitude": coords.latitude,
            "longitude": coords.longitude,
            "method": int(method),
            "school": int(school),
        }
        if timezone:
            params["timezonestring"] = timezone

        body = self._get_json(f"{self.base_url}/timings/{date_str}", params)
        if body is None:
            return None
        try:
            parsed = parse_timings_response(body)
        except ProviderError as e:
            logger.warning("Rejected prayer times for %s: %s", date_str, e)
            return None

        served_date = parsed.data.date.gregorian.date
        if served_date != date_str:
            logger.warning("AlAdhan answered for %s when asked for %s", served_date, date_str)
            return None

        self.cache.set(key, body, date=date_str)
        logger.info("Fetched prayer times for %s at (%.2f, %.2f)", date_str, coords.latitude, coords.longitude)
        return self._to_prayer_times(parsed.data, timezone)

    def fetch_hijri_date(self, date=None, timezone: str = None) -> Optional[HijriDate]:
        """The authoritative Hijri date for a civil date, or None."""
        date = validate_civil_date(date or today_in(timezone))
        date_str = format_api_date(date)
        key = make_cache_key(HIJRI_KIND, date=date_str)

        body = self.cache.get(key, date=date_str)
        from_cache = body is not None
        if not from_cache:
            body = self._get_json(f"{self.base_url}/gToH/{date_str}")
            if body is None:
                return None
        try:
            parsed = parse_date_response(body)
        except ProviderError as e:
            logger.warning("Rejected Hijri date for %s: %s", date_str, e)
            self.cache.delete(key)
            return None

        if not from_cache:
            self.cache.set(key, body, date=date_str)
        return _to_hijri_date(parsed.data)

    def fetch_gregorian_date(self, hijri) -> Optional[CivilDate]:
        """Convert a Hijri date through the service (hToG), or None."""
        validate_hijri(hijri.year, hijri.month, hijri.day)
        hijri_str = f"{hijri.day:02d}-{hijri.month:02d}-{hijri.year:04d}"
        key = make_cache_key(GREGORIAN_KIND, date=hijri_str)

        body = self.cache.get(key, date=hijri_str)
        from_cache = body is not None
        if not from_cache:
            body = self._get_json(f"{self.base_url}/hToG/{hijri_str}")
            if body is None:
                return None
        try:
            parsed = parse_date_response(body)
        except ProviderError as e:
            logger.warning("Rejected Gregorian date for %s AH: %s", hijri_str, e)
            self.cache.delete(key)
            return None

        if not from_cache:
            self.cache.set(key, body, date=hijri_str)
        greg = parsed.data.gregorian
        return CivilDate(greg.year, greg.month.number, greg.day)

    def fetch_hijri_calendar(
        self,
        month: int,
        year: int,
        coordinates,
        method=config.DEFAULT_METHOD,
        school=config.DEFAULT_SCHOOL,
        timezone: str = None,
    ) -> Optional[list]:
        """
        Every day of a Hijri month with its prayer times, as CalendarDay
        values, or None.

        AlAdhan decides where the month starts and how long it is, so the
        result can differ by a day from the tabular calendar.
        """
        validate_hijri(year, month, 1)
        coords = ensure_coordinates(coordinates)
        method = get_method(method)
        school = get_school(school)
        month_str = f"{month:02d}-{year:04d}"

        kind = f"{CALENDAR_KIND}_m{int(method)}_s{int(school)}_tz{timezone or 'auto'}"
        key = make_cache_key(kind, coords.latitude, coords.longitude, date=month_str)
        body = self.cache.get(key, date=month_str)
        from_cache = body is not None
        if not from_cache:
            params = {
                "latitude": coords.latitude,
                "longitude": coords.longitude,
                "method": int(method),
                "school": int(school),
            }
            if timezone:
                params["timezonestring"] = timezone
            body = self._get_json(f"{self.base_url}/hijriCalendar/{month}/{year}", params)
            if body is None:
                return None
        try:
            parsed = parse_calendar_response(body)
        except ProviderError as e:
            logger.warning("Rejected Hijri calendar for %s: %s", month_str, e)
            self.cache.delete(key)
            return None

        strays = [d.date.hijri.date for d in parsed.data
                  if (d.date.hijri.month.number, d.date.hijri.year) != (month, year)]
        if strays:
            logger.warning("Hijri calendar for %s contains days from another month: %s", month_str, strays)
            self.cache.delete(key)
            return None

        if not from_cache:
            self.cache.set(key, body, date=month_str)
        days = []
        for day in parsed.data:
            greg = day.date.gregorian
            days.append(CalendarDay(
                gregorian=CivilDate(greg.year, greg.month.number, greg.day),
                hijri=_to_hijri_date(day.date),
                prayer_times=self._to_prayer_times(day, timezone),
            ))
        return days

    def clear_cache(self) -> None:
        for kind in (TIMINGS_KIND, HIJRI_KIND, GREGORIAN_KIND, CALENDAR_KIND):
            self.cache.clear(prefix=kind)

    def _get_json(self, url: str, params: dict = None):
        """
        GET a JSON document; None on any transport or decoding failure.

        self.timeout bounds the whole exchange. requests only bounds the
        connect and each wait between reads, so a server that trickles its
        answer is cut off here instead.
        """
        future = self._executor.submit(self._fetch_json, url, params)
        try:
            return future.result(timeout=self.timeout)
        except concurrent.futures.TimeoutError:
            future.cancel()
            logger.warning("No complete answer from %s within %ss", url, self.timeout)
        except requests.exceptions.Timeout:
            logger.warning("Timed out after %ss fetching %s", self.timeout, url)
        except requests.exceptions.RequestException as e:
            logger.warning("Request to %s failed: %s", url, e)
        except ValueError as e:
            logger.warning("Response from %s is not JSON: %s", url, e)
        return None

    def _fetch_json(self, url: str, params: dict = None):
        http = self.session or requests
        resp = http.get(url, params=params, timeout=self.timeout, headers={"Accept": "application/json"})
        resp.raise_for_status()
        return resp.json()

    @staticmethod
    def _to_prayer_times(data, timezone: str = None) -> PrayerTimes:
        timings = data.timings
        extras = {name: getattr(timings, name) for name in EXTRA_TIMES if getattr(timings, name)}
        return PrayerTimes(
            date=data.date.gregorian.date,
            timings={name: getattr(timings, name) for name in PRAYER_NAMES},
            source="remote",
            extras=extras,
            timezone=timezone,
        )


def _to_hijri_date(info) -> HijriDate:
    # AlAdhan names Hijri weekdays by transliteration; use the English name
    greg = info.gregorian
    english, arabic = DAY_NAMES[weekday_index(to_jdn(CivilDate(greg.year, greg.month.number, greg.day)))]
    part = info.hijri
    holiday = part.holidays[0] if part.holidays else None
    return HijriDate(
        day=part.day,
        month=part.month.number,
        year=part.year,
        month_name=part.month.en,
        month_name_arabic=part.month.ar,
        day_name=english,
        day_name_arabic=part.weekday.ar or arabic,
        is_holiday=holiday is not None,
        holiday_name=holiday,
    )
