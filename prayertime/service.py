"""
Entry points for presentation code.

Each lookup is wrapped in a view object carrying a status, so a UI can show
a spinner while the network is busy, the value once it is ready, or an
error message when the caller supplied something invalid.
"""

import datetime
import enum
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional

from prayertime.cache import TTLCache
from prayertime.errors import InputError, ScheduleUnavailableError
from prayertime.hijri import gregorian_to_hijri, month_days, validate_hijri
from prayertime.methods import DEFAULT_PROFILE, CalendarProfile
from prayertime.models import CalendarDay, ensure_coordinates
from prayertime.prayer_api import AladhanClient, today_in
from prayertime.schedule import ScheduleResolver

logger = logging.getLogger(__name__)


class ViewStatus(enum.Enum):
    PENDING = "pending"
    READY = "ready"
    ERROR = "error"
    UNAVAILABLE = "unavailable"


@dataclass
class View:
    status: ViewStatus = ViewStatus.PENDING
    value: Any = None
    error: Optional[str] = None

    @property
    def is_ready(self) -> bool:
        return self.status is ViewStatus.READY


@dataclass
class HijriView(View):
    source: Optional[str] = None
    profile: CalendarProfile = DEFAULT_PROFILE


@dataclass
class ScheduleView(View):
    pass


class PrayerTimeService:
    """Wires the provider, cache and resolver together behind a few calls."""

    def __init__(self, provider: AladhanClient = None, resolver: ScheduleResolver = None,
                 profile: CalendarProfile = DEFAULT_PROFILE):
        self.provider = provider if provider is not None else AladhanClient(cache=TTLCache())
        self.resolver = resolver if resolver is not None else ScheduleResolver(provider=self.provider)
        self.profile = profile

    def get_hijri_date(self, date=None, timezone: str = None) -> HijriView:
        """
        Hijri date for a civil date (today in `timezone` if omitted).

        The remote answer wins when available; otherwise the tabular
        calculation is used. The calendar profile is only a label.
        """
        view = HijriView(profile=self.profile)
        try:
            date = date or today_in(timezone)
            hijri = None
            try:
                hijri = self.provider.fetch_hijri_date(date)
            except InputError:
                raise
            except Exception:
                logger.exception("Hijri date provider raised, using tabular calculation")
            if hijri is not None:
                view.source = "remote"
            else:
                hijri = gregorian_to_hijri(date)
                view.source = "local"
        except InputError as e:
            view.status, view.error = ViewStatus.ERROR, str(e)
            return view
        view.status, view.value = ViewStatus.READY, hijri
        return view

    def get_hijri_calendar(self, month: int, year: int, coordinates, timezone: str = None,
                           method=None) -> HijriView:
        """
        Every day of a Hijri month with its prayer times, as CalendarDay values.

        The provider's month is used when it answers. Otherwise the month is
        laid out from the tabular calendar and each day's times are computed
        locally; a day whose times cannot be computed keeps prayer_times=None.
        """
        view = HijriView(profile=self.profile)
        method = self.resolver.method if method is None else method
        try:
            coords = ensure_coordinates(coordinates)
            validate_hijri(year, month, 1)
            days = None
            try:
                days = self.provider.fetch_hijri_calendar(
                    month, year, coords, method, self.resolver.school, timezone=timezone
                )
            except InputError:
                raise
            except Exception:
                logger.exception("Hijri calendar provider raised, using tabular calculation")
            if days:
                view.source = "remote"
            else:
                days = [
                    CalendarDay(civil, hijri, self._local_times(coords, civil, method, timezone))
                    for civil, hijri in month_days(year, month)
                ]
                view.source = "local"
        except InputError as e:
            view.status, view.error = ViewStatus.ERROR, str(e)
            return view
        view.status, view.value = ViewStatus.READY, days
        return view

    def _local_times(self, coords, civil, method, timezone):
        date = datetime.date(civil.year, civil.month, civil.day)
        try:
            return self.resolver.calculator(coords, date, method, self.resolver.school, timezone=timezone)
        except InputError:
            raise
        except Exception:
            logger.exception("No local prayer times for %s", date)
            return None

    def get_prayer_schedule(self, coordinates, timezone: str, method=None, now=None) -> ScheduleView:
        view = ScheduleView()
        self._fill_schedule(view, coordinates, timezone, method, now)
        return view

    def load_prayer_schedule(self, coordinates, timezone: str, method=None,
                             callback: Callable[[ScheduleView], None] = None) -> ScheduleView:
        """Start the lookup on a background thread and return the pending view at once."""
        view = ScheduleView()

        def _load():
            self._fill_schedule(view, coordinates, timezone, method, None)
            if callback:
                callback(view)

        threading.Thread(target=_load, daemon=True).start()
        return view

    def _fill_schedule(self, view: ScheduleView, coordinates, timezone, method, now) -> None:
        try:
            schedule = self.resolver.resolve_schedule(coordinates, timezone, now=now, method=method)
        except InputError as e:
            view.error, view.status = str(e), ViewStatus.ERROR
        except ScheduleUnavailableError as e:
            logger.error("Prayer schedule unavailable: %s", e)
            view.error, view.status = str(e), ViewStatus.UNAVAILABLE
        else:
            view.value, view.status = schedule, ViewStatus.READY
