"""Turn a day's prayer times into a schedule with current/next prayer and countdown."""

import datetime
import logging
from dataclasses import dataclass
from typing import Callable, Tuple

import pytz

from prayertime import config
from prayertime.astronomy import compute_prayer_times
from prayertime.errors import InputError, ScheduleUnavailableError
from prayertime.models import PRAYER_NAMES, PrayerTimes, ensure_coordinates

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrayerInstant:
    name: str
    time: datetime.datetime
    is_current: bool = False
    is_next: bool = False
    # Countdown to this prayer; only non-zero on the next prayer
    seconds_until_next: int = 0


@dataclass(frozen=True)
class Schedule:
    instants: Tuple[PrayerInstant, ...]
    current: PrayerInstant
    next: PrayerInstant
    now: datetime.datetime
    timezone: str
    prayer_times: PrayerTimes

    @property
    def source(self) -> str:
        return self.prayer_times.source

    @property
    def seconds_until_next(self) -> int:
        return self.next.seconds_until_next

    def seconds_remaining(self, now: datetime.datetime) -> int:
        """Countdown to the next prayer as seen at `now`, never negative."""
        return max(0, seconds_until(self.next.time, now))

    def is_expired(self, now: datetime.datetime) -> bool:
        """True once the next prayer has arrived; the schedule must be resolved again."""
        return self.seconds_remaining(now) == 0


def get_timezone(timezone: str):
    if not timezone:
        raise InputError("timezone is required")
    try:
        return pytz.timezone(timezone)
    except pytz.UnknownTimeZoneError:
        raise InputError(f"Unknown timezone: {timezone}") from None


def localize_now(now: datetime.datetime, tz) -> datetime.datetime:
    """Express `now` on the wall clock of tz; naive values are taken as already local."""
    if now.tzinfo is None:
        return tz.localize(now)
    return now.astimezone(tz)


def time_str_to_datetime(time_str: str, date: datetime.date, tz) -> datetime.datetime:
    """Convert 'HH:MM' on a given date to a timezone-aware datetime."""
    hour, minute = map(int, time_str.split(":")[:2])
    return tz.localize(datetime.datetime(date.year, date.month, date.day, hour, minute))


def seconds_until(target_dt: datetime.datetime, now: datetime.datetime) -> int:
    """Return seconds from now until target_dt (can be negative if past)."""
    delta = target_dt - now
    return int(delta.total_seconds())


def format_countdown(seconds: int) -> str:
    """Format seconds into HH:MM:SS countdown string."""
    if seconds < 0:
        return "00:00:00"
    h = seconds // 3600
    m = (seconds % 3600) // 60
    s = seconds % 60
    return f"{h:02d}:{m:02d}:{s:02d}"


def anchor_timings(prayer_times: PrayerTimes, date: datetime.date, tz) -> list:
    """
    The five prayers as (name, aware datetime) for the prayer day of `date`,
    in prayer order.

    Each time is placed on `date` unless that would break the prayer order
    around Dhuhr: a prayer listed before Dhuhr whose clock time is later than
    the one after it belongs to the previous day, and one listed after Dhuhr
    whose clock time is earlier than the one before it belongs to the next.
    At high latitudes that moves Isha past midnight or Fajr before it.
    """
    anchored = [[name, time_str_to_datetime(prayer_times.timings[name], date, tz)] for name in PRAYER_NAMES]
    noon = PRAYER_NAMES.index("Dhuhr")
    for index in range(noon - 1, -1, -1):
        if anchored[index][1] > anchored[index + 1][1]:
            anchored[index][1] = _shift_days(anchored[index][1], -1, tz)
    for index in range(noon + 1, len(anchored)):
        if anchored[index][1] < anchored[index - 1][1]:
            anchored[index][1] = _shift_days(anchored[index][1], 1, tz)
    return [(name, when) for name, when in anchored]


def determine_next_and_current(prayer_times: PrayerTimes, now: datetime.datetime, tz) -> Tuple[PrayerInstant, ...]:
    """
    The day's five prayers with the next and current one flagged.

    Yesterday's, today's and tomorrow's prayers are laid on one timeline.
    The next prayer is the first strictly after `now`; a prayer whose time
    equals `now` has already started. The current prayer is the one before
    it, so before Fajr it is yesterday's Isha and after Isha the next prayer
    is tomorrow's Fajr. Those two carry their own instants; the other three
    are today's.
    """
    today = now.date()
    days = {
        offset: anchor_timings(prayer_times, today + datetime.timedelta(days=offset), tz)
        for offset in (-1, 0, 1)
    }
    timeline = sorted(
        (when, offset, index)
        for offset, anchored in days.items()
        for index, (_, when) in enumerate(anchored)
    )
    position = next(i for i, (when, _, _) in enumerate(timeline) if when > now)
    next_when, next_offset, next_index = timeline[position]
    _, current_offset, current_index = timeline[position - 1]

    countdown = max(0, seconds_until(next_when, now))
    instants = []
    for index, (name, when) in enumerate(days[0]):
        if index == next_index:
            when = days[next_offset][index][1]
        elif index == current_index:
            when = days[current_offset][index][1]
        instants.append(PrayerInstant(
            name=name,
            time=when,
            is_current=index == current_index,
            is_next=index == next_index,
            seconds_until_next=countdown if index == next_index else 0,
        ))
    return tuple(instants)


def _shift_days(when: datetime.datetime, days: int, tz) -> datetime.datetime:
    # Re-localize rather than add a timedelta so DST changes keep the wall-clock time
    naive = when.replace(tzinfo=None) + datetime.timedelta(days=days)
    return tz.localize(naive)


def _utc_now() -> datetime.datetime:
    return datetime.datetime.now(pytz.utc)


class ScheduleResolver:
    """
    Builds today's schedule from the remote provider, falling back to the
    local calculator whenever the provider cannot answer.
    """

    def __init__(
        self,
        provider=None,
        calculator: Callable[..., PrayerTimes] = compute_prayer_times,
        clock: Callable[[], datetime.datetime] = _utc_now,
        method=config.DEFAULT_METHOD,
        school=config.DEFAULT_SCHOOL,
    ):
        self.provider = provider
        self.calculator = calculator
        self.clock = clock
        self.method = method
        self.school = school

    def get_prayer_times(self, coordinates, date: datetime.date, timezone: str,
                         method=None, school=None) -> PrayerTimes:
        """Remote first, local astronomy second. Raises only for bad input or if both fail."""
        coords = ensure_coordinates(coordinates)
        method = self.method if method is None else method
        school = self.school if school is None else school

        if self.provider is not None:
            try:
                times = self.provider.fetch_prayer_times(coords, date, method, school, timezone=timezone)
            except InputError:
                raise
            except Exception:
                logger.exception("Prayer time provider raised, using local calculation")
                times = None
            if times is not None:
                return times
            logger.warning("Remote prayer times unavailable for %s, using local calculation", date)

        try:
            return self.calculator(coords, date, method, school, timezone=timezone)
        except InputError:
            raise
        except Exception as e:
            raise ScheduleUnavailableError(f"No prayer times for {date}: {e}") from e

    def resolve_schedule(self, coordinates, timezone: str, now: datetime.datetime = None,
                         method=None, school=None) -> Schedule:
        coords = ensure_coordinates(coordinates)
        tz = get_timezone(timezone)
        now = localize_now(now or self.clock(), tz)
        today = now.date()

        prayer_times = self.get_prayer_times(coords, today, timezone, method, school)
        instants = determine_next_and_current(prayer_times, now, tz)
        current = next(i for i in instants if i.is_current)
        upcoming = next(i for i in instants if i.is_next)
        logger.debug(
            "Schedule for %s from %s: current=%s next=%s in %ss",
            today, prayer_times.source, current.name, upcoming.name, upcoming.seconds_until_next,
        )
        return Schedule(
            instants=instants,
            current=current,
            next=upcoming,
            now=now,
            timezone=timezone,
            prayer_times=prayer_times,
        )
