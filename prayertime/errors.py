"""Exceptions raised by the prayer time engine."""


class PrayerTimeError(Exception):
    """Base class for all engine errors."""


class InputError(PrayerTimeError, ValueError):
    """Invalid coordinates, dates or Hijri components supplied by the caller."""


class ProviderError(PrayerTimeError):
    """The remote provider answered with something we cannot use."""


class ScheduleUnavailableError(PrayerTimeError):
    """Neither the remote provider nor the local calculator produced a schedule."""
