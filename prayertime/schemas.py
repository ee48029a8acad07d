"""
Strict models of the AlAdhan JSON responses.

Anything missing or malformed raises ProviderError so callers never see a
half-populated result.
"""

import re
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.functional_validators import AfterValidator

from prayertime.errors import ProviderError

_TIME_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})")
_DATE_RE = r"^\d{2}-\d{2}-\d{4}$"


def parse_time_str(value: str) -> str:
    """Normalise "05:10", "05:10:00" or "05:10 (+03)" to "05:10"."""
    match = _TIME_RE.match(value)
    if not match:
        raise ValueError(f"Unrecognised time string: {value!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValueError(f"Time out of range: {value!r}")
    return f"{hour:02d}:{minute:02d}"


TimeStr = Annotated[str, AfterValidator(parse_time_str)]
DateStr = Annotated[str, Field(pattern=_DATE_RE)]


class _Model(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class Timings(_Model):
    Fajr: TimeStr
    Dhuhr: TimeStr
    Asr: TimeStr
    Maghrib: TimeStr
    Isha: TimeStr
    Sunrise: Optional[TimeStr] = None
    Sunset: Optional[TimeStr] = None
    Imsak: Optional[TimeStr] = None
    Midnight: Optional[TimeStr] = None


class Weekday(_Model):
    en: str
    ar: Optional[str] = None


class HijriMonth(_Model):
    number: int = Field(ge=1, le=12)
    en: str
    ar: str


class GregorianMonth(_Model):
    number: int = Field(ge=1, le=12)
    en: Optional[str] = None


class HijriPart(_Model):
    date: DateStr
    day: int = Field(ge=1, le=30)
    weekday: Weekday
    month: HijriMonth
    year: int = Field(ge=1)
    holidays: List[str] = Field(default_factory=list)


class GregorianPart(_Model):
    date: DateStr
    day: int = Field(ge=1, le=31)
    month: GregorianMonth
    year: int = Field(ge=1)
    weekday: Optional[Weekday] = None


class DateInfo(_Model):
    hijri: HijriPart
    gregorian: GregorianPart


class TimingsData(_Model):
    timings: Timings
    date: DateInfo


class _Envelope(_Model):
    code: int
    status: str


class TimingsResponse(_Envelope):
    data: TimingsData


class DateResponse(_Envelope):
    data: DateInfo


class CalendarResponse(_Envelope):
    data: List[TimingsData] = Field(min_length=1)


def _parse(model, body):
    if not isinstance(body, dict):
        raise ProviderError(f"Expected a JSON object, got {type(body).__name__}")
    if body.get("code") != 200 or body.get("status") != "OK":
        raise ProviderError(f"AlAdhan API error: code={body.get('code')} status={body.get('status')}")
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise ProviderError(f"Malformed AlAdhan response: {e.error_count()} invalid field(s)") from e


def parse_timings_response(body) -> TimingsResponse:
    return _parse(TimingsResponse, body)


def parse_date_response(body) -> DateResponse:
    return _parse(DateResponse, body)


def parse_calendar_response(body) -> CalendarResponse:
    return _parse(CalendarResponse, body)
