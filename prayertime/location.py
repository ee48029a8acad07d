"""Location detection using IP geolocation and manual config."""

import json
import logging
import os
from dataclasses import asdict, dataclass

import pytz
import requests

from prayertime import config
from prayertime.errors import InputError
from prayertime.models import validate_coordinates

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float
    city: str = ""
    country: str = ""
    timezone: str = "UTC"


# Used whenever no location is available (permission denied, lookup failed)
DEFAULT_LOCATION = Location(
    latitude=21.3891,
    longitude=39.8579,
    city="Mecca",
    country="Saudi Arabia",
    timezone="Asia/Riyadh",
)

IPAPI_URL = "http://ip-api.com/json/"

REQUIRED_KEYS = ("latitude", "longitude", "city", "country", "timezone")


def resolve_location(location) -> Location:
    """Return the given location, or DEFAULT_LOCATION when there is none."""
    if location is None:
        logger.info("No location available, using %s", DEFAULT_LOCATION.city)
        return DEFAULT_LOCATION
    if isinstance(location, dict):
        location = location_from_dict(location)
    validate_coordinates(location.latitude, location.longitude)
    return location


def location_from_dict(data: dict) -> Location:
    missing = [k for k in ("latitude", "longitude") if data.get(k) is None]
    if missing:
        raise InputError(f"Location is missing {', '.join(missing)}")
    coords = validate_coordinates(data["latitude"], data["longitude"])
    timezone = data.get("timezone") or DEFAULT_LOCATION.timezone
    if timezone not in pytz.all_timezones_set:
        raise InputError(f"Unknown timezone: {timezone}")
    return Location(
        latitude=coords.latitude,
        longitude=coords.longitude,
        city=data.get("city") or "",
        country=data.get("country") or "",
        timezone=timezone,
    )


def get_location(timeout: int = 5) -> Location:
    """
    Detect current location via IP geolocation.

    Falls back to DEFAULT_LOCATION on failure.
    """
    try:
        resp = requests.get(
            IPAPI_URL,
            params={"fields": "city,regionName,country,lat,lon,timezone,status,message"},
            timeout=timeout,
        )
        resp.raise_for_status()
        data = resp.json()
        if data.get("status") == "success":
            return location_from_dict({
                "latitude": data.get("lat"),
                "longitude": data.get("lon"),
                "city": data.get("city"),
                "country": data.get("country"),
                "timezone": data.get("timezone"),
            })
        logger.warning("IP geolocation refused: %s", data.get("message"))
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.warning("IP geolocation failed: %s", e)
    return DEFAULT_LOCATION


def save_manual_location(location: Location) -> None:
    """Save a manually-set location to the config file."""
    resolve_location(location)
    os.makedirs(os.path.dirname(config.LOCATION_FILE), exist_ok=True)
    with open(config.LOCATION_FILE, "w", encoding="utf-8") as f:
        json.dump(asdict(location), f, indent=2, ensure_ascii=False)


def load_manual_location():
    """Load a previously saved manual location, or return None."""
    if not os.path.isfile(config.LOCATION_FILE):
        return None
    try:
        with open(config.LOCATION_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, dict) and all(k in data for k in REQUIRED_KEYS):
            return location_from_dict(data)
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable location file %s: %s", config.LOCATION_FILE, e)
    return None


def clear_manual_location() -> None:
    """Remove the saved manual location config."""
    if os.path.isfile(config.LOCATION_FILE):
        os.remove(config.LOCATION_FILE)


def current_location(timeout: int = 5) -> Location:
    """The saved manual location if there is one, else an IP lookup."""
    return load_manual_location() or get_location(timeout)
