"""Runtime settings, read from the environment with sensible defaults."""

import os

ALADHAN_BASE = os.environ.get("PRAYERTIME_API_BASE", "https://api.aladhan.com/v1")

# Seconds before a remote request is abandoned and the local fallback is used
REQUEST_TIMEOUT = float(os.environ.get("PRAYERTIME_TIMEOUT", "10"))

# Prayer times change daily; 6 hours keeps at most one stale refresh per day
CACHE_TTL_SECONDS = int(os.environ.get("PRAYERTIME_CACHE_TTL", str(6 * 60 * 60)))

# AlAdhan method id: 3 = Muslim World League. School 0 = Shafi, 1 = Hanafi
DEFAULT_METHOD = int(os.environ.get("PRAYERTIME_METHOD", "3"))
DEFAULT_SCHOOL = int(os.environ.get("PRAYERTIME_SCHOOL", "0"))

CONFIG_DIR = os.environ.get(
    "PRAYERTIME_CONFIG_DIR",
    os.path.join(os.path.expanduser("~"), ".prayertime"),
)
CACHE_FILE = os.path.join(CONFIG_DIR, "cache.json")
LOCATION_FILE = os.path.join(CONFIG_DIR, "location.json")

LOG_LEVEL = os.environ.get("PRAYERTIME_LOG_LEVEL", "WARNING").upper()
