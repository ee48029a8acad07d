"""TTL cache for provider responses, in memory or backed by a JSON file."""

import json
import logging
import os
import threading
import time
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Optional

from prayertime import config

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    payload: Any
    fetched_at: float
    # Calendar date (DD-MM-YYYY) the payload describes, if any
    date: Optional[str] = None


def make_cache_key(kind: str, lat: float = None, lng: float = None, date: str = None) -> str:
    """
    Build "{kind}_{lat:.2f}_{lng:.2f}[_{date}]".

    Coordinates are rounded so that nearby requests share an entry.
    """
    parts = [kind]
    if lat is not None and lng is not None:
        parts.append(f"{lat:.2f}")
        parts.append(f"{lng:.2f}")
    if date:
        parts.append(date)
    return "_".join(parts)


class TTLCache:
    """
    Key -> CacheEntry map with lazy expiry.

    An entry is a hit only while it is younger than the TTL and, when the
    caller asks for a date, only if the entry was stored for that same date.
    Anything else is evicted on read.
    """

    def __init__(self, ttl: float = config.CACHE_TTL_SECONDS, clock: Callable[[], float] = time.time):
        self.ttl = ttl
        self.clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str, date: str = None):
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            age = self.clock() - entry.fetched_at
            if age >= self.ttl:
                logger.debug("Cache entry %s expired (%.0fs old)", key, age)
                self._evict(key)
                return None
            if date is not None and entry.date != date:
                logger.debug("Cache entry %s is for %s, wanted %s", key, entry.date, date)
                self._evict(key)
                return None
            return entry.payload

    def set(self, key: str, payload, date: str = None) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(payload=payload, fetched_at=self.clock(), date=date)
            self._persist()

    def delete(self, key: str) -> None:
        with self._lock:
            self._evict(key)

    def clear(self, prefix: str = "") -> None:
        """Drop every entry, or only those whose key starts with prefix."""
        with self._lock:
            for key in [k for k in self._entries if k.startswith(prefix)]:
                del self._entries[key]
            self._persist()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def _evict(self, key: str) -> None:
        if self._entries.pop(key, None) is not None:
            self._persist()

    def _persist(self) -> None:
        """Hook for subclasses that keep entries outside the process."""


class JsonFileCache(TTLCache):
    """TTLCache that survives restarts by mirroring its entries to a JSON file."""

    def __init__(self, path: str = config.CACHE_FILE, ttl: float = config.CACHE_TTL_SECONDS,
                 clock: Callable[[], float] = time.time):
        super().__init__(ttl=ttl, clock=clock)
        self.path = path
        self._entries = self._load()

    def _load(self) -> Dict[str, CacheEntry]:
        if not os.path.isfile(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            return {key: CacheEntry(**value) for key, value in raw.items()}
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Ignoring unreadable cache file %s: %s", self.path, e)
            return {}

    def _persist(self) -> None:
        try:
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump({key: asdict(entry) for key, entry in self._entries.items()}, f, ensure_ascii=False)
        except OSError as e:
            logger.warning("Could not write cache file %s: %s", self.path, e)
