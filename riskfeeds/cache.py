"""
In-memory feed cache.

One entry per upstream source, each stamped with the time it was stored.
Entries are never expunged on their own: a stale entry is simply reported
as not fresh and gets overwritten by the next successful fetch.
"""

import logging
import threading
import time
from collections import namedtuple

log = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 30 * 60

CacheEntry = namedtuple("CacheEntry", ["key", "value", "stored_at"])


class FeedCache:
    def __init__(self, ttl_seconds=DEFAULT_TTL_SECONDS, clock=time.time):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries = {}
        self._lock = threading.Lock()

    def get(self, key):
        with self._lock:
            return self._entries.get(key)

    def put(self, key, value):
        entry = CacheEntry(key, value, self._clock())
        with self._lock:
            self._entries[key] = entry
        log.info(f"Cache updated: {key} ({len(str(value))} bytes)")
        return entry

    def is_fresh(self, entry):
        return self._clock() - entry.stored_at < self.ttl_seconds

    def age(self, key):
        """Seconds since `key` was stored, or None if it never was."""
        entry = self.get(key)
        if entry is None:
            return None
        return self._clock() - entry.stored_at

    def clear(self):
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        log.info(f"Cache cleared ({count} entries)")

    def keys(self):
        with self._lock:
            return list(self._entries)

    def __len__(self):
        with self._lock:
            return len(self._entries)
