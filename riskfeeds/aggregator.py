"""
Feed aggregator.

For each source: serve the cached value while it is fresh, otherwise try
the live feed, otherwise fall back to synthetic data. Fallback data is
never cached, so the next request tries the live feed again.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone
from functools import partial

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter

from riskfeeds import fallback
from riskfeeds.fetchers import (
    FeedFetchError,
    build_session,
    fetch_cisa_kev,
    fetch_cve_statistics,
    fetch_github_advisories,
    fetch_nvd,
)

log = logging.getLogger(__name__)

# Public feed name -> cache key
FEED_KEYS = {
    "nvd":        "nvd",
    "cisa":       "cisa",
    "github":     "github",
    "statistics": "cve-stats",
}

SOURCE_LABELS = ["NIST NVD", "CISA KEV", "GitHub Security", "OWASP"]

FALLBACKS = {
    "nvd":       fallback.fallback_nvd,
    "cisa":      fallback.fallback_cisa,
    "github":    fallback.fallback_github,
    "cve-stats": fallback.fallback_statistics,
}


def build_retry_policy(settings):
    """Attempts per live fetch. One attempt means the cache TTL is the only retry."""
    return Retrying(
        stop=stop_after_attempt(settings.retry_attempts),
        wait=wait_exponential_jitter(initial=1, max=settings.retry_max_wait),
        retry=retry_if_exception_type(FeedFetchError),
        reraise=True,
    )


class FeedAggregator:
    def __init__(self, cache, settings, session=None, fetchers=None, fallbacks=None):
        self.cache    = cache
        self.settings = settings
        self._retry   = build_retry_policy(settings)

        session = session or build_session(settings)
        self._fetchers = {
            "nvd":       partial(fetch_nvd, session, settings),
            "cisa":      partial(fetch_cisa_kev, session, settings),
            "github":    partial(fetch_github_advisories, session, settings),
            "cve-stats": partial(fetch_cve_statistics, session, settings),
        }
        self._fetchers.update(fetchers or {})
        self._fallbacks = dict(FALLBACKS)
        self._fallbacks.update(fallbacks or {})

        # key -> Future of the fetch currently running for that key
        self._inflight = {}
        self._lock = threading.Lock()

    # ─────────────────────────────────────────
    # CORE: cache -> live -> fallback
    # ─────────────────────────────────────────
    def get_cached_or_fetch(self, key, fetch_fn, fallback_fn):
        entry = self.cache.get(key)
        if entry is not None and self.cache.is_fresh(entry):
            return {"data": entry.value, "source": "cache"}

        with self._lock:
            future = self._inflight.get(key)
            leader = future is None
            if leader:
                future = Future()
                self._inflight[key] = future

        if not leader:
            log.debug(f"Joining in-flight fetch for {key}")
            return future.result()

        try:
            result = self._fetch_or_fallback(key, fetch_fn, fallback_fn)
        except BaseException as e:
            future.set_exception(e)
            raise
        else:
            future.set_result(result)
            return result
        finally:
            with self._lock:
                self._inflight.pop(key, None)

    def _fetch_or_fallback(self, key, fetch_fn, fallback_fn):
        # Another caller may have refreshed the entry while we waited for the lock
        entry = self.cache.get(key)
        if entry is not None and self.cache.is_fresh(entry):
            return {"data": entry.value, "source": "cache"}

        try:
            data = self._retry.copy()(fetch_fn)
        except Exception as e:
            log.warning(f"Failed to fetch {key}, using fallback: {e}")
            return {"data": fallback_fn(), "source": "fallback"}

        self.cache.put(key, data)
        return {"data": data, "source": "external"}

    def _get(self, key):
        return self.get_cached_or_fetch(key, self._fetchers[key], self._fallbacks[key])

    # ─────────────────────────────────────────
    # PER-SOURCE
    # ─────────────────────────────────────────
    def get_nvd_data(self):
        return self._get("nvd")

    def get_cisa_advisories(self):
        return self._get("cisa")

    def get_github_advisories(self):
        return self._get("github")

    def get_cve_statistics(self):
        return self._get("cve-stats")

    def get_owasp_top10(self):
        """Static list, returned as-is without caching."""
        return fallback.owasp_top10()

    # ─────────────────────────────────────────
    # ALL SOURCES
    # ─────────────────────────────────────────
    def aggregate_feeds(self):
        """Fetch every feed concurrently; a failing branch degrades to its fallback."""
        branches = {
            "nvd":        self.get_nvd_data,
            "cisa":       self.get_cisa_advisories,
            "github":     self.get_github_advisories,
            "statistics": self.get_cve_statistics,
        }
        with ThreadPoolExecutor(max_workers=len(branches), thread_name_prefix="feed") as pool:
            futures = {name: pool.submit(fn) for name, fn in branches.items()}

        result = {}
        for name, future in futures.items():
            try:
                result[name] = future.result()
            except Exception as e:
                log.error(f"Feed branch {name} failed, using fallback: {e}")
                result[name] = {"data": self._fallbacks[FEED_KEYS[name]](), "source": "fallback"}

        result["owasp"]         = self.get_owasp_top10()
        result["sources"]       = list(SOURCE_LABELS)
        result["lastUpdated"]   = datetime.now(timezone.utc).isoformat()
        result["cacheDuration"] = f"{self.settings.cache_ttl_min} minutes"
        return result

    def cache_status(self):
        status = {}
        for name, key in FEED_KEYS.items():
            entry = self.cache.get(key)
            age = self.cache.age(key)
            status[name] = {
                "cached":     entry is not None,
                "fresh":      entry is not None and self.cache.is_fresh(entry),
                "ageSeconds": round(age, 1) if age is not None else None,
            }
        return status

    def clear_cache(self):
        self.cache.clear()
