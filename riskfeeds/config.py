"""
Runtime configuration for the feed service.

Everything comes from environment variables (a local .env is loaded by
app.py via python-dotenv). Defaults match the dashboard's production
deployment: 30 minute cache, 10s per feed, 15s for the statistics pull.
"""

import os
from dataclasses import dataclass


def _env_int(name, default):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class FeedSettings:
    cache_ttl_min: int = 30
    feed_timeout: int = 10
    stats_timeout: int = 15
    max_items: int = 10
    user_agent: str = "ARPRI-Dashboard/1.0"
    retry_attempts: int = 1
    retry_max_wait: int = 8
    refresh_interval_min: int = 30
    allowed_origin: str = "*"
    port: int = 5000
    log_level: str = "INFO"

    @property
    def cache_ttl_seconds(self):
        return self.cache_ttl_min * 60

    @classmethod
    def from_env(cls):
        """Build settings from the process environment."""
        ttl = _env_int("CACHE_TTL_MIN", cls.cache_ttl_min)
        settings = cls(
            cache_ttl_min=ttl,
            feed_timeout=_env_int("FEED_TIMEOUT_SEC", cls.feed_timeout),
            stats_timeout=_env_int("STATS_TIMEOUT_SEC", cls.stats_timeout),
            max_items=_env_int("FEED_MAX_ITEMS", cls.max_items),
            user_agent=os.environ.get("FEED_USER_AGENT", cls.user_agent),
            retry_attempts=_env_int("FEED_RETRY_ATTEMPTS", cls.retry_attempts),
            retry_max_wait=_env_int("FEED_RETRY_MAX_WAIT", cls.retry_max_wait),
            # Warm-up follows the cache TTL unless set explicitly
            refresh_interval_min=_env_int("REFRESH_INTERVAL_MIN", ttl),
            allowed_origin=os.environ.get("ALLOWED_ORIGIN", cls.allowed_origin),
            port=_env_int("PORT", cls.port),
            log_level=os.environ.get("LOG_LEVEL", cls.log_level).upper(),
        )
        if settings.cache_ttl_min <= 0:
            raise ValueError("CACHE_TTL_MIN must be positive")
        if settings.retry_attempts < 1:
            raise ValueError("FEED_RETRY_ATTEMPTS must be at least 1")
        return settings
