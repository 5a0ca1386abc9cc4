"""Unit tests for riskfeeds.cache."""

from riskfeeds.cache import DEFAULT_TTL_SECONDS, CacheEntry, FeedCache

from conftest import FakeClock


class TestFeedCache:
    """Tests for FeedCache get/put/is_fresh/clear."""

    def test_default_ttl_is_30_minutes(self):
        assert DEFAULT_TTL_SECONDS == 1800
        assert FeedCache().ttl_seconds == 1800

    def test_get_missing_key(self, cache):
        assert cache.get("nvd") is None

    def test_put_records_timestamp(self, cache, clock):
        cache.put("nvd", [1, 2, 3])
        entry = cache.get("nvd")
        assert isinstance(entry, CacheEntry)
        assert entry.key == "nvd"
        assert entry.value == [1, 2, 3]
        assert entry.stored_at == clock.now

    def test_put_overwrites(self, cache, clock):
        cache.put("nvd", ["old"])
        clock.advance(60)
        cache.put("nvd", ["new"])
        assert len(cache) == 1
        assert cache.get("nvd").value == ["new"]
        assert cache.get("nvd").stored_at == clock.now

    def test_fresh_within_ttl(self, cache, clock):
        entry = cache.put("cisa", [])
        clock.advance(cache.ttl_seconds - 1)
        assert cache.is_fresh(entry) is True

    def test_stale_at_exactly_ttl(self, cache, clock):
        entry = cache.put("cisa", [])
        clock.advance(cache.ttl_seconds)
        assert cache.is_fresh(entry) is False

    def test_stale_entries_are_kept(self, cache, clock):
        cache.put("github", ["x"])
        clock.advance(cache.ttl_seconds * 10)
        assert cache.get("github").value == ["x"]

    def test_age(self, cache, clock):
        assert cache.age("nvd") is None
        cache.put("nvd", [])
        clock.advance(42)
        assert cache.age("nvd") == 42

    def test_clear_is_idempotent(self, cache):
        cache.put("nvd", [])
        cache.put("cisa", [])
        cache.clear()
        assert len(cache) == 0
        assert cache.keys() == []
        cache.clear()
        assert len(cache) == 0

    def test_custom_ttl(self):
        clock = FakeClock()
        cache = FeedCache(ttl_seconds=5, clock=clock)
        entry = cache.put("nvd", [])
        clock.advance(4.9)
        assert cache.is_fresh(entry)
        clock.advance(0.2)
        assert not cache.is_fresh(entry)
