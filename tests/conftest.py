"""Shared fixtures: fake HTTP session, fake clock, counting fetchers."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from riskfeeds import FeedAggregator, FeedCache, FeedSettings
from riskfeeds.fetchers import FeedFetchError


class FakeResponse:
    def __init__(self, payload=None, status_code=200, invalid_json=False):
        self._payload = payload
        self.status_code = status_code
        self._invalid_json = invalid_json

    def json(self):
        if self._invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeSession:
    """Stands in for requests.Session; maps URL -> FakeResponse or exception."""

    def __init__(self, routes=None):
        self.routes = routes or {}
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        response = self.routes[url]
        if isinstance(response, Exception):
            raise response
        return response


class FakeClock:
    def __init__(self, start=1_700_000_000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class CountingFetch:
    """Fetch function that records how often it ran."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def settings() -> FeedSettings:
    return FeedSettings()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(settings: FeedSettings, clock: FakeClock) -> FeedCache:
    return FeedCache(ttl_seconds=settings.cache_ttl_seconds, clock=clock)


@pytest.fixture
def fetchers():
    return {
        "nvd":       CountingFetch([{"id": "CVE-2099-0001", "source": "NVD"}]),
        "cisa":      CountingFetch([{"cveID": "CVE-2099-0002", "source": "CISA KEV"}]),
        "github":    CountingFetch([{"id": "GHSA-aaaa-bbbb-cccc", "source": "GitHub"}]),
        "cve-stats": CountingFetch({"total": 0, "source": "NVD"}),
    }


@pytest.fixture
def aggregator(cache, settings, fetchers) -> FeedAggregator:
    return FeedAggregator(cache, settings, session=FakeSession(), fetchers=fetchers)


@pytest.fixture
def fetch_error() -> FeedFetchError:
    return FeedFetchError("NVD", 503)
