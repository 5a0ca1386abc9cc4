"""Public vulnerability feed aggregation for the AI risk dashboard."""

from riskfeeds.aggregator import FeedAggregator
from riskfeeds.cache import CacheEntry, FeedCache
from riskfeeds.config import FeedSettings
from riskfeeds.fetchers import FeedFetchError
from riskfeeds.service import FeedService, UnknownSourceError

__version__ = "1.0.0"

__all__ = [
    "CacheEntry",
    "FeedAggregator",
    "FeedCache",
    "FeedFetchError",
    "FeedService",
    "FeedSettings",
    "UnknownSourceError",
]
