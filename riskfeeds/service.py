"""Query façade used by the HTTP layer."""

import logging

log = logging.getLogger(__name__)


class UnknownSourceError(ValueError):
    pass


class FeedService:
    def __init__(self, aggregator):
        self.aggregator = aggregator
        self._sources = {
            "nvd":        aggregator.get_nvd_data,
            "cisa":       aggregator.get_cisa_advisories,
            "github":     aggregator.get_github_advisories,
            "statistics": aggregator.get_cve_statistics,
            "cve-stats":  aggregator.get_cve_statistics,
            "owasp":      aggregator.get_owasp_top10,
        }

    @property
    def source_names(self):
        return sorted(self._sources)

    def has_source(self, name):
        return name in self._sources

    def get_source(self, name):
        """Cached-or-fetched result for one feed: {data, source}."""
        try:
            getter = self._sources[name]
        except KeyError:
            raise UnknownSourceError(
                f"Unknown feed {name!r}; expected one of {', '.join(self.source_names)}"
            ) from None
        return getter()

    def get_all(self):
        return self.aggregator.aggregate_feeds()

    def clear_cache(self):
        log.info("Feed cache cleared on request")
        self.aggregator.clear_cache()

    def status(self):
        return self.aggregator.cache_status()
