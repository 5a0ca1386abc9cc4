"""
Upstream feed fetchers.

One function per source. Each does a single bounded-time GET, normalizes
the payload into the record shape the dashboard expects and returns it.
Any transport problem, non-2xx status or un-parseable body raises
FeedFetchError; missing fields inside an otherwise valid payload are
defaulted instead.
"""

import logging
from datetime import datetime, timedelta, timezone

import requests

from riskfeeds.fallback import now_iso

log = logging.getLogger(__name__)

NVD_API_URL           = "https://services.nvd.nist.gov/rest/json/cves/2.0"
CISA_KEV_URL          = "https://www.cisa.gov/sites/default/files/feeds/known_exploited_vulnerabilities.json"
GITHUB_ADVISORIES_URL = "https://api.github.com/advisories"

NVD_KEYWORD        = "artificial intelligence"
STATS_SAMPLE_SIZE  = 100
DESCRIPTION_MAX    = 200
SUMMARY_MAX        = 150
SEVERITY_BUCKETS   = ("CRITICAL", "HIGH", "MEDIUM", "LOW", "UNKNOWN")
RECENT_WINDOW      = timedelta(days=30)


class FeedFetchError(Exception):
    """A live feed could not be retrieved or parsed."""

    def __init__(self, source, reason):
        super().__init__(f"{source} API error: {reason}")
        self.source = source
        self.reason = reason


def build_session(settings):
    s = requests.Session()
    s.headers.update({
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    })
    return s


# ─────────────────────────────────────────
# HELPERS
# ─────────────────────────────────────────
def _get_json(session, source, url, timeout, params=None, headers=None):
    try:
        r = session.get(url, params=params, headers=headers, timeout=timeout)
    except requests.RequestException as e:
        raise FeedFetchError(source, e) from e
    if not 200 <= r.status_code < 300:
        raise FeedFetchError(source, r.status_code)
    try:
        return r.json()
    except ValueError as e:
        raise FeedFetchError(source, f"invalid JSON ({e})") from e


def _items(payload, field, source):
    """Pull the record list out of a JSON object payload."""
    if not isinstance(payload, dict):
        raise FeedFetchError(source, f"expected a JSON object, got {type(payload).__name__}")
    items = payload.get(field) or []
    if not isinstance(items, list):
        raise FeedFetchError(source, f"'{field}' is not a list")
    return items


def _obj(value):
    return value if isinstance(value, dict) else {}


def _first(value):
    if isinstance(value, list) and value:
        return _obj(value[0])
    return {}


def _truncate(text, limit):
    return str(text)[:limit]


def _cvss_v31(cve):
    metrics = _obj(cve.get("metrics"))
    return _obj(_first(metrics.get("cvssMetricV31")).get("cvssData"))


def _english_description(cve):
    descriptions = [d for d in (cve.get("descriptions") or []) if isinstance(d, dict)]
    desc = next((d.get("value") for d in descriptions if d.get("lang") == "en"), None)
    return desc or _first(descriptions).get("value") or "No description"


def _score(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def _parse_timestamp(value):
    if not isinstance(value, str) or not value:
        return None
    try:
        ts = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


# ─────────────────────────────────────────
# NIST NVD - recent AI-related CVEs
# Docs: https://nvd.nist.gov/developers/vulnerabilities
# ─────────────────────────────────────────
def normalize_nvd_item(vuln):
    cve  = _obj(_obj(vuln).get("cve"))
    cvss = _cvss_v31(cve)
    score = cvss.get("baseScore")
    return {
        "id":          cve.get("id") or "N/A",
        "description": _truncate(_english_description(cve), DESCRIPTION_MAX),
        "severity":    cvss.get("baseSeverity") or "MEDIUM",
        "score":       5.0 if score is None else score,
        "published":   cve.get("published") or now_iso(),
        "source":      "NVD",
    }


def fetch_nvd(session, settings):
    """Fetch recent CVEs matching the AI keyword search."""
    payload = _get_json(
        session, "NVD", NVD_API_URL, settings.feed_timeout,
        params={"keywordSearch": NVD_KEYWORD, "resultsPerPage": settings.max_items},
    )
    vulns = _items(payload, "vulnerabilities", "NVD")
    return [normalize_nvd_item(v) for v in vulns[:settings.max_items]]


# ─────────────────────────────────────────
# CISA KEV - Known Exploited Vulnerabilities catalog
# ─────────────────────────────────────────
def normalize_kev_item(vuln):
    vuln = _obj(vuln)
    return {
        "cveID":             vuln.get("cveID") or "N/A",
        "vendorProject":     vuln.get("vendorProject") or "Unknown",
        "product":           vuln.get("product") or "Unknown",
        "vulnerabilityName": vuln.get("vulnerabilityName") or "N/A",
        "dateAdded":         vuln.get("dateAdded") or now_iso(),
        "shortDescription":  _truncate(vuln.get("shortDescription") or "N/A", SUMMARY_MAX),
        "requiredAction":    _truncate(vuln.get("requiredAction") or "N/A", SUMMARY_MAX),
        "source":            "CISA KEV",
    }


def fetch_cisa_kev(session, settings):
    payload = _get_json(session, "CISA", CISA_KEV_URL, settings.feed_timeout)
    vulns = _items(payload, "vulnerabilities", "CISA")
    return [normalize_kev_item(v) for v in vulns[:settings.max_items]]


# ─────────────────────────────────────────
# GITHUB SECURITY ADVISORIES - high/critical, all ecosystems
# Docs: https://docs.github.com/en/rest/security-advisories/global-advisories
# ─────────────────────────────────────────
def normalize_github_advisory(advisory):
    advisory = _obj(advisory)
    package  = _obj(_first(advisory.get("vulnerabilities")).get("package"))
    severity = advisory.get("severity")
    return {
        "id":          advisory.get("ghsa_id") or "N/A",
        "cveId":       advisory.get("cve_id") or None,
        "severity":    severity.upper() if isinstance(severity, str) and severity else "MEDIUM",
        "summary":     _truncate(advisory.get("summary") or "No summary", SUMMARY_MAX),
        "description": _truncate(advisory.get("description") or "No description", DESCRIPTION_MAX),
        "published":   advisory.get("published_at") or now_iso(),
        "updated":     advisory.get("updated_at") or now_iso(),
        "ecosystem":   package.get("ecosystem") or "Unknown",
        "package":     package.get("name") or "Unknown",
        "source":      "GitHub",
    }


def fetch_github_advisories(session, settings):
    payload = _get_json(
        session, "GitHub", GITHUB_ADVISORIES_URL, settings.feed_timeout,
        params={"per_page": settings.max_items, "severity": "high,critical"},
        headers={"Accept": "application/vnd.github+json"},
    )
    # This endpoint answers with a bare JSON array
    if not isinstance(payload, list):
        raise FeedFetchError("GitHub", f"expected a JSON array, got {type(payload).__name__}")
    return [normalize_github_advisory(a) for a in payload[:settings.max_items]]


# ─────────────────────────────────────────
# CVE STATISTICS - derived from a larger NVD sample
# ─────────────────────────────────────────
def compute_cve_statistics(vulns, now=None):
    """Severity buckets, 30-day recency count and mean CVSS for raw NVD items."""
    now    = now or datetime.now(timezone.utc)
    cutoff = now - RECENT_WINDOW

    by_severity = dict.fromkeys(SEVERITY_BUCKETS, 0)
    total_score = 0.0
    recent      = 0

    for vuln in vulns:
        cve  = _obj(_obj(vuln).get("cve"))
        cvss = _cvss_v31(cve)

        severity = str(cvss.get("baseSeverity") or "UNKNOWN").upper()
        if severity not in by_severity:
            severity = "UNKNOWN"
        by_severity[severity] += 1
        total_score += _score(cvss.get("baseScore"))

        published = _parse_timestamp(cve.get("published"))
        if published is not None and published >= cutoff:
            recent += 1

    total = len(vulns)
    return {
        "total":        total,
        "bySeverity":   by_severity,
        "recent30Days": recent,
        "avgCVSS":      total_score / total if total else 0.0,
        "timestamp":    now.isoformat(),
        "source":       "NVD",
    }


def fetch_cve_statistics(session, settings, now=None):
    payload = _get_json(
        session, "NVD Stats", NVD_API_URL, settings.stats_timeout,
        params={"resultsPerPage": STATS_SAMPLE_SIZE},
    )
    vulns = _items(payload, "vulnerabilities", "NVD Stats")
    stats = compute_cve_statistics(vulns, now=now)
    log.info(f"NVD Stats: {stats['total']} CVEs sampled, {stats['recent30Days']} in the last 30 days")
    return stats
