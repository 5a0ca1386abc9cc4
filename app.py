"""
AI Risk Dashboard - External Feeds Backend
============================================
Aggregates public security intelligence for the dashboard:

  1. NIST NVD            - Recent AI-related CVEs
  2. CISA KEV            - Known Exploited Vulnerabilities catalog
  3. GitHub Advisories   - High/critical advisories across ecosystems
  4. CVE Statistics      - Severity mix and trends from an NVD sample
  5. OWASP LLM Top 10    - Static AI/ML risk classification

Every live feed is cached in memory (30 minutes by default). When a feed
can't be reached the dashboard gets synthetic data instead, tagged so the
UI can tell. Frontend never touches source APIs directly.

Requirements:
    pip install -e .

Setup (.env or platform environment variables):
    CACHE_TTL_MIN=30
    ALLOWED_ORIGIN=https://yourusername.github.io
    PORT=5000
"""

import os
import logging
from datetime import datetime, timezone

from flask import Flask, jsonify, request
from flask_cors import CORS
from dotenv import load_dotenv
from apscheduler.schedulers.background import BackgroundScheduler
from werkzeug.exceptions import HTTPException

from riskfeeds import FeedAggregator, FeedCache, FeedService, FeedSettings
from riskfeeds.aggregator import FEED_KEYS

load_dotenv()
logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s [%(levelname)s] %(message)s'
)
log = logging.getLogger(__name__)


def _utcnow():
    return datetime.now(timezone.utc).isoformat()


def build_service(settings):
    """Wire cache -> aggregator -> façade. The cache lives as long as the service."""
    cache = FeedCache(ttl_seconds=settings.cache_ttl_seconds)
    return FeedService(FeedAggregator(cache, settings))


# ─────────────────────────────────────────
# FLASK APP
# ─────────────────────────────────────────
def create_app(settings=None, service=None):
    settings = settings or FeedSettings.from_env()
    service  = service or build_service(settings)
    logging.getLogger().setLevel(settings.log_level)

    app = Flask(__name__)
    app.config["FEED_SETTINGS"] = settings
    app.extensions["feed_service"] = service

    CORS(app, resources={
        r"/api/*": {
            "origins": settings.allowed_origin,
            "methods": ["GET", "POST", "OPTIONS"],
            "allow_headers": ["Content-Type"],
            "send_wildcard": settings.allowed_origin == "*"
        }
    })

    # ─────────────────────────────────────
    # ERRORS
    # ─────────────────────────────────────
    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(Exception)
    def internal_error(e):
        if isinstance(e, HTTPException):
            return e
        log.exception("Feeds API error")
        return jsonify({"error": "Internal server error", "message": str(e)}), 500

    # ─────────────────────────────────────
    # ROUTES
    # ─────────────────────────────────────
    @app.route("/api/health")
    def health():
        return jsonify({
            "status":        "ok",
            "feeds":         service.status(),
            "cache_ttl_min": settings.cache_ttl_min,
            "timestamp":     _utcnow()
        })

    @app.route("/api/feeds", methods=["GET"])
    def feeds():
        """One feed when ?type= names a known source, otherwise all of them."""
        feed_type = (request.args.get("type") or "").strip().lower()
        if feed_type and service.has_source(feed_type):
            return jsonify(service.get_source(feed_type))
        if feed_type:
            log.info(f"Unknown feed type {feed_type!r}, returning all feeds")
        return jsonify(service.get_all())

    @app.route("/api/feeds", methods=["POST"])
    def feeds_action():
        """Admin actions. Only clearCache for now."""
        body   = request.get_json(silent=True)
        action = body.get("action") if isinstance(body, dict) else None
        if action == "clearCache":
            service.clear_cache()
            return jsonify({
                "message":   "Cache cleared successfully",
                "timestamp": _utcnow()
            })
        return jsonify({
            "error":   "Invalid action",
            "message": f"Unsupported action {action!r}; expected 'clearCache'"
        }), 400

    return app


# ─────────────────────────────────────────
# BACKGROUND REFRESH SCHEDULER
# ─────────────────────────────────────────
def warm_cache(service):
    log.info("=== Starting feed refresh ===")
    result = service.get_all()
    summary = ", ".join(f"{name}={result[name]['source']}" for name in FEED_KEYS)
    log.info(f"=== Feed refresh complete ({summary}) ===")
    return result


def start_scheduler(service, settings):
    if settings.refresh_interval_min <= 0:
        log.info("Background refresh disabled (REFRESH_INTERVAL_MIN=0)")
        return None
    scheduler = BackgroundScheduler()
    scheduler.add_job(
        warm_cache, 'interval',
        args=[service],
        minutes=settings.refresh_interval_min,
        id="warm_feeds",
        max_instances=1,
        coalesce=True
    )
    scheduler.start()
    log.info(f"Scheduler started - refreshing every {settings.refresh_interval_min} minutes")
    return scheduler


# ─────────────────────────────────────────
# STARTUP
# ─────────────────────────────────────────
if __name__ == "__main__":
    settings = FeedSettings.from_env()
    service  = build_service(settings)
    app      = create_app(settings, service)

    print("=" * 60)
    print("  AI RISK DASHBOARD - External Feeds Backend")
    print("=" * 60)
    print(f"  CORS Origin   : {settings.allowed_origin}")
    print(f"  Cache TTL     : {settings.cache_ttl_min} minutes")
    print(f"  Feed timeout  : {settings.feed_timeout}s (statistics {settings.stats_timeout}s)")
    print(f"  Retry attempts: {settings.retry_attempts}")
    print(f"  Port          : {settings.port}")
    print("=" * 60)
    print("  Data Sources:")
    print("    NIST NVD   → services.nvd.nist.gov/rest/json/cves/2.0")
    print("    CISA KEV   → cisa.gov/known-exploited-vulnerabilities-catalog")
    print("    GitHub     → api.github.com/advisories")
    print("    OWASP      → owasp.org/www-project-top-10-for-large-language-model-applications")
    print("=" * 60)

    log.info("Loading initial data from all sources...")
    warm_cache(service)
    start_scheduler(service, settings)

    app.run(host="0.0.0.0", port=settings.port, debug=False)
