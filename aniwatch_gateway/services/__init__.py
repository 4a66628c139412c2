"""
Services package.

Provides the collaborators the gateway composes: response cache,
rate limiter, scraper boundary and the keep-alive pinger.
"""

from .cache_store import ResponseCache
from .keepalive import HealthPinger
from .rate_limiter import FixedWindowRateLimiter, RateLimitMiddleware
from .scraper import HiAnimeScraper, UnconfiguredScraper

__all__ = [
    "ResponseCache",
    "HealthPinger",
    "FixedWindowRateLimiter",
    "RateLimitMiddleware",
    "HiAnimeScraper",
    "UnconfiguredScraper",
]
