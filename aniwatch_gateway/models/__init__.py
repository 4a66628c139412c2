"""
Data model definitions package.

Aggregates Pydantic models for use in other modules.
"""

from .context import CACHE_EXPIRY_HEADER_NAME, DEFAULT_CACHE_EXPIRY_SECONDS, CacheDirective
from .envelope import NOT_FOUND, ErrorEnvelope
from .result import ScrapeResult

__all__ = [
    "CACHE_EXPIRY_HEADER_NAME",
    "DEFAULT_CACHE_EXPIRY_SECONDS",
    "CacheDirective",
    "ErrorEnvelope",
    "NOT_FOUND",
    "ScrapeResult",
]
