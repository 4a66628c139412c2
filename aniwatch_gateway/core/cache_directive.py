"""
Cache directive derivation.

Computes the cache key and TTL for a request from its URL and the
cache-expiry override header.
"""

from typing import Optional

from ..config import BASE_PATH
from ..models.context import DEFAULT_CACHE_EXPIRY_SECONDS, CacheDirective


def parse_cache_duration(value: Optional[str], default: int = DEFAULT_CACHE_EXPIRY_SECONDS) -> int:
    """
    Parse the override header as a non-negative integer count of seconds.

    Absent, empty, negative or non-integer values fall back to ``default``.
    """
    if value is None:
        return default
    candidate = value.strip()
    # str.isdigit() accepts unicode digits like "²" that int() rejects
    if not candidate.isascii() or not candidate.isdigit():
        return default
    return int(candidate)


def derive_cache_directive(
    path: str,
    query_string: str = "",
    expiry_header: Optional[str] = None,
    base_path: str = BASE_PATH,
) -> CacheDirective:
    """
    Build the cache directive for a request.

    Args:
        path: URL path of the request
        query_string: raw query string without the leading "?"
        expiry_header: value of the cache-expiry header, if any
        base_path: prefix removed from the path

    Returns:
        CacheDirective
    """
    search = f"?{query_string}" if query_string else ""
    return CacheDirective(
        key=path[len(base_path):] + search,
        duration=parse_cache_duration(expiry_header),
    )
