"""
Core logic package.

Provides error normalization, cache directive derivation and logging setup.
"""

from .cache_directive import derive_cache_directive, parse_cache_duration
from .exceptions import GatewayError, HiAnimeError, register_exception_handlers

__all__ = [
    "derive_cache_directive",
    "parse_cache_duration",
    "GatewayError",
    "HiAnimeError",
    "register_exception_handlers",
]
