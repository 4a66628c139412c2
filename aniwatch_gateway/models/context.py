"""
Request context models.

Per-request cache directive attached before route dispatch.
"""

from pydantic import BaseModel, ConfigDict, Field

CACHE_EXPIRY_HEADER_NAME = "Aniwatch-Cache-Expiry"
DEFAULT_CACHE_EXPIRY_SECONDS = 60


class CacheDirective(BaseModel):
    """
    Cache key and TTL for a single request.

    The key excludes the base path so cached entries survive a version
    prefix rename.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    duration: int = Field(default=DEFAULT_CACHE_EXPIRY_SECONDS, ge=0)
