"""
Scrape result models.

Standardizes the output of the scraper boundary as a tagged result.
"""

from typing import Any, Optional

from pydantic import BaseModel

from .envelope import ErrorEnvelope


class ScrapeResult(BaseModel):
    """
    Either a payload (ok=True) or an error envelope (ok=False).

    Used to decouple the routers from the scraper's own exception types.
    """

    ok: bool
    data: Any = None
    error: Optional[ErrorEnvelope] = None

    @classmethod
    def success(cls, data: Any) -> "ScrapeResult":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, status: int, message: str) -> "ScrapeResult":
        return cls(ok=False, error=ErrorEnvelope(status=status, message=message))
