"""
Dependency Injection for Gateway API.

Manage request handler dependencies using FastAPI Depends.
"""

from typing import Annotated, Optional

from fastapi import Depends, Request

from ..models.context import CacheDirective
from ..services.cache_store import ResponseCache
from ..services.scraper import HiAnimeScraper


def get_scraper(request: Request) -> HiAnimeScraper:
    return request.app.state.scraper


def get_response_cache(request: Request) -> ResponseCache:
    return request.app.state.response_cache


def get_cache_directive(request: Request) -> Optional[CacheDirective]:
    return getattr(request.state, "cache_config", None)


ScraperDep = Annotated[HiAnimeScraper, Depends(get_scraper)]
ResponseCacheDep = Annotated[ResponseCache, Depends(get_response_cache)]
CacheDirectiveDep = Annotated[Optional[CacheDirective], Depends(get_cache_directive)]
