"""
HiAnime routes.

Every route delegates to the scraper through the response cache and wraps
the payload as {"status": 200, "data": ...}. Scraper failures are raised as
HiAnimeError and rendered by the error handlers.
"""

from typing import Awaitable, Callable, Dict, Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import PlainTextResponse

from ..core.exceptions import HiAnimeError
from ..models.context import CacheDirective
from ..models.result import ScrapeResult
from ..services.cache_store import ResponseCache
from .deps import CacheDirectiveDep, ResponseCacheDep, ScraperDep

router = APIRouter(prefix="/hianime", tags=["hianime"])

SEARCH_RESERVED_PARAMS = {"q", "page"}


def parse_page(value: Optional[str]) -> int:
    """Page numbers default to 1; anything non-numeric or below 1 becomes 1."""
    try:
        page = int(value) if value is not None else 1
    except ValueError:
        return 1
    return max(page, 1)


def require(value: Optional[str], message: str) -> str:
    candidate = (value or "").strip()
    if not candidate:
        raise HiAnimeError(400, message)
    return candidate


async def respond(
    cache: ResponseCache,
    directive: Optional[CacheDirective],
    getter: Callable[[], Awaitable[ScrapeResult]],
) -> Dict:
    result = await cache.get_or_set(getter, directive)
    if not result.ok:
        raise HiAnimeError.from_envelope(result.error)
    return {"status": 200, "data": result.data}


@router.get("", response_class=PlainTextResponse, include_in_schema=False)
@router.get("/", response_class=PlainTextResponse)
async def hianime_index():
    return "Welcome to HiAnime routes"


@router.get("/home")
async def home_page(scraper: ScraperDep, cache: ResponseCacheDep, directive: CacheDirectiveDep):
    return await respond(cache, directive, scraper.get_home_page)


@router.get("/azlist/{sort_option}")
async def az_list(
    sort_option: str,
    scraper: ScraperDep,
    cache: ResponseCacheDep,
    directive: CacheDirectiveDep,
    page: Optional[str] = None,
):
    sort_option = sort_option.strip().lower()
    return await respond(
        cache, directive, lambda: scraper.get_az_list(sort_option, parse_page(page))
    )


@router.get("/qtip/{anime_id}")
async def qtip_info(
    anime_id: str, scraper: ScraperDep, cache: ResponseCacheDep, directive: CacheDirectiveDep
):
    anime_id = anime_id.strip()
    return await respond(cache, directive, lambda: scraper.get_qtip_info(anime_id))


@router.get("/category/{name}")
async def category_anime(
    name: str,
    scraper: ScraperDep,
    cache: ResponseCacheDep,
    directive: CacheDirectiveDep,
    page: Optional[str] = None,
):
    name = name.strip()
    return await respond(
        cache, directive, lambda: scraper.get_category_anime(name, parse_page(page))
    )


@router.get("/genre/{name}")
async def genre_anime(
    name: str,
    scraper: ScraperDep,
    cache: ResponseCacheDep,
    directive: CacheDirectiveDep,
    page: Optional[str] = None,
):
    name = name.strip().lower()
    return await respond(
        cache, directive, lambda: scraper.get_genre_anime(name, parse_page(page))
    )


@router.get("/producer/{name}")
async def producer_animes(
    name: str,
    scraper: ScraperDep,
    cache: ResponseCacheDep,
    directive: CacheDirectiveDep,
    page: Optional[str] = None,
):
    name = name.strip()
    return await respond(
        cache, directive, lambda: scraper.get_producer_animes(name, parse_page(page))
    )


@router.get("/schedule")
async def estimated_schedule(
    scraper: ScraperDep,
    cache: ResponseCacheDep,
    directive: CacheDirectiveDep,
    date: Optional[str] = None,
):
    date = require(date, "Schedule date is required (yyyy-mm-dd)")
    return await respond(cache, directive, lambda: scraper.get_estimated_schedule(date))


@router.get("/search")
async def search(
    request: Request,
    scraper: ScraperDep,
    cache: ResponseCacheDep,
    directive: CacheDirectiveDep,
    q: Optional[str] = None,
    page: Optional[str] = None,
):
    query = require(q, "Search keyword is required")
    filters = {
        key: value
        for key, value in request.query_params.items()
        if key not in SEARCH_RESERVED_PARAMS and value
    }
    return await respond(
        cache, directive, lambda: scraper.search(query, parse_page(page), filters)
    )


@router.get("/search/suggestion")
async def search_suggestions(
    scraper: ScraperDep,
    cache: ResponseCacheDep,
    directive: CacheDirectiveDep,
    q: Optional[str] = None,
):
    query = require(q, "Search keyword is required")
    return await respond(cache, directive, lambda: scraper.search_suggestions(query))


@router.get("/anime/{anime_id}")
async def anime_info(
    anime_id: str, scraper: ScraperDep, cache: ResponseCacheDep, directive: CacheDirectiveDep
):
    anime_id = anime_id.strip()
    return await respond(cache, directive, lambda: scraper.get_info(anime_id))


@router.get("/anime/{anime_id}/episodes")
async def anime_episodes(
    anime_id: str, scraper: ScraperDep, cache: ResponseCacheDep, directive: CacheDirectiveDep
):
    anime_id = anime_id.strip()
    return await respond(cache, directive, lambda: scraper.get_episodes(anime_id))


@router.get("/anime/{anime_id}/next-episode-schedule")
async def next_episode_schedule(
    anime_id: str, scraper: ScraperDep, cache: ResponseCacheDep, directive: CacheDirectiveDep
):
    anime_id = anime_id.strip()
    return await respond(cache, directive, lambda: scraper.get_next_episode_schedule(anime_id))


@router.get("/episode/servers")
async def episode_servers(
    scraper: ScraperDep,
    cache: ResponseCacheDep,
    directive: CacheDirectiveDep,
    anime_episode_id: Optional[str] = Query(None, alias="animeEpisodeId"),
):
    episode_id = require(anime_episode_id, "Anime episode id is required")
    return await respond(cache, directive, lambda: scraper.get_episode_servers(episode_id))


@router.get("/episode/sources")
async def episode_sources(
    scraper: ScraperDep,
    cache: ResponseCacheDep,
    directive: CacheDirectiveDep,
    anime_episode_id: Optional[str] = Query(None, alias="animeEpisodeId"),
    server: str = "hd-1",
    category: str = "sub",
):
    episode_id = require(anime_episode_id, "Anime episode id is required")
    category = category.strip().lower()
    if category not in ("sub", "dub", "raw"):
        raise HiAnimeError(400, f"Invalid category: {category}")
    server = server.strip().lower() or "hd-1"
    return await respond(
        cache, directive, lambda: scraper.get_episode_sources(episode_id, server, category)
    )
