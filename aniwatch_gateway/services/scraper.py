"""
HiAnime scraper boundary.

The scraping library is an external collaborator. Routers only see this
protocol, and every call returns a tagged ScrapeResult.
"""

import logging
from typing import Dict, Optional, Protocol

from ..models.result import ScrapeResult

logger = logging.getLogger("gateway.scraper")


class HiAnimeScraper(Protocol):
    async def get_home_page(self) -> ScrapeResult: ...

    async def get_az_list(self, sort_option: str, page: int) -> ScrapeResult: ...

    async def get_qtip_info(self, anime_id: str) -> ScrapeResult: ...

    async def get_category_anime(self, category: str, page: int) -> ScrapeResult: ...

    async def get_genre_anime(self, genre: str, page: int) -> ScrapeResult: ...

    async def get_producer_animes(self, producer: str, page: int) -> ScrapeResult: ...

    async def get_estimated_schedule(self, date: str) -> ScrapeResult: ...

    async def search(self, query: str, page: int, filters: Dict[str, str]) -> ScrapeResult: ...

    async def search_suggestions(self, query: str) -> ScrapeResult: ...

    async def get_info(self, anime_id: str) -> ScrapeResult: ...

    async def get_episodes(self, anime_id: str) -> ScrapeResult: ...

    async def get_next_episode_schedule(self, anime_id: str) -> ScrapeResult: ...

    async def get_episode_servers(self, episode_id: str) -> ScrapeResult: ...

    async def get_episode_sources(
        self, episode_id: str, server: str, category: str
    ) -> ScrapeResult: ...


class UnconfiguredScraper:
    """
    Stand-in used when no scraper backend was wired into the app.

    Every call fails with 503 so the routes stay reachable and report it.
    """

    status = 503
    message = "Scraper backend is not configured"

    def __getattr__(self, name: str):
        if name.startswith("_"):
            raise AttributeError(name)

        async def _unavailable(*args, **kwargs) -> ScrapeResult:
            logger.warning(f"Scraper call '{name}' rejected: no backend configured")
            return ScrapeResult.failure(self.status, self.message)

        return _unavailable


def resolve_scraper(scraper: Optional[HiAnimeScraper]) -> HiAnimeScraper:
    if scraper is None:
        logger.warning("No HiAnime scraper configured; /hianime routes will return 503")
        return UnconfiguredScraper()
    return scraper
