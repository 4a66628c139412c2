import os
from unittest.mock import AsyncMock

import pytest

# Config is initialized at import time, so keep the environment neutral before any import.
for _name in (
    "ANIWATCH_API_HOSTNAME",
    "ANIWATCH_API_VERCEL_DEPLOYMENT",
    "ANIWATCH_API_PORT",
):
    os.environ.pop(_name, None)

from fastapi.testclient import TestClient  # noqa: E402

from aniwatch_gateway.config import GatewayConfig  # noqa: E402
from aniwatch_gateway.main import create_app  # noqa: E402
from aniwatch_gateway.models.result import ScrapeResult  # noqa: E402

SCRAPER_METHODS = (
    "get_home_page",
    "get_az_list",
    "get_qtip_info",
    "get_category_anime",
    "get_genre_anime",
    "get_producer_animes",
    "get_estimated_schedule",
    "search",
    "search_suggestions",
    "get_info",
    "get_episodes",
    "get_next_episode_schedule",
    "get_episode_servers",
    "get_episode_sources",
)


@pytest.fixture
def static_root(tmp_path):
    root = tmp_path / "public"
    root.mkdir()
    (root / "index.html").write_text("<h1>aniwatch-api</h1>", encoding="utf-8")
    (root / "robots.txt").write_text("User-agent: *", encoding="utf-8")
    return root


@pytest.fixture
def make_config(static_root):
    """Build a GatewayConfig without reading .env files."""

    def _make(**overrides) -> GatewayConfig:
        overrides.setdefault("ANIWATCH_API_STATIC_ROOT", str(static_root))
        return GatewayConfig(_env_file=None, **overrides)

    return _make


@pytest.fixture
def scraper():
    """Scraper double whose methods answer with their own name."""
    mock = AsyncMock()
    for name in SCRAPER_METHODS:
        getattr(mock, name).return_value = ScrapeResult.success({"method": name})
    return mock


@pytest.fixture
def personal_app(make_config, scraper):
    return create_app(make_config(), scraper=scraper)


@pytest.fixture
def client(personal_app):
    return TestClient(personal_app, raise_server_exceptions=False)
