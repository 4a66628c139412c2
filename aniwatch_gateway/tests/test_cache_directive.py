"""
Where: aniwatch_gateway/tests/test_cache_directive.py
What: Cache key/TTL derivation and the middleware that attaches it.
Why: Cache keys must stay stable and bad TTL headers must never leak through.
"""

from unittest.mock import MagicMock

import pytest
from fastapi import Request, Response

from aniwatch_gateway.core.cache_directive import derive_cache_directive, parse_cache_duration
from aniwatch_gateway.middleware import cache_directive_middleware
from aniwatch_gateway.models.context import (
    CACHE_EXPIRY_HEADER_NAME,
    DEFAULT_CACHE_EXPIRY_SECONDS,
    CacheDirective,
)


@pytest.mark.parametrize(
    "path,query,expected",
    [
        ("/api/v2/hianime/home", "", "/hianime/home"),
        ("/api/v2/hianime/search", "q=titan&page=2", "/hianime/search?q=titan&page=2"),
        ("/api/v2/anicrush", "", "/anicrush"),
        ("/api/v2", "", ""),
    ],
)
def test_key_strips_base_path_and_keeps_query(path, query, expected):
    assert derive_cache_directive(path, query).key == expected


@pytest.mark.parametrize("value", ["0", "1", "60", "3600", " 120 "])
def test_duration_uses_valid_header(value):
    assert parse_cache_duration(value) == int(value.strip())


@pytest.mark.parametrize("value", [None, "", "   ", "-5", "abc", "1.5", "NaN", "1e3", "²"])
def test_duration_falls_back_to_default(value):
    assert parse_cache_duration(value) == DEFAULT_CACHE_EXPIRY_SECONDS


def test_directive_combines_key_and_duration():
    directive = derive_cache_directive("/api/v2/hianime/anime/one-piece-100", "", "300")

    assert directive == CacheDirective(key="/hianime/anime/one-piece-100", duration=300)


def _mock_request(path: str, query: str = "", headers=None):
    request = MagicMock(spec=Request)
    request.url.path = path
    request.url.query = query
    request.headers = headers or {}
    request.state = MagicMock(spec=[])
    return request


@pytest.mark.asyncio
async def test_middleware_attaches_directive():
    request = _mock_request(
        "/api/v2/hianime/search", "q=naruto", {CACHE_EXPIRY_HEADER_NAME: "15"}
    )

    async def call_next(req):
        req.state.captured = req.state.cache_config
        return Response(status_code=200)

    response = await cache_directive_middleware(request, call_next)

    assert response.status_code == 200
    assert request.state.captured == CacheDirective(key="/hianime/search?q=naruto", duration=15)


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/health", "/", "/index.html"])
async def test_middleware_skips_health_and_static(path):
    request = _mock_request(path)
    call_next = MagicMock()

    async def _next(req):
        call_next(req)
        return Response(status_code=200)

    await cache_directive_middleware(request, _next)

    call_next.assert_called_once_with(request)
    assert not hasattr(request.state, "cache_config")


def test_request_populates_cache_under_derived_key(client, personal_app, scraper):
    first = client.get("/api/v2/hianime/home?lang=en")
    second = client.get("/api/v2/hianime/home?lang=en")

    assert first.status_code == second.status_code == 200
    assert second.json() == first.json()
    scraper.get_home_page.assert_awaited_once()
    assert personal_app.state.response_cache.get("/hianime/home?lang=en") == {
        "method": "get_home_page"
    }


def test_key_ignores_unrelated_headers(client, personal_app):
    client.get("/api/v2/hianime/qtip/abc", headers={"X-Custom": "1", "Accept": "text/html"})

    assert personal_app.state.response_cache.get("/hianime/qtip/abc") is not None


def test_zero_duration_header_bypasses_storage(client, personal_app, scraper):
    client.get("/api/v2/hianime/home", headers={CACHE_EXPIRY_HEADER_NAME: "0"})
    client.get("/api/v2/hianime/home", headers={CACHE_EXPIRY_HEADER_NAME: "0"})

    assert scraper.get_home_page.await_count == 2
    assert len(personal_app.state.response_cache) == 0
