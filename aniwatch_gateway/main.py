"""
Aniwatch Gateway - HTTP front for the HiAnime scraper

Adds response cache directives, rate limiting for public deployments,
normalized JSON errors and a keep-alive self health check.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles

from .api import anicrush_router, hianime_router
from .config import BASE_PATH, GatewayConfig, config, resolve_deployment_mode
from .core.exceptions import register_exception_handlers
from .core.logging_config import setup_logging
from .lifecycle import manage_lifespan
from .middleware import build_middleware, default_rate_limiter_factory
from .services.cache_store import ResponseCache
from .services.rate_limiter import RateLimiter
from .services.scraper import HiAnimeScraper, resolve_scraper

logger = logging.getLogger("gateway.main")


async def health_check():
    """Liveness endpoint."""
    return PlainTextResponse("OK", status_code=200)


def create_app(
    gateway_config: GatewayConfig = config,
    *,
    scraper: Optional[HiAnimeScraper] = None,
    rate_limiter_factory: Callable[[GatewayConfig], RateLimiter] = default_rate_limiter_factory,
) -> FastAPI:
    """
    Assemble the gateway.

    Args:
        gateway_config: settings to build from
        scraper: HiAnime scraper backend; routes answer 503 without one
        rate_limiter_factory: builds the limiter for public deployments

    Returns:
        FastAPI application
    """
    deployment = resolve_deployment_mode(gateway_config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with manage_lifespan(app, gateway_config, deployment):
            yield

    app = FastAPI(
        title="aniwatch-api",
        version="2.0.0",
        lifespan=lifespan,
        middleware=build_middleware(deployment, gateway_config, rate_limiter_factory),
    )
    register_exception_handlers(app)

    app.state.config = gateway_config
    app.state.deployment = deployment
    app.state.scraper = resolve_scraper(scraper)
    app.state.response_cache = ResponseCache(max_size=gateway_config.ANIWATCH_API_CACHE_MAX_ENTRIES)

    app.add_api_route("/health", health_check, methods=["GET"], include_in_schema=False)
    app.include_router(hianime_router, prefix=BASE_PATH)
    app.include_router(anicrush_router, prefix=BASE_PATH)

    # Catch-all mount, so it has to be registered last.
    static_root = gateway_config.ANIWATCH_API_STATIC_ROOT
    if os.path.isdir(static_root):
        app.mount("/", StaticFiles(directory=static_root, html=True), name="static")
    else:
        logger.warning(f"Static root '{static_root}' not found; static assets disabled")

    return app


setup_logging(config.LOG_CONFIG_PATH, config.LOG_LEVEL)
app = create_app()
