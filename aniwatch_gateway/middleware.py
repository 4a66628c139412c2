"""
Where: aniwatch_gateway/middleware.py
What: Gateway HTTP middleware and the startup-time middleware chain.
Why: Isolate cross-cutting request concerns from app assembly.
"""

import logging
import time
from typing import Callable, List

from fastapi import Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware

from .config import BASE_PATH, DeploymentMode, GatewayConfig
from .core.cache_directive import derive_cache_directive
from .core.exceptions import global_exception_handler
from .core.request_context import clear_request_id, generate_request_id
from .models.context import CACHE_EXPIRY_HEADER_NAME
from .services.rate_limiter import FixedWindowRateLimiter, RateLimiter, RateLimitMiddleware

logger = logging.getLogger("gateway.access")

CORS_POLICY = {
    "allow_origins": ["*"],
    "allow_methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    "allow_headers": ["Content-Type", "Authorization", "x-api-key"],
    "max_age": 600,
}

CACHE_EXEMPT_PATHS = frozenset({"/health"})


async def access_log_middleware(request: Request, call_next):
    """Middleware for Request ID generation and structured access logging."""
    start_time = time.perf_counter()
    req_id = generate_request_id()

    try:
        try:
            response = await call_next(request)
        except Exception as exc:
            # 500s still pass through CORS and the access log.
            response = await global_exception_handler(request, exc)
        response.headers["X-Request-Id"] = req_id

        process_time_ms = round((time.perf_counter() - start_time) * 1000, 2)

        logger.info(
            f"{request.method} {request.url.path} {response.status_code}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "query_params": str(request.query_params),
                "status": response.status_code,
                "latency_ms": process_time_ms,
                "user_agent": request.headers.get("user-agent"),
                "client_ip": request.client.host if request.client else None,
            },
        )

        return response
    finally:
        clear_request_id()


async def cache_directive_middleware(request: Request, call_next):
    """Attach the CacheDirective for API requests to request.state."""
    path = request.url.path
    if path not in CACHE_EXEMPT_PATHS and path.startswith(BASE_PATH):
        request.state.cache_config = derive_cache_directive(
            path,
            request.url.query,
            request.headers.get(CACHE_EXPIRY_HEADER_NAME),
        )
    return await call_next(request)


def default_rate_limiter_factory(gateway_config: GatewayConfig) -> RateLimiter:
    return FixedWindowRateLimiter(
        limit=gateway_config.ANIWATCH_API_MAX_REQS,
        window_seconds=gateway_config.ANIWATCH_API_WINDOW_MS / 1000,
    )


def build_middleware(
    deployment: DeploymentMode,
    gateway_config: GatewayConfig,
    rate_limiter_factory: Callable[[GatewayConfig], RateLimiter] = default_rate_limiter_factory,
) -> List[Middleware]:
    """
    Build the middleware chain, outermost first.

    The rate limiter is only constructed and included for public deployments.
    """
    chain = [
        Middleware(CORSMiddleware, **CORS_POLICY),
        Middleware(BaseHTTPMiddleware, dispatch=access_log_middleware),
    ]
    if deployment.is_public_deployment:
        chain.append(
            Middleware(
                RateLimitMiddleware,
                limiter=rate_limiter_factory(gateway_config),
                trust_proxy=gateway_config.ANIWATCH_API_TRUST_PROXY,
            )
        )
        logger.info("Rate limiting enabled for public deployment")
    chain.append(Middleware(BaseHTTPMiddleware, dispatch=cache_directive_middleware))
    return chain
