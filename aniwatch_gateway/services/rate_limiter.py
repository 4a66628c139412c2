"""
Rate limiting for public deployments.

The limiter owns all counter state. The gateway only decides whether the
middleware is part of the pipeline at all (see middleware.build_middleware).
"""

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Protocol

from cachetools import TTLCache
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from ..core.exceptions import envelope_response
from ..models.envelope import ErrorEnvelope

logger = logging.getLogger("gateway.ratelimit")

RATE_LIMITED = ErrorEnvelope(status=429, message="Too Many Requests")

DEFAULT_MAX_TRACKED_CLIENTS = 10_000


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    reset_in_seconds: int


class RateLimiter(Protocol):
    def hit(self, identity: str) -> RateLimitResult: ...


class FixedWindowRateLimiter:
    """
    Fixed window counter per caller identity.

    Counters live in a bounded cachetools TTLCache, so expired windows are
    dropped by the cache itself and the number of tracked callers never
    exceeds ``max_clients`` (least recently used callers go first).
    Designed for a single event loop; no locking is required.
    """

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        max_clients: int = DEFAULT_MAX_TRACKED_CLIENTS,
    ):
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        # identity -> (window start, count)
        self._windows = TTLCache(maxsize=max_clients, ttl=window_seconds, timer=clock)

    def __len__(self) -> int:
        return len(self._windows)

    def hit(self, identity: str) -> RateLimitResult:
        now = self._clock()
        started, count = self._windows.get(identity, (now, 0))
        if now - started >= self.window_seconds:
            started, count = now, 0

        allowed = count < self.limit
        if allowed:
            count += 1
        self._windows[identity] = (started, count)

        reset_in = max(0, math.ceil(started + self.window_seconds - now))
        return RateLimitResult(
            allowed=allowed,
            limit=self.limit,
            remaining=max(0, self.limit - count),
            reset_in_seconds=reset_in,
        )


def get_client_ip(request: Request, trust_proxy: bool = False) -> str:
    """
    Identify the caller.

    The socket peer is used unless ``trust_proxy`` is set, in which case the
    first ``X-Forwarded-For`` entry (then ``X-Real-IP``) written by the
    fronting proxy takes precedence.
    """
    if trust_proxy:
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip.strip()
    if request.client:
        return request.client.host
    return "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Admit or reject requests using the configured limiter."""

    def __init__(
        self,
        app,
        limiter: RateLimiter,
        trust_proxy: bool = False,
        exempt_paths: Iterable[str] = ("/health",),
    ):
        super().__init__(app)
        self.limiter = limiter
        self.trust_proxy = trust_proxy
        self.exempt_paths = frozenset(exempt_paths)

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.exempt_paths:
            return await call_next(request)

        identity = get_client_ip(request, self.trust_proxy)
        result = self.limiter.hit(identity)
        headers = {
            "X-RateLimit-Limit": str(result.limit),
            "X-RateLimit-Remaining": str(result.remaining),
            "X-RateLimit-Reset": str(result.reset_in_seconds),
        }

        if not result.allowed:
            logger.warning(
                "Rate limit exceeded",
                extra={"client_ip": identity, "path": request.url.path},
            )
            headers["Retry-After"] = str(result.reset_in_seconds)
            return envelope_response(RATE_LIMITED, headers=headers)

        response = await call_next(request)
        response.headers.update(headers)
        return response
