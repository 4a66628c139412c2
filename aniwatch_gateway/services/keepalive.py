"""
HealthPinger - Periodic self health check

Pings the service's own public /health endpoint so hosts that idle
inactive processes keep this one warm.
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

import httpx

logger = logging.getLogger("gateway.keepalive")

DEFAULT_INTERVAL_SECONDS = 9 * 60


class HealthPinger:
    """
    Periodic GET to the public health endpoint.

    Failures are logged and never stop the loop.
    """

    def __init__(
        self,
        url: str,
        client: httpx.AsyncClient,
        interval: float = DEFAULT_INTERVAL_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.url = url
        self.client = client
        self.interval = interval
        self._sleep = sleep
        self._clock = clock
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the ping loop. Calling start on a running pinger does nothing."""
        if self.is_running:
            logger.debug("Health pinger already running")
            return
        self._task = asyncio.create_task(self._loop())
        logger.info(f"Health pinger started (interval: {self.interval}s, url: {self.url})")

    async def stop(self) -> None:
        """Stop the ping loop."""
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        logger.info("Health pinger stopped")

    async def _loop(self) -> None:
        """
        Periodic execution loop.

        Firings are scheduled from a fixed start, so a slow ping shortens the
        following sleep instead of shifting every later firing.
        """
        next_run = self._clock() + self.interval
        while True:
            try:
                await self._sleep(max(0.0, next_run - self._clock()))
                next_run = max(next_run + self.interval, self._clock())
                await self.ping()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Health check loop iteration failed: {e}")

    async def ping(self) -> bool:
        """
        Send one health check request.

        Returns:
            True when the endpoint answered with a 2xx status
        """
        logger.info(
            f"aniwatch-api HEALTH_CHECK at {datetime.now(timezone.utc).isoformat()}",
            extra={"url": self.url},
        )
        try:
            response = await self.client.get(self.url)
        except httpx.HTTPError as e:
            logger.error(f"Health check request failed: {e}", extra={"url": self.url})
            return False

        if not response.is_success:
            logger.warning(
                f"Health check returned {response.status_code}",
                extra={"url": self.url, "status": response.status_code},
            )
            return False
        return True
