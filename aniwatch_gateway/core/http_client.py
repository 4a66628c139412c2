import logging

import httpx

from ..config import GatewayConfig

logger = logging.getLogger(__name__)


class HttpClientFactory:
    """
    HTTP Client Factory for outbound calls made by the gateway itself.
    """

    def __init__(self, config: GatewayConfig):
        self.config = config

    def create_async_client(self, **kwargs) -> httpx.AsyncClient:
        """
        Create an httpx.AsyncClient for the keep-alive pinger.

        Args:
            **kwargs: Additional arguments for httpx.AsyncClient
        """
        kwargs.setdefault("timeout", self.config.HEALTH_CHECK_TIMEOUT)
        if "limits" not in kwargs:
            kwargs["limits"] = httpx.Limits(max_keepalive_connections=1, max_connections=2)
        kwargs.setdefault("follow_redirects", True)
        logger.debug("Creating outbound http client (timeout=%s)", kwargs["timeout"])
        return httpx.AsyncClient(**kwargs)
