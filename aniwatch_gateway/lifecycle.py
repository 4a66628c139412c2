"""
Where: aniwatch_gateway/lifecycle.py
What: Gateway startup/shutdown orchestration for background resources.
Why: Keep main.py focused on app assembly while preserving lifecycle behavior.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from .config import DeploymentMode, GatewayConfig
from .core.http_client import HttpClientFactory
from .services.keepalive import HealthPinger

logger = logging.getLogger("gateway.main")


@asynccontextmanager
async def manage_lifespan(
    app: FastAPI, gateway_config: GatewayConfig, deployment: DeploymentMode
) -> AsyncIterator[None]:
    """Manage application lifecycle."""
    client = None
    pinger: Optional[HealthPinger] = None

    try:
        if deployment.runs_keepalive:
            client = HttpClientFactory(gateway_config).create_async_client()
            pinger = HealthPinger(
                deployment.health_check_url,
                client,
                interval=gateway_config.HEALTH_CHECK_INTERVAL,
            )
            await pinger.start()
        else:
            logger.info(
                "Health pinger disabled",
                extra={
                    "public_deployment": deployment.is_public_deployment,
                    "serverless": deployment.serverless,
                },
            )

        app.state.health_pinger = pinger
        yield
    finally:
        if pinger:
            await pinger.stop()

        if client:
            logger.info("Gateway shutting down, closing http client.")
            await client.aclose()
