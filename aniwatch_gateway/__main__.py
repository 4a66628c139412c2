"""
Process entry point.

Binds the configured port with uvicorn unless the platform owns listening.
"""

import logging

import uvicorn

from .config import config
from .main import app

logger = logging.getLogger("gateway.main")


def main() -> None:
    if config.ANIWATCH_API_VERCEL_DEPLOYMENT:
        logger.info("Managed platform deployment: listening is handled by the platform")
        return

    logger.info(
        "\x1b[1;36m" + f"aniwatch-api at http://localhost:{config.ANIWATCH_API_PORT}" + "\x1b[0m"
    )
    uvicorn.run(app, host="0.0.0.0", port=config.ANIWATCH_API_PORT, log_config=None)


if __name__ == "__main__":
    main()
