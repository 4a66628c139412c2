"""
Gateway configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults.
"""

import sys
from dataclasses import dataclass

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_PATH = "/api/v2"


class GatewayConfig(BaseSettings):
    """
    Configuration management for the aniwatch gateway.
    """

    LOG_LEVEL: str = Field(default="INFO", description="Log level")
    LOG_CONFIG_PATH: str = Field(default="", description="Logging YAML config path")

    # Server settings
    ANIWATCH_API_PORT: int = Field(default=4000, description="Listening port")
    ANIWATCH_API_HOSTNAME: str = Field(
        default="", description="Externally reachable hostname (enables public mode)"
    )
    ANIWATCH_API_VERCEL_DEPLOYMENT: bool = Field(
        default=False, description="Platform owns process lifecycle and listening"
    )
    ANIWATCH_API_STATIC_ROOT: str = Field(default="public", description="Static asset root")

    # Rate limiting (public deployments only)
    ANIWATCH_API_WINDOW_MS: int = Field(
        default=30 * 60 * 1000, description="Rate limit window (milliseconds)"
    )
    ANIWATCH_API_MAX_REQS: int = Field(default=6, description="Requests allowed per window")
    ANIWATCH_API_TRUST_PROXY: bool = Field(
        default=False, description="Identify callers by X-Forwarded-For from a fronting proxy"
    )

    # Response cache
    ANIWATCH_API_CACHE_MAX_ENTRIES: int = Field(
        default=1024, description="Maximum cached responses"
    )

    # Keep-alive
    HEALTH_CHECK_INTERVAL: float = Field(
        default=9 * 60, description="Self health check period (seconds)"
    )
    HEALTH_CHECK_TIMEOUT: float = Field(default=10.0, description="Health check timeout")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )


@dataclass(frozen=True)
class DeploymentMode:
    """Operating mode derived once at startup."""

    is_public_deployment: bool
    hostname: str
    serverless: bool

    @property
    def health_check_url(self) -> str:
        return f"https://{self.hostname}/health"

    @property
    def runs_keepalive(self) -> bool:
        return self.is_public_deployment and not self.serverless


def resolve_deployment_mode(gateway_config: GatewayConfig) -> DeploymentMode:
    hostname = (gateway_config.ANIWATCH_API_HOSTNAME or "").strip()
    return DeploymentMode(
        is_public_deployment=bool(hostname),
        hostname=hostname,
        serverless=gateway_config.ANIWATCH_API_VERCEL_DEPLOYMENT,
    )


# Load config as a singleton.
# pydantic-settings reads environment variables during instantiation.
try:
    config = GatewayConfig()
except Exception as e:
    sys.stderr.write(f"Failed to load configuration: {e}\n")
    raise
