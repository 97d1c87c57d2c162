"""Search service connection settings."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, SecretStr
from pydantic import ValidationError as PydanticValidationError

from ftxindex.config.defaults import (
    API_KEY_ENV_VAR,
    DEFAULT_DISCOVERY_LIMIT,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
)
from ftxindex.lib.errors import ConfigError

logger = logging.getLogger(__name__)


class ServiceConfig(BaseModel):
    """Connection settings for the search service.

    The API key is only ever read from the environment so it never shows up
    in shell history or process listings.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    host: str = Field(DEFAULT_HOST, min_length=1, description="Service host")
    port: int = Field(DEFAULT_PORT, ge=1, le=65535, description="Service port")
    api_key: SecretStr = Field(..., description="Bearer token for the service")
    scheme: str = Field("http", pattern="^https?$", description="URL scheme")
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0, description="Request timeout (s)")
    discovery_limit: int = Field(
        DEFAULT_DISCOVERY_LIMIT,
        ge=1,
        description="Max records a cascading delete discovers per index",
    )

    @property
    def base_url(self) -> str:
        """Base URL of the service, e.g. ``http://localhost:7700``."""
        return f"{self.scheme}://{self.host}:{self.port}"


def load_service_config(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    environ: Mapping[str, str] | None = None,
    **overrides: object,
) -> ServiceConfig:
    """Build a ServiceConfig from CLI values and the environment.

    Args:
        host: Service host
        port: Service port
        environ: Environment to read the API key from (defaults to os.environ)
        **overrides: Extra ServiceConfig fields (timeout, discovery_limit, ...)

    Returns:
        Validated ServiceConfig

    Raises:
        ConfigError: If the API key is missing or a value is invalid
    """
    env = os.environ if environ is None else environ
    api_key = env.get(API_KEY_ENV_VAR, "").strip()
    if not api_key:
        raise ConfigError(
            API_KEY_ENV_VAR, "environment variable is required and must not be empty"
        )

    try:
        config = ServiceConfig(host=host, port=port, api_key=api_key, **overrides)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "service"
        raise ConfigError(field, first["msg"]) from e

    logger.debug(f"Search service configured at {config.base_url}")
    return config
