"""
Configuration management for FGA_ACCESS.

Connection settings for the OpenFGA server. Each value may come from the
process environment or from explicit constructor arguments; the
environment takes precedence.
"""

import os
from typing import Optional

from .constants import (
    ALLOWED_URL_SCHEMES,
    DEFAULT_API_URL,
    DEFAULT_STORE_NAME,
    ENV_API_TOKEN,
    ENV_API_URL,
    ENV_MODEL_ID,
    ENV_STORE_ID,
    ENV_STORE_NAME,
)
from .exceptions import ConfigurationError


class FgaConfig:
    """
    OpenFGA connection configuration.

    Example:
        # FGA_API_URL=https://fga.example.com in the environment
        config = FgaConfig(api_url="http://localhost:8080")
        config.api_url  # "https://fga.example.com"

        # Nothing configured: local server, no store, no model yet
        config = FgaConfig()
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        store_id: Optional[str] = None,
        authorization_model_id: Optional[str] = None,
        api_token: Optional[str] = None,
        store_name: Optional[str] = None,
    ):
        """
        Initialize configuration.

        Args:
            api_url: OpenFGA API URL (FGA_API_URL wins, defaults to localhost:8080)
            store_id: Store identifier (FGA_STORE_ID wins)
            authorization_model_id: Default model identifier (FGA_MODEL_ID wins)
            api_token: Optional bearer token (FGA_API_TOKEN wins)
            store_name: Name for a newly created store (FGA_STORE_NAME wins)
        """
        self.api_url = os.getenv(ENV_API_URL) or api_url or DEFAULT_API_URL
        self.store_id = os.getenv(ENV_STORE_ID) or store_id or None
        self.authorization_model_id = (
            os.getenv(ENV_MODEL_ID) or authorization_model_id or None
        )
        self.api_token = os.getenv(ENV_API_TOKEN) or api_token or None
        self.store_name = os.getenv(ENV_STORE_NAME) or store_name or DEFAULT_STORE_NAME

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigurationError: If a value is missing or malformed
        """
        if not self.api_url.startswith(ALLOWED_URL_SCHEMES):
            raise ConfigurationError(
                f"api_url must start with http:// or https://, got '{self.api_url}'",
                config_key=ENV_API_URL,
                config_value=self.api_url,
            )

        if not self.store_name.strip():
            raise ConfigurationError(
                "store_name must not be blank",
                config_key=ENV_STORE_NAME,
            )

    def __repr__(self) -> str:
        return (
            f"FgaConfig(api_url={self.api_url!r}, store_id={self.store_id!r}, "
            f"authorization_model_id={self.authorization_model_id!r}, "
            f"api_token={'***' if self.api_token else None})"
        )
