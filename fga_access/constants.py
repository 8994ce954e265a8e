"""
Constants for FGA_ACCESS.

Shared defaults and environment variable names used across the package.
"""

from typing import Final

# ============================================================================
# CONNECTION DEFAULTS
# ============================================================================

DEFAULT_API_URL: Final[str] = "http://localhost:8080"
"""OpenFGA API URL used when neither environment nor arguments provide one."""

DEFAULT_STORE_NAME: Final[str] = "FGA Demo Store"
"""Name given to a store created during bootstrap."""

# ============================================================================
# ENVIRONMENT VARIABLES
# ============================================================================

ENV_API_URL: Final[str] = "FGA_API_URL"
ENV_STORE_ID: Final[str] = "FGA_STORE_ID"
ENV_MODEL_ID: Final[str] = "FGA_MODEL_ID"
ENV_API_TOKEN: Final[str] = "FGA_API_TOKEN"
ENV_STORE_NAME: Final[str] = "FGA_STORE_NAME"

ALLOWED_URL_SCHEMES: Final[tuple[str, ...]] = ("http://", "https://")
"""URL schemes accepted for the OpenFGA API endpoint."""

# ============================================================================
# OBSERVABILITY
# ============================================================================

METRIC_PREFIX: Final[str] = "fga"
"""Prefix for operation names recorded in the metrics collector."""

MAX_METRICS: Final[int] = 10000
"""Maximum number of metric keys kept before LRU eviction."""
