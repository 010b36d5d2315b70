"""Configuration records and loading for aicore_models."""

from .loader import load_config
from .schema import (
    CACHE_SCHEMA_VERSION,
    AICoreConfig,
    AICoreCredentials,
    DiscoverySettings,
)

__all__ = [
    "AICoreConfig",
    "AICoreCredentials",
    "CACHE_SCHEMA_VERSION",
    "DiscoverySettings",
    "load_config",
]
