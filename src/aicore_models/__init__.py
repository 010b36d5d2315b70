"""aicore_models: model and deployment discovery for SAP AI Core.

Typical use from a request handler::

    from aicore_models import ModelDiscoveryService

    service = ModelDiscoveryService()
    payload = service.discover(request).to_payload()
"""

from aicore_models._internal.exceptions import (
    AICoreError,
    AuthError,
    ConfigError,
    FetchError,
)
from aicore_models.auth import AccessToken, TokenAuthenticator
from aicore_models.config import AICoreCredentials, DiscoverySettings, load_config
from aicore_models.discovery import (
    DeploymentFetcher,
    DiscoveryOutcome,
    DiscoveryResult,
    DiscoverySession,
    ModelCache,
    ModelDeployment,
    ModelDiscoveryService,
    get_sap_ai_core_models,
)

__version__ = "0.1.0"

__all__ = [
    "AICoreCredentials",
    "AICoreError",
    "AccessToken",
    "AuthError",
    "ConfigError",
    "DeploymentFetcher",
    "DiscoveryOutcome",
    "DiscoveryResult",
    "DiscoverySession",
    "DiscoverySettings",
    "FetchError",
    "ModelCache",
    "ModelDeployment",
    "ModelDiscoveryService",
    "TokenAuthenticator",
    "get_sap_ai_core_models",
    "load_config",
]
