"""Deployment discovery for AI Core: fetching, caching and orchestration."""

from .cache import (  # noqa: F401
    CacheEntry,
    CacheStore,
    DiskCacheStore,
    MemoryCacheStore,
    ModelCache,
    compute_config_hash,
)
from .deployments import DeploymentFetcher  # noqa: F401
from .service import ModelDiscoveryService, get_sap_ai_core_models  # noqa: F401
from .session import DiscoverySession, SessionModelCache, credentials_hash  # noqa: F401
from .types import (  # noqa: F401
    NOT_CONFIGURED,
    Deployment,
    DeploymentListing,
    DiscoveryOutcome,
    DiscoveryResult,
    ModelDeployment,
    ModelIdentifier,
    normalize_model_name,
)

__all__ = [
    "CacheEntry",
    "CacheStore",
    "Deployment",
    "DeploymentFetcher",
    "DeploymentListing",
    "DiscoveryOutcome",
    "DiscoveryResult",
    "DiscoverySession",
    "DiskCacheStore",
    "MemoryCacheStore",
    "ModelCache",
    "ModelDeployment",
    "ModelDiscoveryService",
    "ModelIdentifier",
    "NOT_CONFIGURED",
    "SessionModelCache",
    "compute_config_hash",
    "credentials_hash",
    "get_sap_ai_core_models",
    "normalize_model_name",
]
