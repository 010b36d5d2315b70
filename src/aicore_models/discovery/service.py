"""AI Core model discovery service.

Sequences the persisted cache, the token exchange and the deployment listing
into a single call that never raises: a populated result, a cached result or
an empty result are the only outcomes. Failures are reported through logging.

    service = ModelDiscoveryService.from_settings(DiscoverySettings())
    result = service.discover({"clientId": "...", "clientSecret": "...", ...})
    result.model_names  # ("anthropic--claude-3.5-sonnet", "gpt-4o")
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import ValidationError

from aicore_models._internal.exceptions import AICoreError
from aicore_models.auth.token import TokenAuthenticator
from aicore_models.config.schema import AICoreCredentials, DiscoverySettings

from .cache import ModelCache, compute_config_hash
from .deployments import DeploymentFetcher
from .types import DiscoveryOutcome, DiscoveryResult

logger = logging.getLogger(__name__)

CredentialsLike = Union[AICoreCredentials, Mapping[str, Any]]


def coerce_credentials(credentials: CredentialsLike) -> AICoreCredentials:
    """Accept either a credentials record or a camelCase request mapping."""
    if isinstance(credentials, AICoreCredentials):
        return credentials
    return AICoreCredentials.model_validate(dict(credentials))


class ModelDiscoveryService:
    """Discover deployed AI Core models with a persisted fallback cache.

    Attributes:
        cache: Persisted cache of the last successful discovery.
        authenticator: Client-credentials token source.
        fetcher: Deployment listing client.
    """

    def __init__(
        self,
        cache: Optional[ModelCache] = None,
        authenticator: Optional[TokenAuthenticator] = None,
        fetcher: Optional[DeploymentFetcher] = None,
        settings: Optional[DiscoverySettings] = None,
    ) -> None:
        self.settings: DiscoverySettings = settings or DiscoverySettings()
        self.cache: ModelCache = cache or ModelCache.from_settings(self.settings)
        self.authenticator: TokenAuthenticator = authenticator or TokenAuthenticator(self.settings)
        self.fetcher: DeploymentFetcher = fetcher or DeploymentFetcher(self.settings)

    @classmethod
    def from_settings(cls, settings: DiscoverySettings) -> "ModelDiscoveryService":
        return cls(settings=settings)

    def discover(self, credentials: CredentialsLike) -> DiscoveryResult:
        """Return the models deployed for ``credentials``.

        Incomplete credentials short-circuit to an empty result without
        touching the cache or the network. Otherwise a matching cache entry is
        returned unless ``force_refresh`` is set; a live fetch refreshes the
        cache, and a failed fetch falls back to the cache or an empty result.

        Args:
            credentials: An :class:`AICoreCredentials` or the equivalent request
                mapping (``clientId``, ``clientSecret``, ...).

        Returns:
            DiscoveryResult: Never raises for discovery failures.
        """
        try:
            config = coerce_credentials(credentials)
        except ValidationError as exc:
            logger.error("Invalid AI Core discovery request: %s", exc)
            return DiscoveryResult.empty()

        if not config.is_complete():
            logger.debug(
                "AI Core configuration incomplete (missing %s); skipping discovery",
                ", ".join(config.missing_fields()),
            )
            return DiscoveryResult.empty()

        config_hash = compute_config_hash(config)

        if not config.force_refresh:
            cached = self.cache.read(config_hash)
            if cached is not None:
                logger.info("Returning %d cached AI Core models", len(cached.model_names))
                return cached.to_result()

        try:
            result = self._fetch_live(config)
        except AICoreError as exc:
            logger.error("Error fetching AI Core models: %s", exc)
            return self._fallback(config_hash)

        self.cache.write_result(result, config_hash)
        logger.info("Discovered %d AI Core models", len(result.model_names))
        return result

    async def discover_async(
        self, credentials: CredentialsLike, *, timeout: Optional[float] = None
    ) -> DiscoveryResult:
        """Asynchronous :meth:`discover` bounded by an optional deadline.

        The blocking discovery runs in a worker thread. When ``timeout``
        elapses the call resolves from the cache (or empty) and the worker is
        left to finish; its cache write, if any, still lands.
        """
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.discover, credentials), timeout=timeout
            )
        except asyncio.TimeoutError:
            logger.error("AI Core discovery timed out after %s seconds", timeout)
            try:
                config = coerce_credentials(credentials)
            except ValidationError:
                return DiscoveryResult.empty()
            if not config.is_complete():
                return DiscoveryResult.empty()
            return self._fallback(compute_config_hash(config))

    def _fetch_live(self, config: AICoreCredentials) -> DiscoveryResult:
        token = self.authenticator.authenticate(
            config.client_id, config.client_secret, config.token_url
        )
        listing = self.fetcher.list_deployments(token.value, config.base_url, config.resource_group)
        return DiscoveryResult.from_models(
            listing.models,
            orchestration_available=listing.orchestration_available,
            outcome=DiscoveryOutcome.RETURNED_FRESH,
        )

    def _fallback(self, config_hash: str) -> DiscoveryResult:
        cached = self.cache.read(config_hash)
        if cached is not None:
            logger.warning("Serving %d AI Core models from cache after error", len(cached.model_names))
            return cached.to_result()
        return DiscoveryResult.empty()


def get_sap_ai_core_models(
    request: CredentialsLike, service: Optional[ModelDiscoveryService] = None
) -> Dict[str, Any]:
    """Handle a settings-panel model request and return its JSON payload."""
    service = service or ModelDiscoveryService()
    return service.discover(request).to_payload()


__all__ = [
    "CredentialsLike",
    "ModelDiscoveryService",
    "coerce_credentials",
    "get_sap_ai_core_models",
]
