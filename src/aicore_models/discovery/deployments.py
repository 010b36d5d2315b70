"""
AI Core deployment fetcher.

Lists the deployments of a resource group through the AI Core ``/v2/lm``
API and reduces them to the running deployments that expose a model name and
version. This is the single public entry point for deployment listing; the
discovery service and request handlers both go through it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, Optional

import httpx

from aicore_models._internal.exceptions import FetchError
from aicore_models.config.schema import DiscoverySettings

from .types import (
    NOT_CONFIGURED,
    ORCHESTRATION_SCENARIO,
    Deployment,
    DeploymentListing,
    ModelIdentifier,
    normalize_model_name,
)

logger = logging.getLogger(__name__)

DEPLOYMENTS_PATH = "/v2/lm/deployments"
DEFAULT_RESOURCE_GROUP = "default"

ClientFactory = Callable[[float | None], httpx.Client]


def _default_client_factory(timeout: float | None) -> httpx.Client:
    return httpx.Client(timeout=timeout)


class DeploymentFetcher:
    """Fetch running model deployments from AI Core."""

    def __init__(
        self,
        settings: DiscoverySettings | None = None,
        *,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._settings = settings or DiscoverySettings()
        self._client_factory = client_factory or _default_client_factory

    def build_headers(self, access_token: str, resource_group: str | None) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {access_token}",
            "AI-Resource-Group": resource_group or DEFAULT_RESOURCE_GROUP,
            "Content-Type": "application/json",
            "AI-Client-Type": self._settings.client_type,
        }

    def deployments_url(self, base_url: str) -> str:
        page_size = self._settings.page_size
        return f"{base_url.rstrip('/')}{DEPLOYMENTS_PATH}?$top={page_size}&$skip=0"

    def list_deployments(
        self, access_token: str | None, base_url: str, resource_group: str | None
    ) -> DeploymentListing:
        """List running deployments.

        Without an access token no request is made and the listing holds only
        the ``NOT_CONFIGURED`` sentinel, so the caller can show that discovery
        is not configured instead of an empty model list.

        Raises:
            FetchError: On transport, status or payload errors. No partial
                listing is returned.
        """
        if not access_token:
            logger.info("No AI Core access token; reporting deployments as not configured")
            return DeploymentListing(models=(NOT_CONFIGURED,))

        url = self.deployments_url(base_url)
        resources = self._request_resources(url, self.build_headers(access_token, resource_group))

        running: list[Deployment] = []
        for resource in resources:
            if not isinstance(resource, Mapping):
                raise FetchError("Deployment entry is not a JSON object", context={"url": url})
            deployment = Deployment.from_resource(resource)
            if deployment.is_running:
                running.append(deployment)

        orchestration_available = any(
            deployment.scenario_id == ORCHESTRATION_SCENARIO for deployment in running
        )

        models: list[ModelIdentifier] = []
        for deployment in running:
            identifier = deployment.identifier
            if identifier is None:
                logger.debug("Skipping deployment %s without model name/version", deployment.id)
                continue
            models.append(ModelIdentifier(id=deployment.id, name=identifier))

        logger.info(
            "Found %d running AI Core deployments (%d with models, orchestration=%s)",
            len(running),
            len(models),
            orchestration_available,
        )
        return DeploymentListing(
            models=tuple(models),
            orchestration_available=orchestration_available,
            deployments=tuple(running),
        )

    def list_models(
        self, access_token: str | None, base_url: str, resource_group: str | None
    ) -> list[ModelIdentifier]:
        """Return ``{id, "name:version"}`` identifiers of running deployments."""
        return list(self.list_deployments(access_token, base_url, resource_group).models)

    def find_deployment_id(
        self,
        access_token: str | None,
        base_url: str,
        resource_group: str | None,
        model_name: str,
    ) -> Optional[str]:
        """Return the id of the first running deployment serving ``model_name``."""
        wanted = normalize_model_name(model_name)
        for model in self.list_models(access_token, base_url, resource_group):
            if model is NOT_CONFIGURED:
                continue
            if model.base_name == wanted:
                return model.id
        return None

    def _request_resources(self, url: str, headers: Mapping[str, str]) -> list[Any]:
        try:
            with self._client_factory(self._settings.timeout) as client:
                response = client.get(url, headers=dict(headers))
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error("Error fetching deployments: HTTP %s", exc.response.status_code)
            raise FetchError(
                "Failed to fetch deployments",
                context={"url": url, "status": exc.response.status_code},
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error("Error fetching deployments: %s", exc)
            raise FetchError("Failed to fetch deployments", context={"url": url}) from exc
        except ValueError as exc:
            raise FetchError("Deployment response is not valid JSON", context={"url": url}) from exc

        resources = body.get("resources") if isinstance(body, Mapping) else None
        if not isinstance(resources, list):
            raise FetchError("Deployment response has no resources list", context={"url": url})
        return resources


__all__ = ["DEFAULT_RESOURCE_GROUP", "DEPLOYMENTS_PATH", "DeploymentFetcher"]
