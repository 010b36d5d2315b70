"""Shared dataclasses for deployment discovery."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Sequence

RUNNING_STATUS = "RUNNING"
ORCHESTRATION_SCENARIO = "orchestration"
MODEL_VERSION_SEPARATOR = ":"


def _dig(source: Mapping[str, Any], *keys: str) -> Mapping[str, Any]:
    current: Any = source
    for key in keys:
        if not isinstance(current, Mapping):
            return {}
        current = current.get(key)
    return current if isinstance(current, Mapping) else {}


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def normalize_model_name(identifier: str) -> str:
    """Return the base model name: the part before the version separator, lowercased.

    >>> normalize_model_name("GPT-4:2024-05-01")
    'gpt-4'
    """
    return identifier.split(MODEL_VERSION_SEPARATOR, 1)[0].lower()


@dataclass(frozen=True)
class Deployment:
    """A deployment row returned by the deployment-listing endpoint."""

    id: str
    model_name: Optional[str] = None
    model_version: Optional[str] = None
    target_status: Optional[str] = None
    scenario_id: Optional[str] = None

    @property
    def is_running(self) -> bool:
        return self.target_status == RUNNING_STATUS

    @property
    def identifier(self) -> Optional[str]:
        """``"{name}:{version}"`` or ``None`` when either part is missing."""
        if not self.model_name or not self.model_version:
            return None
        return f"{self.model_name}{MODEL_VERSION_SEPARATOR}{self.model_version}"

    @classmethod
    def from_resource(cls, resource: Mapping[str, Any]) -> "Deployment":
        model = _dig(resource, "details", "resources", "backend_details", "model")
        return cls(
            id=str(resource.get("id") or ""),
            model_name=_optional_str(model.get("name")),
            model_version=_optional_str(model.get("version")),
            target_status=resource.get("targetStatus"),
            scenario_id=resource.get("scenarioId"),
        )


@dataclass(frozen=True)
class ModelIdentifier:
    """A running deployment reduced to its id and ``name:version`` identifier."""

    id: str
    name: str

    @property
    def base_name(self) -> str:
        return normalize_model_name(self.name)


NOT_CONFIGURED = ModelIdentifier(id="notconfigured", name="ai-core-not-configured")


@dataclass(frozen=True)
class DeploymentListing:
    """Result of one deployment-listing call, restricted to running deployments."""

    models: Sequence[ModelIdentifier] = field(default_factory=tuple)
    orchestration_available: bool = False
    deployments: Sequence[Deployment] = field(default_factory=tuple)


@dataclass(frozen=True, order=True)
class ModelDeployment:
    """A base model name paired with the deployment serving it."""

    model_name: str
    deployment_id: str

    def to_payload(self) -> dict[str, str]:
        return {"modelName": self.model_name, "deploymentId": self.deployment_id}


class DiscoveryOutcome(str, enum.Enum):
    """Terminal state of a discovery call."""

    RETURNED_EMPTY = "returned_empty"
    RETURNED_CACHED = "returned_cached"
    RETURNED_FRESH = "returned_fresh"


@dataclass(frozen=True)
class DiscoveryResult:
    """Normalized discovery output handed to the settings panel."""

    model_names: tuple[str, ...] = ()
    deployments: tuple[ModelDeployment, ...] = ()
    orchestration_available: bool = False
    outcome: DiscoveryOutcome = DiscoveryOutcome.RETURNED_EMPTY

    @classmethod
    def empty(cls) -> "DiscoveryResult":
        return cls()

    @classmethod
    def from_models(
        cls,
        models: Iterable[ModelIdentifier],
        *,
        orchestration_available: bool = False,
        outcome: DiscoveryOutcome = DiscoveryOutcome.RETURNED_FRESH,
    ) -> "DiscoveryResult":
        """Normalize identifiers into sorted base names and deployment pairs."""
        pairs = sorted(ModelDeployment(model.base_name, model.id) for model in models)
        return cls(
            model_names=tuple(sorted(pair.model_name for pair in pairs)),
            deployments=tuple(pairs),
            orchestration_available=orchestration_available,
            outcome=outcome,
        )

    @property
    def is_empty(self) -> bool:
        return not self.model_names and not self.deployments

    def to_payload(self) -> dict[str, Any]:
        """Render the response shape expected by the settings panel."""
        return {
            "modelNames": list(self.model_names),
            "deployments": [pair.to_payload() for pair in self.deployments],
            "orchestrationAvailable": self.orchestration_available,
        }


__all__ = [
    "Deployment",
    "DeploymentListing",
    "DiscoveryOutcome",
    "DiscoveryResult",
    "MODEL_VERSION_SEPARATOR",
    "ModelDeployment",
    "ModelIdentifier",
    "NOT_CONFIGURED",
    "ORCHESTRATION_SCENARIO",
    "RUNNING_STATUS",
    "normalize_model_name",
]
