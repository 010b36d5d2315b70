"""Models the assistant can drive through AI Core, and picker grouping.

The picker shows deployed models the assistant supports first, followed by
supported models that have no deployment yet (so the user knows what could be
deployed). Deployed models outside :data:`SUPPORTED_MODELS` are not offered.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from aicore_models.discovery.types import ModelDeployment

SUPPORTED_MODELS: tuple[str, ...] = (
    "anthropic--claude-4-opus",
    "anthropic--claude-4-sonnet",
    "anthropic--claude-3.7-sonnet",
    "anthropic--claude-3.5-sonnet",
    "anthropic--claude-3-sonnet",
    "anthropic--claude-3-haiku",
    "anthropic--claude-3-opus",
    "gemini-2.5-pro",
    "gemini-2.5-flash",
    "gpt-4",
    "gpt-4o",
    "gpt-4o-mini",
    "gpt-4.1",
    "gpt-4.1-nano",
    "o1",
    "o3",
    "o3-mini",
    "o4-mini",
)


@dataclass(frozen=True)
class CategorizedModels:
    """Picker sections: deployed-and-supported, then supported-but-not-deployed."""

    deployed: tuple[ModelDeployment, ...]
    not_deployed: tuple[str, ...]


def is_supported(model_name: str, supported: Sequence[str] = SUPPORTED_MODELS) -> bool:
    return model_name in supported


def categorize_models(
    deployments: Iterable[ModelDeployment],
    supported: Sequence[str] = SUPPORTED_MODELS,
) -> CategorizedModels:
    deployments = tuple(deployments)
    deployed = tuple(d for d in deployments if d.model_name in supported)
    deployed_names = {d.model_name for d in deployments}
    not_deployed = tuple(name for name in supported if name not in deployed_names)
    return CategorizedModels(deployed=deployed, not_deployed=not_deployed)


def select_deployment(
    deployments: Iterable[ModelDeployment], model_name: str
) -> Optional[ModelDeployment]:
    """Return the first deployment of ``model_name``; ``None`` for unknown or blank names."""
    if not model_name:
        return None
    for deployment in deployments:
        if deployment.model_name == model_name:
            return deployment
    return None


__all__ = [
    "CategorizedModels",
    "SUPPORTED_MODELS",
    "categorize_models",
    "is_supported",
    "select_deployment",
]
