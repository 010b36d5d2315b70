"""Tests for supported-model grouping used by the model picker."""

from aicore_models.catalog import (
    SUPPORTED_MODELS,
    categorize_models,
    is_supported,
    select_deployment,
)
from aicore_models.discovery.types import ModelDeployment


def test_categorize_splits_deployed_and_not_deployed():
    deployments = [
        ModelDeployment("gpt-4o", "d1"),
        ModelDeployment("my-finetune", "d2"),
        ModelDeployment("anthropic--claude-3.5-sonnet", "d3"),
    ]
    supported = ("anthropic--claude-3.5-sonnet", "gemini-2.5-pro", "gpt-4o")

    categorized = categorize_models(deployments, supported)

    assert categorized.deployed == (
        ModelDeployment("gpt-4o", "d1"),
        ModelDeployment("anthropic--claude-3.5-sonnet", "d3"),
    )
    assert categorized.not_deployed == ("gemini-2.5-pro",)


def test_categorize_without_deployments_lists_whole_catalog():
    categorized = categorize_models([])

    assert categorized.deployed == ()
    assert categorized.not_deployed == SUPPORTED_MODELS


def test_select_deployment():
    deployments = [ModelDeployment("gpt-4o", "d1"), ModelDeployment("gpt-4o", "d2")]

    assert select_deployment(deployments, "gpt-4o") == ModelDeployment("gpt-4o", "d1")
    assert select_deployment(deployments, "o3") is None
    assert select_deployment(deployments, "") is None


def test_catalog_names_are_normalized_base_names():
    assert all(name == name.lower() and ":" not in name for name in SUPPORTED_MODELS)
    assert len(set(SUPPORTED_MODELS)) == len(SUPPORTED_MODELS)
    assert is_supported("gpt-4o")
    assert not is_supported("GPT-4o")
