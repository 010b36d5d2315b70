"""Shared fixtures for aicore_models tests."""

import logging

import pytest

from aicore_models.auth.token import TokenAuthenticator
from aicore_models.config.schema import AICoreCredentials, DiscoverySettings
from aicore_models.discovery.cache import DiskCacheStore, ModelCache
from aicore_models.discovery.deployments import DeploymentFetcher
from aicore_models.discovery.service import ModelDiscoveryService
from tests.helpers.aicore_api import FakeAICore, deployment_resource


@pytest.fixture(autouse=True)
def _package_logging(caplog):
    caplog.set_level(logging.DEBUG, logger="aicore_models")


@pytest.fixture
def settings(tmp_path) -> DiscoverySettings:
    return DiscoverySettings(cache_dir=tmp_path / "cache", timeout=5.0)


@pytest.fixture
def credentials() -> AICoreCredentials:
    return AICoreCredentials(
        client_id="a",
        client_secret="b",
        token_url="https://x",
        base_url="https://x",
        resource_group="rg",
    )


@pytest.fixture
def fake_api() -> FakeAICore:
    return FakeAICore(
        deployments=[
            deployment_resource("d1", name="gpt-4o", version="2024-05-13"),
            deployment_resource("d2", name="anthropic--claude-3.5-sonnet", version="1"),
        ]
    )


@pytest.fixture
def model_cache(settings) -> ModelCache:
    return ModelCache.from_settings(settings)


@pytest.fixture
def service(settings, model_cache, fake_api) -> ModelDiscoveryService:
    return ModelDiscoveryService(
        cache=model_cache,
        authenticator=TokenAuthenticator(settings, client_factory=fake_api.client_factory),
        fetcher=DeploymentFetcher(settings, client_factory=fake_api.client_factory),
        settings=settings,
    )


@pytest.fixture
def disk_store(settings) -> DiskCacheStore:
    return DiskCacheStore(settings.cache_dir)
