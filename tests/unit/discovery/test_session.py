"""Tests for the per-session discovery cache."""

from unittest.mock import MagicMock

import pytest

from aicore_models.config.schema import AICoreCredentials
from aicore_models.discovery.service import ModelDiscoveryService
from aicore_models.discovery.session import DiscoverySession, SessionModelCache, credentials_hash
from aicore_models.discovery.types import DiscoveryOutcome, DiscoveryResult, ModelDeployment

RESULT = DiscoveryResult(
    model_names=("gpt-4o",),
    deployments=(ModelDeployment("gpt-4o", "d1"),),
    outcome=DiscoveryOutcome.RETURNED_FRESH,
)


@pytest.fixture
def discovery_service():
    service = MagicMock(spec=ModelDiscoveryService)
    service.discover.return_value = RESULT
    return service


def test_credentials_hash_uses_id_url_and_group(credentials):
    assert credentials_hash(credentials) == "a-https://x-rg"


def test_session_reuses_result_for_same_credentials(discovery_service, credentials):
    session = DiscoverySession(discovery_service)

    first = session.models(credentials)
    second = session.models(credentials.model_copy(update={"client_secret": "rotated"}))

    assert first is second is RESULT
    discovery_service.discover.assert_called_once()


def test_changed_credentials_trigger_new_discovery(discovery_service, credentials):
    session = DiscoverySession(discovery_service)

    session.models(credentials)
    session.models(credentials.model_copy(update={"resource_group": "other"}))

    assert discovery_service.discover.call_count == 2


@pytest.mark.parametrize(
    "missing", ["client_id", "client_secret", "base_url", "token_url", "resource_group"]
)
def test_incomplete_credentials_clear_session(discovery_service, credentials, missing):
    cache = SessionModelCache()
    session = DiscoverySession(discovery_service, cache)
    session.models(credentials)

    result = session.models(credentials.model_copy(update={missing: ""}))

    assert result.is_empty
    assert len(cache) == 0
    discovery_service.discover.assert_called_once()


def test_refresh_bypasses_session_and_forces_service(discovery_service, credentials):
    session = DiscoverySession(discovery_service)
    session.models(credentials)

    session.refresh(credentials)

    assert discovery_service.discover.call_count == 2
    forced = discovery_service.discover.call_args.args[0]
    assert isinstance(forced, AICoreCredentials)
    assert forced.force_refresh is True


def test_session_accepts_request_mappings(discovery_service):
    session = DiscoverySession(discovery_service)

    result = session.models(
        {
            "clientId": "a",
            "clientSecret": "b",
            "baseUrl": "https://x",
            "tokenUrl": "https://x",
            "resourceGroup": "rg",
        }
    )

    assert result is RESULT


def test_invalidate_drops_entry(credentials):
    cache = SessionModelCache()
    cache.put(credentials, RESULT)

    cache.invalidate()

    assert cache.get(credentials) is None


def test_invalid_request_mapping_returns_empty_without_discovery(discovery_service, caplog):
    session = DiscoverySession(discovery_service)

    result = session.models({"clientId": 123, "clientSecret": "b", "baseUrl": "https://x"})

    assert result.is_empty
    assert result.outcome is DiscoveryOutcome.RETURNED_EMPTY
    assert "Invalid AI Core discovery request" in caplog.text
    discovery_service.discover.assert_not_called()


def test_refresh_with_invalid_request_mapping_returns_empty(discovery_service):
    session = DiscoverySession(discovery_service)

    assert session.refresh({"clientId": ["a"], "baseUrl": "https://x"}).is_empty
    discovery_service.discover.assert_not_called()
