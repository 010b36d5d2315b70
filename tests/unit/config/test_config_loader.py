"""Tests for configuration loading."""

from pathlib import Path

import pytest

from aicore_models._internal.exceptions import ConfigError
from aicore_models.config.loader import load_config, merge_dicts, resolve_env_vars
from aicore_models.config.schema import DEFAULT_CACHE_FILENAME


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "AICORE_CONFIG_PATH",
        "AICORE_CLIENT_ID",
        "AICORE_CLIENT_SECRET",
        "AICORE_TOKEN_URL",
        "AICORE_BASE_URL",
        "AICORE_RESOURCE_GROUP",
        "AICORE_CACHE_DIR",
        "AICORE_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


def test_missing_file_yields_defaults(tmp_path):
    config = load_config(tmp_path / "absent.yaml")

    assert config.credentials.client_id == ""
    assert not config.credentials.is_complete()
    assert config.discovery.cache_filename == DEFAULT_CACHE_FILENAME
    assert config.discovery.schema_version == "2"


def test_yaml_file_is_loaded_with_env_placeholders(tmp_path, monkeypatch):
    monkeypatch.setenv("MY_SECRET", "s3cret")
    path = tmp_path / "config.yaml"
    path.write_text(
        "credentials:\n"
        "  client_id: sb-client\n"
        "  client_secret: ${MY_SECRET}\n"
        "  token_url: https://auth.example.com\n"
        "  base_url: https://api.example.com\n"
        "  resource_group: default\n"
        "discovery:\n"
        f"  cache_dir: {tmp_path / 'cache'}\n"
        "  timeout: 12.5\n"
    )

    config = load_config(path)

    assert config.credentials.client_secret == "s3cret"
    assert config.credentials.has_required_credentials()
    assert config.discovery.cache_path == tmp_path / "cache" / DEFAULT_CACHE_FILENAME
    assert config.discovery.timeout == 12.5


def test_camel_case_keys_are_accepted(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("credentials:\n  clientId: abc\n  baseUrl: https://api\n")

    config = load_config(path)

    assert config.credentials.client_id == "abc"
    assert config.credentials.base_url == "https://api"


def test_environment_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("credentials:\n  client_id: from-file\n  base_url: https://file\n")
    monkeypatch.setenv("AICORE_CLIENT_ID", "from-env")
    monkeypatch.setenv("AICORE_TIMEOUT", "3")

    config = load_config(path)

    assert config.credentials.client_id == "from-env"
    assert config.credentials.base_url == "https://file"
    assert config.discovery.timeout == 3.0


def test_config_path_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "custom.yaml"
    path.write_text("credentials:\n  client_id: custom\n")
    monkeypatch.setenv("AICORE_CONFIG_PATH", str(path))

    assert load_config().credentials.client_id == "custom"


@pytest.mark.parametrize(
    "content",
    ["credentials: [unclosed\n", "- just\n- a list\n", "discovery:\n  timeout: -1\n"],
    ids=["bad-yaml", "not-a-mapping", "invalid-value"],
)
def test_invalid_configuration_raises_config_error(tmp_path, content):
    path = tmp_path / "config.yaml"
    path.write_text(content)

    with pytest.raises(ConfigError):
        load_config(path)


def test_merge_dicts_is_recursive():
    merged = merge_dicts({"a": {"b": 1, "c": 2}, "d": 1}, {"a": {"c": 3}, "e": 4})

    assert merged == {"a": {"b": 1, "c": 3}, "d": 1, "e": 4}


def test_resolve_env_vars_handles_nested_values(monkeypatch):
    monkeypatch.setenv("HOST", "example.com")
    monkeypatch.delenv("UNSET_VAR", raising=False)

    resolved = resolve_env_vars({"urls": ["https://${HOST}"], "x": {"y": "${UNSET_VAR}"}, "n": 1})

    assert resolved == {"urls": ["https://example.com"], "x": {"y": ""}, "n": 1}


def test_cache_dir_expands_user(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("discovery:\n  cache_dir: ~/aicore-cache\n")

    assert load_config(path).discovery.cache_dir == Path.home() / "aicore-cache"
