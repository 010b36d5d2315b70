"""Configuration loader module.

Loads the YAML configuration document, resolves ``${VAR}`` placeholders from
the environment, overlays ``AICORE_*`` environment variables and validates the
result into an :class:`AICoreConfig`.
"""

import os
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from pydantic import ValidationError

from aicore_models._internal.exceptions import ConfigError

from .schema import AICoreConfig

ENV_PREFIX = "AICORE"
DEFAULT_CONFIG_PATH = Path.home() / ".aicore" / "config.yaml"

_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")

# Environment variable suffix -> (section, field)
_ENV_FIELDS = {
    "CLIENT_ID": ("credentials", "client_id"),
    "CLIENT_SECRET": ("credentials", "client_secret"),
    "TOKEN_URL": ("credentials", "token_url"),
    "BASE_URL": ("credentials", "base_url"),
    "RESOURCE_GROUP": ("credentials", "resource_group"),
    "CACHE_DIR": ("discovery", "cache_dir"),
    "TIMEOUT": ("discovery", "timeout"),
}


def merge_dicts(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge dictionaries; values in ``override`` take precedence."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = merge_dicts(result[key], value)
        else:
            result[key] = value
    return result


def _resolve_string(value: str) -> str:
    return _PLACEHOLDER.sub(lambda match: os.environ.get(match.group(1), ""), value)


def resolve_env_vars(config: Any) -> Any:
    """Replace ``${VAR}`` patterns with environment variables, recursively."""
    if isinstance(config, Mapping):
        return {key: resolve_env_vars(value) for key, value in config.items()}
    if isinstance(config, list):
        return [resolve_env_vars(item) for item in config]
    if isinstance(config, str) and "${" in config:
        return _resolve_string(config)
    return config


def load_yaml_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a YAML mapping from ``path``.

    A missing file yields an empty mapping.

    Raises:
        ConfigError: If the file cannot be read, is not valid YAML or does not
            contain a mapping.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Error reading {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def load_from_env(prefix: str = ENV_PREFIX) -> Dict[str, Any]:
    """Collect configuration overrides from ``<prefix>_*`` environment variables."""
    result: Dict[str, Any] = {}
    for suffix, (section, field) in _ENV_FIELDS.items():
        value = os.environ.get(f"{prefix}_{suffix}")
        if value is None or value == "":
            continue
        result.setdefault(section, {})[field] = value
    return result


def config_path_from_env(prefix: str = ENV_PREFIX) -> Path:
    override = os.environ.get(f"{prefix}_CONFIG_PATH")
    return Path(override).expanduser() if override else DEFAULT_CONFIG_PATH


def load_config(path: Optional[Union[str, Path]] = None, env_prefix: str = ENV_PREFIX) -> AICoreConfig:
    """Load :class:`AICoreConfig` from file and environment.

    Args:
        path: Config file path. Defaults to ``$AICORE_CONFIG_PATH`` or
            ``~/.aicore/config.yaml``.
        env_prefix: Prefix for overriding environment variables.

    Raises:
        ConfigError: On loading or validation failure.
    """
    config_path = Path(path).expanduser() if path is not None else config_path_from_env(env_prefix)

    config_data = load_yaml_file(config_path)
    config_data = resolve_env_vars(config_data)
    config_data = merge_dicts(config_data, load_from_env(env_prefix))

    try:
        return AICoreConfig.model_validate(config_data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {config_path}: {exc}") from exc


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ENV_PREFIX",
    "config_path_from_env",
    "load_config",
    "load_from_env",
    "load_yaml_file",
    "merge_dicts",
    "resolve_env_vars",
]
