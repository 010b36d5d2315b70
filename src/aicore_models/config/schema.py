"""Configuration schema module.

This module defines the records used to configure discovery. The credential
record mirrors what the settings panel submits (camelCase keys), while the
discovery settings collect the tunables of the core itself.
"""

from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from aicore_models._internal.exceptions import ConfigIncompleteError

DEFAULT_CACHE_DIR = Path.home() / ".cache" / "aicore_models"
DEFAULT_CACHE_FILENAME = "sap_ai_core_models.json"
CACHE_SCHEMA_VERSION = "2"


class AICoreCredentials(BaseModel):
    """Credentials and routing information for one discovery call.

    Attributes:
        client_id: OAuth client identifier.
        client_secret: OAuth client secret.
        token_url: Base URL of the OAuth authorization server.
        base_url: Base URL of the AI Core API.
        resource_group: Resource group routed through the request headers.
        force_refresh: Skip the persisted cache and always fetch live.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    client_id: str = Field(default="", alias="clientId")
    client_secret: str = Field(default="", alias="clientSecret", repr=False)
    token_url: str = Field(default="", alias="tokenUrl")
    base_url: str = Field(default="", alias="baseUrl")
    resource_group: str = Field(default="", alias="resourceGroup")
    force_refresh: bool = Field(default=False, alias="forceRefresh")

    @field_validator(
        "client_id", "client_secret", "token_url", "base_url", "resource_group", mode="before"
    )
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("force_refresh", mode="before")
    @classmethod
    def _none_as_false(cls, value: Any) -> Any:
        return False if value is None else value

    def missing_fields(self) -> List[str]:
        """Return the names of the required fields that are blank."""
        required = ("client_id", "client_secret", "base_url")
        return [name for name in required if not getattr(self, name).strip()]

    def is_complete(self) -> bool:
        """Whether discovery has enough information to contact the service."""
        return not self.missing_fields()

    def require_complete(self) -> None:
        missing = self.missing_fields()
        if missing:
            raise ConfigIncompleteError(missing)

    def has_required_credentials(self) -> bool:
        """Stricter check used by the settings panel: every field must be set."""
        fields = (
            self.client_id,
            self.client_secret,
            self.base_url,
            self.token_url,
            self.resource_group,
        )
        return all(value.strip() for value in fields)

    def with_force_refresh(self, force_refresh: bool = True) -> "AICoreCredentials":
        return self.model_copy(update={"force_refresh": force_refresh})


class DiscoverySettings(BaseModel):
    """Tunables for the discovery core.

    Attributes:
        cache_dir: Directory holding the persisted discovery cache.
        cache_filename: File name of the cache entry inside ``cache_dir``.
        schema_version: Expected cache schema version; mismatching entries are ignored.
        timeout: Network deadline in seconds applied to every HTTP call.
        client_type: Value sent in the ``AI-Client-Type`` header.
        page_size: Number of deployments requested from the listing endpoint.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    cache_dir: Path = DEFAULT_CACHE_DIR
    cache_filename: str = DEFAULT_CACHE_FILENAME
    schema_version: str = CACHE_SCHEMA_VERSION
    timeout: Optional[float] = Field(default=30.0, gt=0)
    client_type: str = "aicore-models"
    page_size: int = Field(default=10000, gt=0)

    @field_validator("cache_dir", mode="before")
    @classmethod
    def _expand_cache_dir(cls, value: Any) -> Any:
        if isinstance(value, str):
            return Path(value).expanduser()
        return value

    @property
    def cache_path(self) -> Path:
        return self.cache_dir / self.cache_filename


class AICoreConfig(BaseModel):
    """Top-level configuration document."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    credentials: AICoreCredentials = Field(default_factory=AICoreCredentials)
    discovery: DiscoverySettings = Field(default_factory=DiscoverySettings)


__all__ = [
    "AICoreConfig",
    "AICoreCredentials",
    "CACHE_SCHEMA_VERSION",
    "DEFAULT_CACHE_DIR",
    "DEFAULT_CACHE_FILENAME",
    "DiscoverySettings",
]
