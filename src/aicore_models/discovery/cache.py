"""Persisted cache for discovery results.

The last successful discovery is written to a single JSON document. An entry is
only trusted when both its configuration hash and its schema version match the
current request; anything else, including unreadable data, counts as a miss.
Caching never fails a discovery call: store errors are logged and dropped.
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from aicore_models._internal.exceptions import CacheError, CacheReadError, CacheWriteError
from aicore_models.config.schema import (
    CACHE_SCHEMA_VERSION,
    DEFAULT_CACHE_FILENAME,
    AICoreCredentials,
    DiscoverySettings,
)

from .types import DiscoveryOutcome, DiscoveryResult, ModelDeployment

logger = logging.getLogger(__name__)


class CacheStore(Protocol):
    """Key-value storage the model cache persists into."""

    def read(self, key: str) -> Optional[bytes]:
        """Return the stored bytes for ``key`` or ``None`` when absent."""

    def write(self, key: str, data: bytes) -> None:
        """Replace the value stored under ``key``."""


class DiskCacheStore:
    """Store each key as a file under :attr:`root`.

    Writes go through a temporary file and ``os.replace`` so readers see
    either the previous or the new document, never a partial one.
    """

    def __init__(self, root: Union[str, Path]) -> None:
        self._root = Path(root).expanduser()

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, key: str) -> Path:
        return self._root / key

    def read(self, key: str) -> Optional[bytes]:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise CacheReadError(f"Unable to read {path}: {exc}") from exc

    def write(self, key: str, data: bytes) -> None:
        path = self.path_for(key)
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=str(self._root), prefix=f"{key}-", suffix=".tmp")
        except OSError as exc:
            raise CacheWriteError(f"Unable to write {path}: {exc}") from exc

        tmp_path = Path(tmp_name)
        try:
            try:
                fh = os.fdopen(fd, "wb")
            except BaseException:
                os.close(fd)
                raise
            with fh:
                fh.write(data)
            os.replace(tmp_path, path)
        except OSError as exc:
            raise CacheWriteError(f"Unable to write {path}: {exc}") from exc
        finally:
            tmp_path.unlink(missing_ok=True)


class MemoryCacheStore:
    """In-process store, mostly useful for tests and short-lived sessions."""

    def __init__(self) -> None:
        self._data: Dict[str, bytes] = {}
        self._lock = threading.Lock()

    def read(self, key: str) -> Optional[bytes]:
        with self._lock:
            return self._data.get(key)

    def write(self, key: str, data: bytes) -> None:
        with self._lock:
            self._data[key] = bytes(data)


class CachedDeployment(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, protected_namespaces=())

    model_name: str = Field(alias="modelName")
    deployment_id: str = Field(alias="deploymentId")


class CacheEntry(BaseModel):
    """Persisted discovery result.

    Serialized with the camelCase keys ``modelNames``, ``orchestrationAvailable``,
    ``deployments``, ``configHash`` and ``schemaVersion``.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, protected_namespaces=())

    model_names: List[str] = Field(default_factory=list, alias="modelNames")
    orchestration_available: bool = Field(default=False, alias="orchestrationAvailable")
    deployments: List[CachedDeployment] = Field(default_factory=list)
    config_hash: str = Field(alias="configHash")
    schema_version: Optional[str] = Field(default=None, alias="schemaVersion")

    @classmethod
    def from_result(
        cls,
        result: DiscoveryResult,
        *,
        config_hash: str,
        schema_version: str = CACHE_SCHEMA_VERSION,
    ) -> "CacheEntry":
        return cls(
            model_names=list(result.model_names),
            orchestration_available=result.orchestration_available,
            deployments=[
                CachedDeployment(model_name=pair.model_name, deployment_id=pair.deployment_id)
                for pair in result.deployments
            ],
            config_hash=config_hash,
            schema_version=schema_version,
        )

    def to_result(self) -> DiscoveryResult:
        return DiscoveryResult(
            model_names=tuple(self.model_names),
            deployments=tuple(
                ModelDeployment(item.model_name, item.deployment_id) for item in self.deployments
            ),
            orchestration_available=self.orchestration_available,
            outcome=DiscoveryOutcome.RETURNED_CACHED,
        )

    def to_bytes(self) -> bytes:
        return self.model_dump_json(by_alias=True).encode("utf-8")


def compute_config_hash(credentials: AICoreCredentials) -> str:
    """Return a SHA-256 digest identifying the credentials a result belongs to.

    Every field that can change what the service returns is hashed, including
    the client secret and token URL, so rotating them invalidates the cache.
    Only the digest is ever persisted.
    """
    material = json.dumps(
        [
            credentials.client_id,
            credentials.client_secret,
            credentials.token_url,
            credentials.base_url,
            credentials.resource_group,
        ],
        separators=(",", ":"),
    )
    return hashlib.sha256(material.encode("utf-8")).hexdigest()


class ModelCache:
    """Read-through/write-through cache for the last successful discovery."""

    def __init__(
        self,
        store: CacheStore,
        *,
        key: str = DEFAULT_CACHE_FILENAME,
        schema_version: str = CACHE_SCHEMA_VERSION,
    ) -> None:
        self._store = store
        self._key = key
        self._schema_version = schema_version

    @classmethod
    def from_settings(cls, settings: DiscoverySettings) -> "ModelCache":
        return cls(
            DiskCacheStore(settings.cache_dir),
            key=settings.cache_filename,
            schema_version=settings.schema_version,
        )

    @property
    def key(self) -> str:
        return self._key

    @property
    def schema_version(self) -> str:
        return self._schema_version

    @property
    def store(self) -> CacheStore:
        return self._store

    def read(self, config_hash: str) -> Optional[CacheEntry]:
        """Return the entry for ``config_hash`` or ``None``; never raises."""
        try:
            raw = self._store.read(self._key)
        except (CacheError, OSError) as exc:
            logger.warning("Ignoring unreadable model cache %s: %s", self._key, exc)
            return None
        if raw is None:
            return None

        try:
            entry = CacheEntry.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning(
                "Ignoring malformed model cache %s (%d validation errors)",
                self._key,
                exc.error_count(),
            )
            return None

        if entry.config_hash != config_hash:
            logger.debug("Model cache belongs to different credentials; ignoring")
            return None
        if entry.schema_version != self._schema_version:
            logger.info(
                "Model cache schema %s does not match expected %s; ignoring",
                entry.schema_version,
                self._schema_version,
            )
            return None
        return entry

    def write(self, entry: CacheEntry) -> bool:
        """Persist ``entry`` over any previous one. Returns False if the write failed."""
        try:
            self._store.write(self._key, entry.to_bytes())
        except (CacheError, OSError) as exc:
            logger.warning("Failed to write model cache %s: %s", self._key, exc)
            return False
        logger.debug("Wrote %d models to cache %s", len(entry.model_names), self._key)
        return True

    def write_result(self, result: DiscoveryResult, config_hash: str) -> bool:
        entry = CacheEntry.from_result(
            result, config_hash=config_hash, schema_version=self._schema_version
        )
        return self.write(entry)


__all__ = [
    "CacheEntry",
    "CacheStore",
    "CachedDeployment",
    "DiskCacheStore",
    "MemoryCacheStore",
    "ModelCache",
    "compute_config_hash",
]
