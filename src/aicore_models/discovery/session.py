"""Per-session memoization of discovery results.

The settings panel re-renders often; a :class:`DiscoverySession` is created
once per panel session so repeated renders with unchanged credentials reuse
the previous result instead of re-authenticating. Changing credentials, or
clearing them, drops the memoized result.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError

from aicore_models.config.schema import AICoreCredentials

from .service import CredentialsLike, ModelDiscoveryService, coerce_credentials
from .types import DiscoveryResult

logger = logging.getLogger(__name__)


def credentials_hash(credentials: AICoreCredentials) -> str:
    """Session key for ``credentials``: client id, base URL and resource group."""
    return f"{credentials.client_id}-{credentials.base_url}-{credentials.resource_group}"


@dataclass(frozen=True)
class _SessionEntry:
    credentials_hash: str
    result: DiscoveryResult


class SessionModelCache:
    """Holds at most one discovery result, keyed by :func:`credentials_hash`."""

    def __init__(self) -> None:
        self._entry: Optional[_SessionEntry] = None
        self._lock = threading.Lock()

    def get(self, credentials: AICoreCredentials) -> Optional[DiscoveryResult]:
        key = credentials_hash(credentials)
        with self._lock:
            if self._entry is not None and self._entry.credentials_hash == key:
                return self._entry.result
        return None

    def put(self, credentials: AICoreCredentials, result: DiscoveryResult) -> None:
        with self._lock:
            self._entry = _SessionEntry(credentials_hash(credentials), result)

    def invalidate(self) -> None:
        with self._lock:
            self._entry = None

    def __len__(self) -> int:
        return 0 if self._entry is None else 1


class DiscoverySession:
    """Discovery front end for one settings-panel session."""

    def __init__(
        self,
        service: ModelDiscoveryService,
        cache: Optional[SessionModelCache] = None,
    ) -> None:
        self.service = service
        self.cache = cache or SessionModelCache()

    def models(self, credentials: CredentialsLike) -> DiscoveryResult:
        """Return the session result for ``credentials``, discovering on a miss."""
        try:
            config = coerce_credentials(credentials)
        except ValidationError as exc:
            logger.error("Invalid AI Core discovery request: %s", exc)
            return DiscoveryResult.empty()

        if not config.has_required_credentials():
            self.cache.invalidate()
            return DiscoveryResult.empty()

        if not config.force_refresh:
            cached = self.cache.get(config)
            if cached is not None:
                logger.debug("Using session discovery result")
                return cached

        result = self.service.discover(config)
        self.cache.put(config, result)
        return result

    def refresh(self, credentials: CredentialsLike) -> DiscoveryResult:
        """Discover again, bypassing both the session and the persisted cache."""
        try:
            config = coerce_credentials(credentials)
        except ValidationError as exc:
            logger.error("Invalid AI Core discovery request: %s", exc)
            return DiscoveryResult.empty()
        return self.models(config.with_force_refresh(True))


__all__ = ["DiscoverySession", "SessionModelCache", "credentials_hash"]
