"""
Exception hierarchy for aicore_models.

Every error raised by the package derives from :class:`AICoreError`. Errors can
carry a diagnostic ``context`` mapping which is rendered into the message so it
shows up in log records without extra formatting at the call site.
"""

from typing import Any, Dict, Mapping, Optional


class AICoreError(Exception):
    """Base class for all custom exceptions in aicore_models."""

    def __init__(
        self, message: str = "An AI Core error occurred", *, context: Optional[Mapping[str, Any]] = None
    ) -> None:
        self.message = message
        self.context: Dict[str, Any] = dict(context or {})
        super().__init__(message)

    def add_context(self, **kwargs: Any) -> None:
        """Attach additional diagnostic metadata to the exception."""
        self.context.update(kwargs)

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value}" for key, value in sorted(self.context.items()))
        return f"{self.message} ({details})"


class ConfigError(AICoreError):
    """Raised when configuration cannot be loaded or validated."""


class ConfigIncompleteError(ConfigError):
    """Raised when a required credential field is missing."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(
            "AI Core configuration is incomplete", context={"missing": ",".join(missing)}
        )
        self.missing = list(missing)


class AuthError(AICoreError):
    """Raised when the client-credentials token exchange fails."""


class FetchError(AICoreError):
    """Raised when the deployment listing cannot be retrieved or parsed."""


class CacheError(AICoreError):
    """Base class for persisted cache failures."""


class CacheReadError(CacheError):
    """Raised by a cache store when persisted data cannot be read."""


class CacheWriteError(CacheError):
    """Raised by a cache store when data cannot be persisted."""


__all__ = [
    "AICoreError",
    "AuthError",
    "CacheError",
    "CacheReadError",
    "CacheWriteError",
    "ConfigError",
    "ConfigIncompleteError",
    "FetchError",
]
