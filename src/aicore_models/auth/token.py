"""Client-credentials token exchange.

A token is fetched once per discovery call and never persisted. There is no
retry at this layer; a failed exchange surfaces as :class:`AuthError`.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from aicore_models._internal.exceptions import AuthError
from aicore_models.config.schema import DiscoverySettings

logger = logging.getLogger(__name__)

TOKEN_PATH = "/oauth/token"

ClientFactory = Callable[[float | None], httpx.Client]


def _default_client_factory(timeout: float | None) -> httpx.Client:
    return httpx.Client(timeout=timeout)


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class AccessToken:
    """Bearer token returned by the authorization server."""

    value: str
    expires_at: int
    scope: str = ""
    token_type: str = "bearer"
    jti: str = ""

    def __repr__(self) -> str:
        return (
            f"AccessToken(expires_at={self.expires_at}, scope={self.scope!r}, "
            f"token_type={self.token_type!r})"
        )

    def is_expired(self, now_ms: int | None = None) -> bool:
        current = _now_ms() if now_ms is None else now_ms
        return current >= self.expires_at

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], *, issued_at_ms: int) -> "AccessToken":
        value = payload.get("access_token")
        if not isinstance(value, str) or not value:
            raise AuthError("Token response did not contain an access_token")
        raw_expires_in = payload.get("expires_in")
        try:
            expires_in = float(raw_expires_in or 0)
            if not math.isfinite(expires_in):
                raise ValueError(f"non-finite expires_in {raw_expires_in!r}")
            expires_in_ms = int(expires_in * 1000)
        except (TypeError, ValueError, OverflowError) as exc:
            raise AuthError(
                "Token response contained an invalid expires_in",
                context={"expires_in": raw_expires_in},
            ) from exc
        return cls(
            value=value,
            expires_at=issued_at_ms + expires_in_ms,
            scope=str(payload.get("scope") or ""),
            token_type=str(payload.get("token_type") or "bearer"),
            jti=str(payload.get("jti") or ""),
        )


def token_endpoint(token_url: str) -> str:
    """Return the OAuth token endpoint for ``token_url``."""
    return token_url.rstrip("/") + TOKEN_PATH


class TokenAuthenticator:
    """Exchange client credentials for a short-lived bearer token."""

    def __init__(
        self,
        settings: DiscoverySettings | None = None,
        *,
        client_factory: ClientFactory | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._settings = settings or DiscoverySettings()
        self._client_factory = client_factory or _default_client_factory
        self._clock = clock or _now_ms

    def authenticate(self, client_id: str, client_secret: str, token_url: str) -> AccessToken:
        """Run the client-credentials grant.

        Raises:
            AuthError: If the request fails, returns a non-2xx status or an
                unusable body.
        """
        url = token_endpoint(token_url)
        payload = {
            "grant_type": "client_credentials",
            "client_id": client_id,
            "client_secret": client_secret,
        }
        logger.debug("Requesting AI Core access token from %s", url)

        try:
            with self._client_factory(self._settings.timeout) as client:
                response = client.post(
                    url,
                    data=payload,
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                )
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPStatusError as exc:
            raise AuthError(
                "Token request was rejected",
                context={"url": url, "status": exc.response.status_code},
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise AuthError(f"Token request failed: {exc}", context={"url": url}) from exc
        except ValueError as exc:
            raise AuthError("Token response is not valid JSON", context={"url": url}) from exc

        if not isinstance(body, Mapping):
            raise AuthError("Token response must be a JSON object", context={"url": url})

        token = AccessToken.from_payload(body, issued_at_ms=self._clock())
        logger.debug("Obtained AI Core access token expiring at %s", token.expires_at)
        return token


def get_token(
    client_id: str,
    client_secret: str,
    token_url: str,
    *,
    settings: DiscoverySettings | None = None,
) -> AccessToken:
    """Convenience wrapper around a default :class:`TokenAuthenticator`."""
    return TokenAuthenticator(settings).authenticate(client_id, client_secret, token_url)


__all__ = ["AccessToken", "TOKEN_PATH", "TokenAuthenticator", "get_token", "token_endpoint"]
