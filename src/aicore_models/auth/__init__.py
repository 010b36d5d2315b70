"""OAuth client-credentials authentication against AI Core."""

from .token import AccessToken, TokenAuthenticator, get_token

__all__ = ["AccessToken", "TokenAuthenticator", "get_token"]
