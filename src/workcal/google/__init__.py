"""Google OAuth authentication and token caching."""

from workcal.google.exceptions import (
    AuthorizationError,
    ClientConfigError,
    CredentialsNotFoundError,
    GoogleAuthError,
    ScopeMismatchError,
    TokenCacheError,
    TokenCachePathError,
    TokenError,
)
from workcal.google.oauth import GoogleOAuth
from workcal.google.token_cache import TokenCache, resolve_path

__all__ = [
    "GoogleOAuth",
    "TokenCache",
    "resolve_path",
    "GoogleAuthError",
    "CredentialsNotFoundError",
    "ClientConfigError",
    "TokenError",
    "ScopeMismatchError",
    "AuthorizationError",
    "TokenCacheError",
    "TokenCachePathError",
]
