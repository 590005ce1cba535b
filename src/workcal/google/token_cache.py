"""On-disk cache for the Google OAuth token.

The token is stored as a JSON object:

    {
      "access_token": "...",
      "token_type": "Bearer",
      "refresh_token": "...",
      "expiry": "2026-10-19T10:15:00+00:00",
      "scope": "https://www.googleapis.com/auth/calendar.readonly"
    }

and handed to Authlib as a regular token dict with ``expires_at`` in epoch
seconds.
"""

from __future__ import annotations

import json
import logging
import math
import os
from collections.abc import Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from urllib.parse import quote_plus

from workcal.config import TOKEN_CACHE_DIR_NAME, TOKEN_CACHE_ENV, TOKEN_CACHE_NAME
from workcal.google.exceptions import TokenCacheError, TokenCachePathError, TokenError

logger = logging.getLogger(__name__)


def resolve_path(environ: Mapping[str, str] | None = None) -> Path:
    """Resolve the token cache file path.

    Args:
        environ: Environment to read the override from. Defaults to os.environ.

    Returns:
        The path from $CONF when set and non-empty, otherwise
        ~/.credentials/calendar-quickstart.json. The ~/.credentials
        directory is created (owner-only) if missing.

    Raises:
        TokenCachePathError: If the home directory cannot be resolved or
            the cache directory cannot be created.
    """
    environ = os.environ if environ is None else environ
    override = environ.get(TOKEN_CACHE_ENV, "")
    if override:
        return Path(override)

    try:
        cache_dir = Path.home() / TOKEN_CACHE_DIR_NAME
        cache_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
    except (OSError, RuntimeError) as e:
        raise TokenCachePathError(e) from e
    return cache_dir / quote_plus(TOKEN_CACHE_NAME)


def _expiry_to_timestamp(expiry: Any) -> float | None:
    if expiry is None or expiry == "":
        return None
    if isinstance(expiry, str):
        dt = datetime.fromisoformat(expiry.replace("Z", "+00:00"))
        if dt.tzinfo is None:
            # Offset-less expiries are UTC
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.timestamp()
    if isinstance(expiry, (int, float)) and not isinstance(expiry, bool) and math.isfinite(expiry):
        return float(expiry)
    raise TokenError(f"Invalid token expiry: {expiry!r}")


def _optional_str(data: dict, key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise TokenError(f"Invalid token {key}: {value!r}")
    return value


def _timestamp_to_expiry(expires_at: Any) -> str | None:
    if not expires_at:
        return None
    return datetime.fromtimestamp(float(expires_at), tz=timezone.utc).isoformat()


class TokenCache:
    """JSON token file with owner-only permissions.

    Example:
        >>> cache = TokenCache()
        >>> try:
        ...     token = cache.load()
        ... except (OSError, ValueError, TokenError):
        ...     token = obtain_new_token()
        ...     cache.save(token)
    """

    def __init__(self, path: str | Path | None = None):
        """Initialize the cache.

        Args:
            path: Cache file path. Defaults to resolve_path().
        """
        self.path = Path(path) if path else resolve_path()

    @property
    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> dict[str, Any]:
        """Load the cached token.

        Returns:
            Token dict in Authlib format.

        Raises:
            OSError: If the file cannot be opened or read.
            ValueError: If the file is not valid JSON or has a malformed expiry.
            TokenError: If the file holds no access token or a field of the
                wrong type.
        """
        with open(self.path) as f:
            data = json.load(f)

        if not isinstance(data, dict) or not data.get("access_token"):
            raise TokenError(f"No access token in {self.path}")

        token = {
            "access_token": _optional_str(data, "access_token"),
            "refresh_token": _optional_str(data, "refresh_token"),
            "token_type": _optional_str(data, "token_type") or "Bearer",
            "expires_at": _expiry_to_timestamp(data.get("expiry")),
            "scope": _optional_str(data, "scope") or "",
        }
        logger.info(f"Loaded cached token from {self.path}")
        return token

    def save(self, token: Mapping[str, Any]):
        """Write the token, replacing any previous contents.

        Raises:
            TokenCacheError: If the file cannot be created or written.
        """
        data = {
            "access_token": token["access_token"],
            "token_type": token.get("token_type", "Bearer"),
            "refresh_token": token.get("refresh_token"),
            "expiry": _timestamp_to_expiry(token.get("expires_at")),
            "scope": token.get("scope", ""),
        }

        logger.info(f"Saving credential file to: {self.path}")
        try:
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            raise TokenCacheError(str(self.path), e) from e
