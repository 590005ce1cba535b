"""Google OAuth management using Authlib.

This module provides OAuth 2.0 authentication for the Calendar API with:
- Client credential loading (installed and web app formats)
- Cached token loading, with interactive authorization as the fallback
- Token refresh that overwrites the cache
- Google API service creation

The client credentials are read from client_secret.json in the working
directory; the token lives in the TokenCache (see workcal.config).
"""

from __future__ import annotations

import json
import logging
import webbrowser
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

import requests
from authlib.common.errors import AuthlibBaseError
from authlib.integrations.requests_client import OAuth2Session
from google.oauth2.credentials import Credentials as GoogleCredentials
from googleapiclient.discovery import build

from workcal.config import CALENDAR_SCOPES, CLIENT_SECRET_FILE
from workcal.google.exceptions import (
    AuthorizationError,
    ClientConfigError,
    CredentialsNotFoundError,
    ScopeMismatchError,
    TokenError,
)
from workcal.google.token_cache import TokenCache

logger = logging.getLogger(__name__)


# Google OAuth scopes used by workcal
SCOPES = {
    "calendar": "https://www.googleapis.com/auth/calendar",
    "calendar_readonly": "https://www.googleapis.com/auth/calendar.readonly",
}

DEFAULT_REDIRECT_URI = "http://localhost"


class GoogleOAuth:
    """Google OAuth management using Authlib.

    Handles the OAuth 2.0 authorization flow, token caching and Google API
    service creation.

    Example:
        >>> auth = GoogleOAuth()
        >>> auth.authorize()  # prompts for a code on first run
        >>> calendar_service = auth.build_service("calendar", "v3")
    """

    AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"

    def __init__(
        self,
        credentials_path: str | Path = CLIENT_SECRET_FILE,
        scopes: list[str] | None = None,
        token_cache: TokenCache | None = None,
    ):
        """Initialize Google OAuth.

        Args:
            credentials_path: Path to the OAuth client credentials file.
            scopes: List of scope names (e.g., ["calendar_readonly"]) or full URLs.
                   If None, defaults to config.CALENDAR_SCOPES.
            token_cache: Where tokens are loaded from and saved to.
                   Defaults to TokenCache() at the resolved cache path.

        Raises:
            CredentialsNotFoundError: If the credentials file does not exist.
            ClientConfigError: If the credentials file cannot be parsed.
        """
        self.credentials_path = Path(credentials_path)
        self.required_scopes = self._resolve_scopes(scopes or CALENDAR_SCOPES)
        self.client_id, self.client_secret, redirect_uri = self._load_client_credentials()
        self.token_cache = token_cache if token_cache is not None else TokenCache()

        self.session = OAuth2Session(
            client_id=self.client_id,
            client_secret=self.client_secret,
            scope=" ".join(self.required_scopes),
            redirect_uri=redirect_uri,
            update_token=self._save_token,
            token_endpoint=self.TOKEN_URL,
            token_endpoint_auth_method="client_secret_post",
        )

        self._state: str | None = None

    def _resolve_scopes(self, scopes: list[str]) -> list[str]:
        """Resolve scope names to full URLs."""
        resolved = []
        for scope in scopes:
            if scope.startswith("https://"):
                resolved.append(scope)
            elif scope in SCOPES:
                resolved.append(SCOPES[scope])
            else:
                raise ValueError(
                    f"Unknown scope: {scope}. Use full URL or one of: {list(SCOPES.keys())}"
                )
        return resolved

    def _load_client_credentials(self) -> tuple[str, str, str]:
        """Load OAuth client credentials from file."""
        if not self.credentials_path.exists():
            raise CredentialsNotFoundError(str(self.credentials_path))

        try:
            with open(self.credentials_path) as f:
                creds = json.load(f)
        except (OSError, ValueError) as e:
            raise ClientConfigError(f"Unable to read client secret file: {e}") from e

        # Handle both web and installed app credential formats
        if not isinstance(creds, dict):
            app_creds = None
        elif "installed" in creds:
            app_creds = creds["installed"]
        elif "web" in creds:
            app_creds = creds["web"]
        else:
            app_creds = None

        if not app_creds or "client_id" not in app_creds or "client_secret" not in app_creds:
            raise ClientConfigError(
                "Unable to parse client secret file to config: "
                "expected 'installed' or 'web' key with client_id and client_secret."
            )

        redirect_uris = app_creds.get("redirect_uris") or [DEFAULT_REDIRECT_URI]
        return app_creds["client_id"], app_creds["client_secret"], redirect_uris[0]

    def _check_scopes(self, token: dict[str, Any]):
        token_scopes = set((token.get("scope") or "").split())
        missing = set(self.required_scopes) - token_scopes
        if missing:
            raise ScopeMismatchError(missing)

    def _save_token(
        self,
        token: dict[str, Any],
        refresh_token: str | None = None,
        access_token: str | None = None,
    ):
        """Save token to the cache (Authlib callback)."""
        if access_token:
            token["access_token"] = access_token
        if refresh_token and not token.get("refresh_token"):
            token["refresh_token"] = refresh_token
        self.token_cache.save(token)

    # =========================================================================
    # Authorization
    # =========================================================================

    def is_authorized(self) -> bool:
        """Check if we have a token with the required scopes."""
        if not self.session.token:
            return False
        try:
            self._check_scopes(self.session.token)
        except ScopeMismatchError:
            return False
        return True

    def authorize(
        self,
        read_code: Callable[[], str] | None = None,
        open_browser: bool = False,
    ) -> dict[str, Any]:
        """Load the cached token or obtain a new one interactively.

        Any failure to use the cache (missing, unreadable, corrupt, missing
        scopes, expired without a refresh token) leads to a new authorization.
        The new token is saved and used directly; the cache is not re-read.

        Args:
            read_code: Reads the authorization code typed by the user.
            open_browser: Also open the authorization URL in a browser.

        Returns:
            The token now held by the session.

        Raises:
            AuthorizationError: If the interactive exchange fails.
            TokenCacheError: If the new token cannot be cached.
        """
        token = None
        if not self.token_cache.exists:
            logger.info(f"No cached token at {self.token_cache.path}")
        else:
            token = self._load_cached_token()

        if token is None:
            token = self.obtain_token_interactive(read_code=read_code, open_browser=open_browser)
            self.token_cache.save(token)

        self.session.token = token
        return token

    def _load_cached_token(self) -> dict[str, Any] | None:
        """Return the cached token, or None when it cannot be used."""
        try:
            token = self.token_cache.load()
            self._check_scopes(token)
            if self._is_expired(token) and not token.get("refresh_token"):
                raise TokenError("Cached token expired and has no refresh token")
        except (OSError, ValueError, TokenError) as e:
            logger.warning(f"Ignoring cached token at {self.token_cache.path}: {e}")
            return None
        return token

    def get_authorization_url(self) -> str:
        """Build the authorization URL for offline access.

        Returns:
            Authorization URL for user to visit.
        """
        authorization_url, state = self.session.create_authorization_url(
            self.AUTHORIZE_URL,
            access_type="offline",
            prompt="consent",
        )

        self._state = state
        return authorization_url

    def obtain_token_interactive(
        self,
        read_code: Callable[[], str] | None = None,
        open_browser: bool = False,
    ) -> dict[str, Any]:
        """Ask the user to authorize and exchange the code for a token.

        The user may paste either the bare authorization code or the full
        redirect URL containing it.

        Raises:
            AuthorizationError: If no code is read or the exchange fails.
        """
        read_code = read_code or input
        url = self.get_authorization_url()
        print(
            "Go to the following link in your browser then type the authorization code: "
            f"\n{url}"
        )
        if open_browser:
            webbrowser.open(url)

        try:
            code = read_code().strip()
        except EOFError as e:
            raise AuthorizationError("Unable to read authorization code") from e
        if not code:
            raise AuthorizationError("Unable to read authorization code: no code entered")

        return self.exchange_code(code)

    def exchange_code(self, code: str) -> dict[str, Any]:
        """Exchange an authorization code (or redirect URL) for a token.

        Raises:
            AuthorizationError: If the token endpoint rejects the request.
        """
        if code.startswith(("http://", "https://")):
            kwargs = {"authorization_response": code}
        else:
            kwargs = {"code": code}

        try:
            token = self.session.fetch_token(
                self.TOKEN_URL,
                grant_type="authorization_code",
                state=self._state,
                **kwargs,
            )
        except (AuthlibBaseError, requests.RequestException) as e:
            raise AuthorizationError(f"Unable to retrieve token from web: {e}") from e

        logger.info(f"Authorized with scopes: {token.get('scope', '')}")
        return dict(token)

    # =========================================================================
    # Credentials
    # =========================================================================

    @staticmethod
    def _is_expired(token: dict[str, Any]) -> bool:
        expires_at = token.get("expires_at")
        return bool(expires_at) and expires_at < datetime.now().timestamp()

    def get_credentials(self) -> GoogleCredentials:
        """Get Google Credentials object for API client libraries.

        Returns:
            Google Credentials object with current token.

        Raises:
            TokenError: If not authorized or token refresh fails.
        """
        if not self.is_authorized():
            raise TokenError("Not authorized or missing required scopes")

        if self._is_expired(self.session.token):
            logger.info("Token expired, refreshing...")
            try:
                self.session.refresh_token(
                    self.TOKEN_URL,
                    refresh_token=self.session.token.get("refresh_token"),
                )
            except (AuthlibBaseError, requests.RequestException) as e:
                raise TokenError(f"Failed to refresh token: {e}") from e

        return GoogleCredentials(
            token=self.session.token["access_token"],
            refresh_token=self.session.token.get("refresh_token"),
            token_uri=self.TOKEN_URL,
            client_id=self.client_id,
            client_secret=self.client_secret,
            scopes=self.required_scopes,
        )

    def build_service(self, service_name: str = "calendar", version: str = "v3"):
        """Build a Google API service with current credentials.

        Args:
            service_name: Name of the service.
            version: API version.

        Returns:
            Google API service object.
        """
        creds = self.get_credentials()
        return build(service_name, version, credentials=creds)
