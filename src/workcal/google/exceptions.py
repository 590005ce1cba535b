"""Google authentication exceptions."""

from workcal.exceptions import WorkcalError


class GoogleAuthError(WorkcalError):
    """Base exception for Google authentication errors."""

    pass


class CredentialsNotFoundError(GoogleAuthError):
    """Raised when OAuth client credentials file is not found."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"Unable to read client secret file: {path} not found. "
            "Please download OAuth credentials from Google Cloud Console."
        )


class ClientConfigError(GoogleAuthError):
    """Raised when the client credentials file cannot be parsed."""

    pass


class TokenError(GoogleAuthError):
    """Raised when there's an issue with the OAuth token."""

    pass


class ScopeMismatchError(TokenError):
    """Raised when token scopes don't match required scopes."""

    def __init__(self, missing_scopes: set[str]):
        self.missing_scopes = missing_scopes
        super().__init__(f"Token missing required scopes: {missing_scopes}")


class AuthorizationError(GoogleAuthError):
    """Raised when the interactive authorization exchange fails."""

    pass


class TokenCacheError(GoogleAuthError):
    """Raised when the token cache file cannot be written."""

    def __init__(self, path: str, reason: Exception):
        self.path = path
        self.reason = reason
        super().__init__(f"Unable to cache oauth token at {path}: {reason}")


class TokenCachePathError(GoogleAuthError):
    """Raised when the default token cache location cannot be prepared."""

    def __init__(self, reason: Exception):
        self.reason = reason
        super().__init__(f"Unable to get path to cached credential file: {reason}")
