"""Shared fixtures for workcal tests."""

import json
import os
import time

import pytest

CALENDAR_READONLY = "https://www.googleapis.com/auth/calendar.readonly"


@pytest.fixture
def mock_credentials(tmp_path):
    """Create a mock client_secret.json file."""
    creds = {
        "installed": {
            "client_id": "test-client-id.apps.googleusercontent.com",
            "client_secret": "test-client-secret",
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
            "redirect_uris": ["http://localhost"],
        }
    }
    creds_path = tmp_path / "client_secret.json"
    with open(creds_path, "w") as f:
        json.dump(creds, f)
    return creds_path


@pytest.fixture
def mock_token(tmp_path):
    """Create a cached token file with the calendar read-only scope."""
    token = {
        "access_token": "test-access-token",
        "token_type": "Bearer",
        "refresh_token": "test-refresh-token",
        "expiry": "2099-01-01T00:00:00Z",
        "scope": CALENDAR_READONLY,
    }
    token_path = tmp_path / "token.json"
    with open(token_path, "w") as f:
        json.dump(token, f)
    return token_path


@pytest.fixture
def local_tz():
    """Switch the process time zone; restored after the test."""
    original = os.environ.get("TZ")

    def set_tz(name):
        os.environ["TZ"] = name
        time.tzset()

    yield set_tz

    if original is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = original
    time.tzset()
