"""Named constants for workcal.

Credential files:
    client_secret.json                          - OAuth client credentials (working directory)
    ~/.credentials/calendar-quickstart.json     - cached OAuth token

The token cache location can be overridden with the CONF environment variable.
"""

from datetime import timedelta

# OAuth client credentials, relative to the working directory
CLIENT_SECRET_FILE = "client_secret.json"

# Token cache location
TOKEN_CACHE_ENV = "CONF"
TOKEN_CACHE_DIR_NAME = ".credentials"
TOKEN_CACHE_NAME = "calendar-quickstart.json"

# If modifying the scopes, delete the cached token so the next run re-authorizes.
CALENDAR_SCOPES = ["calendar_readonly"]

# Event selection
CALENDAR_NAME = "Work"
UPDATED_LOOKBACK = timedelta(hours=24)
MAX_RESULTS = 100

# Output
DISPLAY_FORMAT = "%Y/%m/%d %H:%M"
