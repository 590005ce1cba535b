"""CLI for workcal - print upcoming events from the Work calendar.

Usage:
    workcal                                # Events in the "Work" calendar
    workcal --calendar Personal            # Events in another calendar
    workcal --client-secret path/to.json   # Use another OAuth client file
    workcal --open-browser                 # Open the authorization URL on first run

The token cache defaults to ~/.credentials/calendar-quickstart.json and can
be moved with the CONF environment variable.
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from typing import TextIO

from workcal.calendar import CalendarClient, print_events, select_calendars
from workcal.config import CALENDAR_NAME, CLIENT_SECRET_FILE, UPDATED_LOOKBACK
from workcal.exceptions import WorkcalError
from workcal.google import GoogleOAuth, TokenCache

logger = logging.getLogger(__name__)


def setup_logging(level: int = logging.INFO) -> None:
    """Send log records to stderr so stdout only carries events."""
    fmt = "[%(levelname)s] %(name)s | %(message)s"
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))
    logging.basicConfig(level=level, handlers=[handler])


def list_work_events(
    client: CalendarClient,
    calendar_name: str = CALENDAR_NAME,
    now: datetime | None = None,
    stream: TextIO | None = None,
) -> int:
    """Print upcoming, recently updated events of the named calendar.

    Args:
        client: Calendar client.
        calendar_name: Exact display name of the calendar to print.
        now: Reference time. Defaults to the current local time.
        stream: Output stream. Defaults to stdout.

    Returns:
        Number of event lines printed.
    """
    now = now or datetime.now().astimezone()
    updated_min = now - UPDATED_LOOKBACK

    calendars = client.list_calendars()
    logger.debug(f"Fetched {len(calendars)} calendars")

    printed = 0
    for calendar in select_calendars(calendars, calendar_name):
        events = client.list_events(calendar.id, updated_min=updated_min, time_min=now)
        printed += print_events(events, stream=stream)
    return printed


def run(args: argparse.Namespace) -> int:
    """Authorize, fetch and print events."""
    auth = GoogleOAuth(credentials_path=args.client_secret, token_cache=TokenCache())
    auth.authorize(open_browser=args.open_browser)

    client = CalendarClient(auth)
    list_work_events(client, calendar_name=args.calendar)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workcal",
        description="Print upcoming events from a Google Calendar",
    )
    parser.add_argument(
        "--calendar",
        type=str,
        default=CALENDAR_NAME,
        help=f"Display name of the calendar to list (default: {CALENDAR_NAME})",
    )
    parser.add_argument(
        "--client-secret",
        type=str,
        default=CLIENT_SECRET_FILE,
        help=f"Path to OAuth client credentials (default: {CLIENT_SECRET_FILE})",
    )
    parser.add_argument(
        "--open-browser",
        action="store_true",
        help="Open the authorization URL in a browser",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(sys.argv[1:] if argv is None else argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        return run(args)
    except WorkcalError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
