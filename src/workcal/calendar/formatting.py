"""Event selection and display formatting."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from datetime import datetime
from typing import TextIO

from workcal.calendar.client import Calendar, Event
from workcal.config import CALENDAR_NAME, DISPLAY_FORMAT

logger = logging.getLogger(__name__)


def time_conv(value: str) -> str:
    """Convert an RFC3339 timestamp to local "YYYY/MM/DD HH:MM".

    Seconds and the UTC offset are dropped. A value that cannot be parsed
    is returned unchanged.
    """
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.warning(f"Unparseable event time: {value!r}")
        return value
    if dt.tzinfo is None:
        # RFC3339 always carries an offset; treat a bare time as already local
        return dt.strftime(DISPLAY_FORMAT)
    return dt.astimezone().strftime(DISPLAY_FORMAT)


def select_calendars(
    calendars: Iterable[Calendar], name: str = CALENDAR_NAME
) -> list[Calendar]:
    """Keep only calendars whose display name is exactly ``name``."""
    return [c for c in calendars if c.summary == name]


def format_event(event: Event) -> str:
    """Format an event as "<title> [<start> - <end>]".

    All-day events keep their bare YYYY-MM-DD dates.
    """
    if event.is_all_day:
        start = event.start.date or ""
        end = event.end.date or ""
    else:
        start = time_conv(event.start.date_time)
        end = time_conv(event.end.date_time) if event.end.date_time else ""
    return f"{event.summary} [{start} - {end}]"


def print_events(events: Iterable[Event], stream: TextIO | None = None) -> int:
    """Write one formatted line per event.

    Returns:
        Number of lines written.
    """
    stream = stream or sys.stdout
    count = 0
    for event in events:
        stream.write(format_event(event) + "\n")
        count += 1
    return count
