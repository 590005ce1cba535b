"""Google Calendar API client and event formatting.

Usage:
    from workcal.calendar import CalendarClient, format_event, select_calendars

    client = CalendarClient(auth)
    for calendar in select_calendars(client.list_calendars(), "Work"):
        for event in client.list_events(calendar.id, updated_min, time_min):
            print(format_event(event))
"""

from __future__ import annotations

from workcal.calendar.client import Calendar, CalendarClient, Event, EventTime
from workcal.calendar.exceptions import CalendarAPIError
from workcal.calendar.formatting import format_event, print_events, select_calendars, time_conv

__all__ = [
    "CalendarClient",
    "Calendar",
    "Event",
    "EventTime",
    "CalendarAPIError",
    "format_event",
    "print_events",
    "select_calendars",
    "time_conv",
]
