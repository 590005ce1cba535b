"""Google Calendar API client implementation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import httplib2
from googleapiclient.errors import HttpError

from workcal.calendar.exceptions import CalendarAPIError
from workcal.config import MAX_RESULTS
from workcal.google import GoogleOAuth


@dataclass
class Calendar:
    """Represents a Google Calendar."""

    id: str
    summary: str


@dataclass
class EventTime:
    """Start or end of an event, as returned by the API.

    Timed events carry an RFC3339 ``date_time``; all-day events carry
    only a ``date`` (YYYY-MM-DD).
    """

    date_time: str | None = None
    date: str | None = None


@dataclass
class Event:
    """Represents a Google Calendar event."""

    id: str
    summary: str
    start: EventTime = field(default_factory=EventTime)
    end: EventTime = field(default_factory=EventTime)
    status: str = "confirmed"

    @property
    def is_all_day(self) -> bool:
        """Check if event is all-day (no time component)."""
        return not self.start.date_time


class CalendarClient:
    """Read-only Google Calendar API client.

    Usage:
        client = CalendarClient(auth)

        for calendar in client.list_calendars():
            events = client.list_events(calendar.id, updated_min, time_min)

    Note:
        ``auth`` must already be authorized (see GoogleOAuth.authorize).
    """

    def __init__(
        self,
        auth: GoogleOAuth | None = None,
        service: Any = None,
    ) -> None:
        """Initialize Calendar client.

        Args:
            auth: Authorized GoogleOAuth used to build the service.
            service: Prebuilt Calendar API service; takes precedence over auth.
        """
        if auth is None and service is None:
            raise ValueError("CalendarClient needs an authorized GoogleOAuth or a service")
        self._auth = auth
        self._service = service

    def _get_service(self) -> Any:
        """Get or create Calendar API service."""
        if self._service is None:
            self._service = self._auth.build_service("calendar", "v3")
        return self._service

    def _execute(self, request: Any, what: str) -> dict:
        try:
            return request.execute()
        except HttpError as e:
            raise CalendarAPIError(
                f"Unable to retrieve {what}: {e}", status_code=e.resp.status
            ) from e
        except (OSError, httplib2.HttpLib2Error) as e:
            raise CalendarAPIError(f"Unable to retrieve {what}: {e}") from e

    # =========================================================================
    # Calendars
    # =========================================================================

    def list_calendars(self) -> list[Calendar]:
        """List the user's calendars (id and summary only).

        Raises:
            CalendarAPIError: If the request fails.
        """
        service = self._get_service()
        request = service.calendarList().list(fields="items(id,summary)")
        results = self._execute(request, "list of calendars")
        items = results.get("items", [])

        return [self._parse_calendar(item) for item in items]

    def _parse_calendar(self, data: dict) -> Calendar:
        """Parse calendar from API response."""
        return Calendar(id=data["id"], summary=data.get("summary", ""))

    # =========================================================================
    # Events
    # =========================================================================

    def list_events(
        self,
        calendar_id: str,
        updated_min: datetime | str,
        time_min: datetime | str,
        max_results: int = MAX_RESULTS,
    ) -> list[Event]:
        """List upcoming events in a calendar.

        Deleted events are included, recurring events are expanded into
        single instances and results are ordered by start time.

        Args:
            calendar_id: Calendar ID.
            updated_min: Only events modified at or after this instant.
            time_min: Only events ending after this instant.
            max_results: Maximum number of events to return.

        Returns:
            List of Event objects.

        Raises:
            CalendarAPIError: If the request fails.
        """
        service = self._get_service()
        request = service.events().list(
            calendarId=calendar_id,
            showDeleted=True,
            singleEvents=True,
            maxResults=max_results,
            updatedMin=self._format_datetime(updated_min),
            timeMin=self._format_datetime(time_min),
            orderBy="startTime",
        )
        results = self._execute(request, "calendar events list")
        items = results.get("items", [])

        return [self._parse_event(item) for item in items]

    def _format_datetime(self, dt: datetime | str) -> str:
        """Format datetime as RFC3339 for the API."""
        if isinstance(dt, str):
            return dt
        if dt.tzinfo is None:
            dt = dt.astimezone()
        return dt.isoformat(timespec="seconds")

    def _parse_event(self, data: dict) -> Event:
        """Parse event from API response."""
        start = data.get("start", {})
        end = data.get("end", {})
        return Event(
            id=data.get("id", ""),
            summary=data.get("summary", ""),
            start=EventTime(date_time=start.get("dateTime"), date=start.get("date")),
            end=EventTime(date_time=end.get("dateTime"), date=end.get("date")),
            status=data.get("status", "confirmed"),
        )
