"""Google Calendar API exceptions."""

from __future__ import annotations

from workcal.exceptions import WorkcalError


class CalendarAPIError(WorkcalError):
    """Raised when a Calendar API request fails."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
