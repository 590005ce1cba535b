"""workcal - print upcoming events from a Google Calendar.

Usage:
    $ workcal
    Standup [2026/10/20 09:30 - 2026/10/20 09:45]
    Offsite [2026-10-22 - 2026-10-23]

The first run prints an authorization URL and waits for the code Google
shows after consent. The resulting token is cached (see ``workcal.config``)
so later runs go straight to the calendar.
"""

__version__ = "0.1.0"
