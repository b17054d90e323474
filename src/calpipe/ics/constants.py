"""Constants for the iCalendar pipeline."""

from __future__ import annotations

PROD_ID = "-//calpipe//calpipe//EN"
ICAL_VERSION = "2.0"
CALSCALE = "GREGORIAN"

# RFC5545 3.1: lines SHOULD NOT be longer than 75 octets, excluding the line break.
FOLD_LIMIT = 75
LINE_BREAK = "\r\n"

DEFAULTS = {
    "SCOPE": "VEVENT",
    "LOG_LEVEL": "WARNING",
}

# Never dropped by keep-prop, whatever the scope.
ALWAYS_KEPT = frozenset({"UID", "DTSTAMP", "DTSTART"})

REQUIRED_PROPERTIES = {
    "VCALENDAR": frozenset({"VERSION", "PRODID"}),
    "VTIMEZONE": frozenset({"TZID"}),
    "STANDARD": frozenset({"TZOFFSETFROM", "TZOFFSETTO"}),
    "DAYLIGHT": frozenset({"TZOFFSETFROM", "TZOFFSETTO"}),
    "VALARM": frozenset({"ACTION", "TRIGGER"}),
}

# Calendar display properties filled from later inputs when the first lacks them.
DISPLAY_PROPERTIES = ("X-WR-CALNAME", "X-WR-CALDESC", "X-WR-TIMEZONE")

CALENDAR_NAME_PROPERTY = "X-WR-CALNAME"
CALENDAR_DESCRIPTION_PROPERTY = "X-WR-CALDESC"
CALENDAR_TIMEZONE_PROPERTY = "X-WR-TIMEZONE"
