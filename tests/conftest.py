"""Shared fixtures for calpipe tests."""

from typing import Callable, Iterable, Optional

import pytest

from calpipe.ics import Calendar, parse


def _event_lines(uid: Optional[str], summary: Optional[str] = None, extra: Iterable[str] = ()) -> list[str]:
    lines = ["BEGIN:VEVENT"]
    if uid is not None:
        lines.append(f"UID:{uid}")
    lines.append("DTSTAMP:20250101T000000Z")
    lines.append("DTSTART:20250102T090000Z")
    if summary is not None:
        lines.append(f"SUMMARY:{summary}")
    lines.extend(extra)
    lines.append("END:VEVENT")
    return lines


def _timezone_lines(tzid: str, offset: str = "+0100") -> list[str]:
    return [
        "BEGIN:VTIMEZONE",
        f"TZID:{tzid}",
        "BEGIN:STANDARD",
        "DTSTART:20001029T030000",
        f"TZOFFSETFROM:{offset}",
        f"TZOFFSETTO:{offset}",
        "END:STANDARD",
        "END:VTIMEZONE",
    ]


def _document(*components: Iterable[str], properties: Iterable[str] = ()) -> bytes:
    lines = ["BEGIN:VCALENDAR", "VERSION:2.0", "PRODID:-//test//calpipe//EN"]
    lines.extend(properties)
    for component in components:
        lines.extend(component)
    lines.append("END:VCALENDAR")
    return ("\r\n".join(lines) + "\r\n").encode("utf-8")


@pytest.fixture
def event_lines() -> Callable[..., list[str]]:
    return _event_lines


@pytest.fixture
def timezone_lines() -> Callable[..., list[str]]:
    return _timezone_lines


@pytest.fixture
def document() -> Callable[..., bytes]:
    return _document


@pytest.fixture
def calendar_of() -> Callable[..., Calendar]:
    """Build a parsed calendar from component line lists."""

    def build(*components: Iterable[str], properties: Iterable[str] = ()) -> Calendar:
        return parse(_document(*components, properties=properties))

    return build


@pytest.fixture
def events_calendar(calendar_of) -> Callable[..., Calendar]:
    """Build a calendar holding one event per UID, summarised as ``<uid>-<tag>``."""

    def build(uids: Iterable[str], tag: str = "a") -> Calendar:
        return calendar_of(*(_event_lines(uid, f"{uid}-{tag}") for uid in uids))

    return build
