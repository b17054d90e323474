"""Error types for iCalendar parsing and transformation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class CalendarError(Exception):
    message: str
    code: str = "CALENDAR_ERROR"
    details: Any | None = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


class ParseError(CalendarError):
    """A document could not be turned into a calendar.

    Parse errors are fatal for their document; ``line`` is the 1-based
    physical line and ``offset`` the byte offset where the offending
    logical line starts.
    """

    def __init__(
        self,
        message: str,
        line: int | None = None,
        offset: int | None = None,
        code: str = "PARSE_ERROR",
    ) -> None:
        super().__init__(message, code=code, details={"line": line, "offset": offset})
        self.line = line
        self.offset = offset
        self.source: str | None = None

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"{self.message} (line {self.line}, byte {self.offset})"


class MalformedLine(ParseError):
    def __init__(self, message: str, line: int | None = None, offset: int | None = None) -> None:
        super().__init__(message, line=line, offset=offset, code="MALFORMED_LINE")


class MalformedProperty(ParseError):
    def __init__(self, message: str, line: int | None = None, offset: int | None = None) -> None:
        super().__init__(message, line=line, offset=offset, code="MALFORMED_PROPERTY")


class UnbalancedComponent(ParseError):
    def __init__(self, message: str, line: int | None = None, offset: int | None = None) -> None:
        super().__init__(message, line=line, offset=offset, code="UNBALANCED_COMPONENT")


class UnterminatedComponent(ParseError):
    def __init__(self, message: str, line: int | None = None, offset: int | None = None) -> None:
        super().__init__(message, line=line, offset=offset, code="UNTERMINATED_COMPONENT")


class MultipleTopLevel(ParseError):
    def __init__(self, message: str, line: int | None = None, offset: int | None = None) -> None:
        super().__init__(message, line=line, offset=offset, code="MULTIPLE_TOP_LEVEL")


class MissingCalendar(ParseError):
    def __init__(self, message: str, line: int | None = None, offset: int | None = None) -> None:
        super().__init__(message, line=line, offset=offset, code="MISSING_CALENDAR")


class OperatorError(CalendarError):
    def __init__(self, message: str, field: str | None = None, value: Any | None = None) -> None:
        super().__init__(message, code="OPERATOR_ERROR", details={"field": field, "value": value})
        self.field = field
        self.value = value


class CalendarFileError(CalendarError):
    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message, code="FILE_ERROR", details={"path": path})
        self.path = path


def format_error_for_user(error: Exception) -> str:
    if isinstance(error, ParseError):
        if error.source:
            return f"Parse Error: {error.source}: {error}"
        return f"Parse Error: {error}"
    if isinstance(error, OperatorError):
        return f"Invalid Arguments: {error.message}"
    if isinstance(error, CalendarFileError):
        if error.path:
            return f"File Error: {error.message}: {error.path}"
        return f"File Error: {error.message}"
    if isinstance(error, CalendarError):
        return f"Error: {error.message}"
    return f"Error: {str(error)}"
