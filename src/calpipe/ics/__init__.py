"""iCalendar parsing, transformation and serialization."""

from .builder import build_calendar, parse
from .errors import (
    CalendarError,
    CalendarFileError,
    MalformedLine,
    MalformedProperty,
    MissingCalendar,
    MultipleTopLevel,
    OperatorError,
    ParseError,
    UnbalancedComponent,
    UnterminatedComponent,
    format_error_for_user,
)
from .model import Calendar, Component, ComponentKind, ContentLine, KnownKind, Parameter, UnknownKind, component_kind
from .operators import Cat, KeepProp, Limit, Operator, Pipeline, RemoveProp, SetProp, TzSubst, empty_calendar, run
from .parser import parse_content_line
from .reader import LogicalLine, unfold
from .serializer import encode_content_line, fold_line, iter_lines, serialize

__all__ = [
    "build_calendar",
    "parse",
    "serialize",
    "iter_lines",
    "fold_line",
    "encode_content_line",
    "parse_content_line",
    "unfold",
    "LogicalLine",
    "Calendar",
    "Component",
    "ComponentKind",
    "ContentLine",
    "KnownKind",
    "Parameter",
    "UnknownKind",
    "component_kind",
    "Operator",
    "Cat",
    "RemoveProp",
    "KeepProp",
    "SetProp",
    "TzSubst",
    "Limit",
    "Pipeline",
    "empty_calendar",
    "run",
    "CalendarError",
    "CalendarFileError",
    "ParseError",
    "MalformedLine",
    "MalformedProperty",
    "UnbalancedComponent",
    "UnterminatedComponent",
    "MultipleTopLevel",
    "MissingCalendar",
    "OperatorError",
    "format_error_for_user",
]
