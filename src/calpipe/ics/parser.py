"""Property parser for unfolded iCalendar content lines."""

from __future__ import annotations

from typing import Optional

from .errors import MalformedProperty
from .model import ContentLine, Parameter

# RFC6868 caret escapes in parameter values.
_CARET_DECODE = {"^": "^", "n": "\n", "'": '"'}


def decode_param_value(value: str) -> str:
    if "^" not in value:
        return value
    out: list[str] = []
    index = 0
    while index < len(value):
        char = value[index]
        if char == "^" and index + 1 < len(value) and value[index + 1] in _CARET_DECODE:
            out.append(_CARET_DECODE[value[index + 1]])
            index += 2
            continue
        out.append(char)
        index += 1
    return "".join(out)


class _Cursor:
    def __init__(self, text: str, line: Optional[int], offset: Optional[int]) -> None:
        self.text = text
        self.pos = 0
        self.line = line
        self.offset = offset

    def error(self, message: str) -> MalformedProperty:
        return MalformedProperty(message, line=self.line, offset=self.offset)

    def peek(self) -> str:
        if self.pos >= len(self.text):
            return ""
        return self.text[self.pos]

    def take_until(self, stops: str) -> str:
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] not in stops:
            self.pos += 1
        return self.text[start:self.pos]


def _parse_param_values(cursor: _Cursor, name: str) -> tuple[str, ...]:
    values: list[str] = []
    while True:
        if cursor.peek() == '"':
            cursor.pos += 1
            raw = cursor.take_until('"')
            if cursor.peek() != '"':
                raise cursor.error(f"Unterminated quoted value for parameter {name}")
            cursor.pos += 1
            if cursor.peek() not in ("", ",", ";", ":"):
                raise cursor.error(f"Unexpected text after quoted value for parameter {name}")
        else:
            raw = cursor.take_until(',;:"')
            if cursor.peek() == '"':
                raise cursor.error(f"Stray quote in value for parameter {name}")
        values.append(decode_param_value(raw))
        if cursor.peek() != ",":
            return tuple(values)
        cursor.pos += 1


def parse_content_line(text: str, line: Optional[int] = None, offset: Optional[int] = None) -> ContentLine:
    """Split one logical line into name, parameters and raw value.

    ``:``, ``;`` and ``,`` inside double-quoted parameter values do not end
    the value. ``line``/``offset`` only feed error positions.
    """
    cursor = _Cursor(text, line, offset)
    name = cursor.take_until(";:")
    if not name:
        raise cursor.error("Content line has no property name")
    if not cursor.peek():
        raise cursor.error(f"Property {name} has no ':' separator")

    params: list[Parameter] = []
    while cursor.peek() == ";":
        cursor.pos += 1
        param_name = cursor.take_until('=;:"')
        if cursor.peek() != "=":
            raise cursor.error(f"Parameter {param_name or '(empty)'} of {name} lacks '='")
        if not param_name:
            raise cursor.error(f"Property {name} has a parameter without a name")
        cursor.pos += 1
        params.append(Parameter(param_name, _parse_param_values(cursor, param_name)))

    if cursor.peek() != ":":
        raise cursor.error(f"Property {name} has no ':' separator")
    value = text[cursor.pos + 1:]
    return ContentLine(name=name, params=tuple(params), value=value)
