"""Serializer producing folded RFC5545 text."""

from __future__ import annotations

from typing import Iterator

from .constants import FOLD_LIMIT, LINE_BREAK
from .model import Calendar, Component, ContentLine, Parameter

_CARET_ENCODE = {"^": "^^", "\n": "^n", '"': "^'"}
_NEEDS_QUOTES = set(":;,")


def encode_param_value(value: str) -> str:
    encoded = "".join(_CARET_ENCODE.get(char, char) for char in value)
    if any(char in _NEEDS_QUOTES for char in encoded):
        return f'"{encoded}"'
    return encoded


def encode_parameter(parameter: Parameter) -> str:
    values = ",".join(encode_param_value(value) for value in parameter.values)
    return f"{parameter.name}={values}"


def encode_content_line(prop: ContentLine) -> str:
    params = "".join(f";{encode_parameter(parameter)}" for parameter in prop.params)
    return f"{prop.name}{params}:{prop.value}"


def fold_line(text: str, limit: int = FOLD_LIMIT) -> list[str]:
    """Split ``text`` into physical lines of at most ``limit`` octets.

    Continuation lines start with one space, which counts towards the limit.
    Splits only fall between characters, never inside a UTF-8 sequence.
    """
    if len(text.encode("utf-8")) <= limit:
        return [text]

    pieces: list[str] = []
    current: list[str] = []
    size = 0
    budget = limit
    for char in text:
        width = len(char.encode("utf-8"))
        if size + width > budget:
            pieces.append("".join(current))
            current = []
            size = 0
            budget = limit - 1
        current.append(char)
        size += width
    pieces.append("".join(current))
    return [pieces[0]] + [f" {piece}" for piece in pieces[1:]]


def _component_lines(component: Component) -> Iterator[str]:
    yield f"BEGIN:{component.label}"
    for prop in component.properties:
        yield encode_content_line(prop)
    for child in component.children:
        yield from _component_lines(child)
    yield f"END:{component.label}"


def iter_lines(calendar: Calendar) -> Iterator[str]:
    """Yield the folded physical lines of ``calendar`` without terminators."""
    for logical in _component_lines(calendar.to_component()):
        yield from fold_line(logical)


def serialize(calendar: Calendar) -> bytes:
    return "".join(f"{line}{LINE_BREAK}" for line in iter_lines(calendar)).encode("utf-8")


def escape_text(value: str) -> str:
    """Escape a plain string as an RFC5545 TEXT value."""
    return (
        value.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )
