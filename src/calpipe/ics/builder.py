"""Component tree builder and the ``parse`` entry point.

The reader and parser are pull-based, but merging needs to see every event
of a document at once, so ``build_calendar`` always materializes the full
tree before returning. Do not try to deduplicate an unbounded stream.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .errors import MissingCalendar, MalformedProperty, MultipleTopLevel, UnbalancedComponent, UnterminatedComponent
from .model import Calendar, Component, ComponentKind, ContentLine, KnownKind, component_kind, kind_label, same_kind
from .parser import parse_content_line
from .reader import LogicalLine, Source, unfold

logger = logging.getLogger(__name__)


@dataclass
class _Frame:
    kind: ComponentKind
    line: int
    offset: int
    properties: list[ContentLine] = field(default_factory=list)
    children: list[Component] = field(default_factory=list)

    def close(self) -> Component:
        return Component(self.kind, tuple(self.properties), tuple(self.children))


def _component_name(prop: ContentLine, logical: LogicalLine) -> str:
    name = prop.value.strip()
    if not name:
        raise MalformedProperty(
            f"{prop.name.upper()} without a component name",
            line=logical.line,
            offset=logical.offset,
        )
    return name


def build_calendar(lines: Iterable[LogicalLine]) -> Calendar:
    """Build the single VCALENDAR tree of one document from its logical lines."""
    stack: list[_Frame] = []
    root: Optional[Component] = None

    for logical in lines:
        prop = parse_content_line(logical.text, line=logical.line, offset=logical.offset)

        if prop.matches("BEGIN"):
            if not stack and root is not None:
                raise MultipleTopLevel(
                    "Document contains more than one top-level component",
                    line=logical.line,
                    offset=logical.offset,
                )
            kind = component_kind(_component_name(prop, logical))
            stack.append(_Frame(kind, logical.line, logical.offset))
            continue

        if prop.matches("END"):
            kind = component_kind(_component_name(prop, logical))
            if not stack:
                raise UnbalancedComponent(
                    f"END:{kind_label(kind)} without a matching BEGIN",
                    line=logical.line,
                    offset=logical.offset,
                )
            top = stack[-1]
            if not same_kind(top.kind, kind):
                raise UnbalancedComponent(
                    f"END:{kind_label(kind)} does not close BEGIN:{kind_label(top.kind)}",
                    line=logical.line,
                    offset=logical.offset,
                )
            stack.pop()
            component = top.close()
            if stack:
                stack[-1].children.append(component)
            else:
                root = component
            continue

        if not stack:
            raise UnbalancedComponent(
                f"Property {prop.name} outside of any component",
                line=logical.line,
                offset=logical.offset,
            )
        stack[-1].properties.append(prop)

    if stack:
        top = stack[-1]
        raise UnterminatedComponent(
            f"BEGIN:{kind_label(top.kind)} is never closed",
            line=top.line,
            offset=top.offset,
        )
    if root is None:
        raise MissingCalendar("Document contains no components")
    if not root.is_kind(KnownKind.VCALENDAR):
        raise MissingCalendar(f"Top-level component is {root.label}, expected VCALENDAR")

    calendar = Calendar.from_component(root)
    logger.debug(
        "Parsed calendar with %d properties and %d components",
        len(calendar.properties),
        len(calendar.components),
    )
    return calendar


def parse(source: Source) -> Calendar:
    """Parse one iCalendar document (bytes or a binary stream) into a Calendar."""
    return build_calendar(unfold(source))
