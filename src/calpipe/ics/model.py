"""In-memory calendar model.

Every value here is immutable: operators build new components and reuse
the subtrees they leave untouched instead of editing an input in place.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterator, Optional, Union


class KnownKind(str, Enum):
    VCALENDAR = "VCALENDAR"
    VEVENT = "VEVENT"
    VTIMEZONE = "VTIMEZONE"
    STANDARD = "STANDARD"
    DAYLIGHT = "DAYLIGHT"
    VALARM = "VALARM"


@dataclass(frozen=True)
class UnknownKind:
    """A component kind outside the known set, kept exactly as spelled."""

    raw: str


ComponentKind = Union[KnownKind, UnknownKind]

_KNOWN_BY_NAME = {kind.value: kind for kind in KnownKind}


def component_kind(raw: str) -> ComponentKind:
    known = _KNOWN_BY_NAME.get(raw.upper())
    if known is not None:
        return known
    return UnknownKind(raw)


def kind_label(kind: ComponentKind) -> str:
    if isinstance(kind, KnownKind):
        return kind.value
    return kind.raw


def same_kind(left: ComponentKind, right: ComponentKind) -> bool:
    return kind_label(left).upper() == kind_label(right).upper()


@dataclass(frozen=True)
class Parameter:
    name: str
    values: tuple[str, ...] = ()

    def matches(self, name: str) -> bool:
        return self.name.upper() == name.upper()


@dataclass(frozen=True)
class ContentLine:
    """One property: ``NAME;PARAM=VALUE:VALUE``.

    ``value`` is the raw text after the separator, escapes included.
    """

    name: str
    params: tuple[Parameter, ...] = ()
    value: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Content line name must not be empty")

    def matches(self, name: str) -> bool:
        return self.name.upper() == name.upper()

    def param(self, name: str) -> Optional[tuple[str, ...]]:
        for parameter in self.params:
            if parameter.matches(name):
                return parameter.values
        return None

    def with_value(self, value: str) -> ContentLine:
        return replace(self, value=value)

    def with_params(self, params: tuple[Parameter, ...]) -> ContentLine:
        return replace(self, params=params)


@dataclass(frozen=True)
class Component:
    kind: ComponentKind
    properties: tuple[ContentLine, ...] = ()
    children: tuple[Component, ...] = ()

    @property
    def label(self) -> str:
        return kind_label(self.kind)

    def is_kind(self, kind: ComponentKind | str) -> bool:
        if isinstance(kind, str):
            kind = component_kind(kind)
        return same_kind(self.kind, kind)

    def get(self, name: str) -> Optional[ContentLine]:
        for prop in self.properties:
            if prop.matches(name):
                return prop
        return None

    def get_all(self, name: str) -> list[ContentLine]:
        return [prop for prop in self.properties if prop.matches(name)]

    def value(self, name: str) -> Optional[str]:
        prop = self.get(name)
        return prop.value if prop is not None else None

    @property
    def uid(self) -> Optional[str]:
        return self.value("UID")

    @property
    def tzid(self) -> Optional[str]:
        return self.value("TZID")

    def walk(self, kind: ComponentKind | str | None = None) -> Iterator[Component]:
        """Yield this component and its descendants depth-first, optionally by kind."""
        if kind is None or self.is_kind(kind):
            yield self
        for child in self.children:
            yield from child.walk(kind)

    def with_properties(self, properties: tuple[ContentLine, ...]) -> Component:
        return replace(self, properties=tuple(properties))

    def with_children(self, children: tuple[Component, ...]) -> Component:
        return replace(self, children=tuple(children))


@dataclass(frozen=True)
class Calendar:
    """One parsed document: the properties and children of its VCALENDAR."""

    properties: tuple[ContentLine, ...] = ()
    components: tuple[Component, ...] = ()

    @classmethod
    def from_component(cls, component: Component) -> Calendar:
        if not component.is_kind(KnownKind.VCALENDAR):
            raise ValueError(f"Expected a VCALENDAR component, got {component.label}")
        return cls(properties=component.properties, components=component.children)

    def to_component(self) -> Component:
        return Component(KnownKind.VCALENDAR, self.properties, self.components)

    def get(self, name: str) -> Optional[ContentLine]:
        return self.to_component().get(name)

    def value(self, name: str) -> Optional[str]:
        return self.to_component().value(name)

    def walk(self, kind: ComponentKind | str | None = None) -> Iterator[Component]:
        return self.to_component().walk(kind)

    def events(self) -> list[Component]:
        return [component for component in self.components if component.is_kind(KnownKind.VEVENT)]

    def timezones(self) -> list[Component]:
        return [component for component in self.components if component.is_kind(KnownKind.VTIMEZONE)]

    def with_properties(self, properties: tuple[ContentLine, ...]) -> Calendar:
        return replace(self, properties=tuple(properties))

    def with_components(self, components: tuple[Component, ...]) -> Calendar:
        return replace(self, components=tuple(components))
