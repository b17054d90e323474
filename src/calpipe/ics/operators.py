"""Calendar operators.

Each operator is an immutable value with one method,
``transform(calendars) -> Calendar``. Operators never modify the calendars
they are given; they return a new calendar that reuses untouched parts.
Arguments are validated when the operator is constructed, so a bad
argument fails before any input is read.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Iterable, Optional, Protocol, Sequence

from .constants import ALWAYS_KEPT, CALENDAR_TIMEZONE_PROPERTY, CALSCALE, DISPLAY_PROPERTIES, ICAL_VERSION, PROD_ID, REQUIRED_PROPERTIES
from .errors import OperatorError
from .model import Calendar, Component, ComponentKind, ContentLine, KnownKind, kind_label, same_kind
from .validators import (
    validate_limit,
    validate_property_name,
    validate_property_names,
    validate_property_value,
    validate_scope,
    validate_tz_pairs,
)

logger = logging.getLogger(__name__)

PropertyEdit = Callable[[tuple[ContentLine, ...], ComponentKind], tuple[ContentLine, ...]]


class Operator(Protocol):
    def transform(self, calendars: Sequence[Calendar]) -> Calendar:
        ...


def empty_calendar(prod_id: str = PROD_ID) -> Calendar:
    return Calendar(
        properties=(
            ContentLine("VERSION", value=ICAL_VERSION),
            ContentLine("PRODID", value=prod_id),
            ContentLine("CALSCALE", value=CALSCALE),
        )
    )


def _single(calendars: Sequence[Calendar], operator: str) -> Calendar:
    if len(calendars) != 1:
        raise OperatorError(
            f"{operator} expects exactly one calendar, got {len(calendars)}",
            field="calendars",
            value=len(calendars),
        )
    return calendars[0]


def _edit_component(component: Component, scope: ComponentKind, edit: PropertyEdit) -> Component:
    properties = component.properties
    if same_kind(component.kind, scope):
        properties = edit(properties, component.kind)
    children = tuple(_edit_component(child, scope, edit) for child in component.children)
    return Component(component.kind, tuple(properties), children)


def _edit_scope(calendar: Calendar, scope: ComponentKind, edit: PropertyEdit) -> Calendar:
    if same_kind(scope, KnownKind.VCALENDAR):
        return calendar.with_properties(edit(calendar.properties, KnownKind.VCALENDAR))
    return calendar.with_components(tuple(_edit_component(component, scope, edit) for component in calendar.components))


def _scope_field(scope: ComponentKind | str | None) -> ComponentKind:
    if isinstance(scope, str) or scope is None:
        return validate_scope(scope)
    return scope


@dataclass(frozen=True)
class Cat:
    """Merge calendars, keeping the last occurrence of each event UID.

    Timezones sharing a TZID follow the same rule unless ``dedup_timezones``
    is off. Survivors keep the position of the occurrence that won, and
    calendar-level properties come from the first input.
    """

    dedup_timezones: bool = True
    prod_id: str = PROD_ID

    def _key(self, component: Component) -> Optional[tuple[str, str]]:
        if component.is_kind(KnownKind.VEVENT):
            uid = component.uid
            if uid:
                return (KnownKind.VEVENT.value, uid)
            logger.debug("Keeping event without UID as unique")
            return None
        if self.dedup_timezones and component.is_kind(KnownKind.VTIMEZONE):
            tzid = component.tzid
            if tzid:
                return (KnownKind.VTIMEZONE.value, tzid)
        return None

    def _properties(self, calendars: Sequence[Calendar]) -> tuple[ContentLine, ...]:
        first = calendars[0]
        properties = list(first.properties)
        for name in DISPLAY_PROPERTIES:
            if first.get(name) is not None:
                continue
            for calendar in calendars[1:]:
                prop = calendar.get(name)
                if prop is not None:
                    properties.append(prop)
                    break
        return tuple(properties)

    def transform(self, calendars: Sequence[Calendar]) -> Calendar:
        if not calendars:
            return empty_calendar(self.prod_id)

        slots: list[Optional[Component]] = []
        seen: dict[tuple[str, str], int] = {}
        for calendar in calendars:
            for component in calendar.components:
                key = self._key(component)
                if key is not None:
                    previous = seen.get(key)
                    if previous is not None:
                        logger.debug("Replacing %s %s with a later occurrence", key[0], key[1])
                        slots[previous] = None
                    seen[key] = len(slots)
                slots.append(component)

        components = tuple(component for component in slots if component is not None)
        logger.debug("Merged %d calendar(s) into %d component(s)", len(calendars), len(components))
        return Calendar(properties=self._properties(calendars), components=components)


@dataclass(frozen=True)
class RemoveProp:
    names: frozenset[str]
    scope: ComponentKind = KnownKind.VEVENT

    def __post_init__(self) -> None:
        object.__setattr__(self, "names", validate_property_names(self.names))
        object.__setattr__(self, "scope", _scope_field(self.scope))

    def _edit(self, properties: tuple[ContentLine, ...], kind: ComponentKind) -> tuple[ContentLine, ...]:
        return tuple(prop for prop in properties if prop.name.upper() not in self.names)

    def transform(self, calendars: Sequence[Calendar]) -> Calendar:
        return _edit_scope(_single(calendars, "remove-prop"), self.scope, self._edit)


@dataclass(frozen=True)
class KeepProp:
    """Drop every property not listed, except those a component needs to stay valid."""

    names: frozenset[str]
    scope: ComponentKind = KnownKind.VEVENT

    def __post_init__(self) -> None:
        object.__setattr__(self, "names", validate_property_names(self.names))
        object.__setattr__(self, "scope", _scope_field(self.scope))

    def _edit(self, properties: tuple[ContentLine, ...], kind: ComponentKind) -> tuple[ContentLine, ...]:
        keep = self.names | ALWAYS_KEPT | REQUIRED_PROPERTIES.get(kind_label(kind).upper(), frozenset())
        return tuple(prop for prop in properties if prop.name.upper() in keep)

    def transform(self, calendars: Sequence[Calendar]) -> Calendar:
        return _edit_scope(_single(calendars, "keep-prop"), self.scope, self._edit)


@dataclass(frozen=True)
class SetProp:
    """Overwrite the first ``name`` property (keeping its parameters) or append one."""

    name: str
    value: str
    scope: ComponentKind = KnownKind.VEVENT

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", validate_property_name(self.name))
        object.__setattr__(self, "value", validate_property_value(self.value))
        object.__setattr__(self, "scope", _scope_field(self.scope))

    def _edit(self, properties: tuple[ContentLine, ...], kind: ComponentKind) -> tuple[ContentLine, ...]:
        result: list[ContentLine] = []
        found = False
        for prop in properties:
            if not prop.matches(self.name):
                result.append(prop)
            elif not found:
                result.append(prop.with_value(self.value))
                found = True
        if not found:
            result.append(ContentLine(self.name, value=self.value))
        return tuple(result)

    def transform(self, calendars: Sequence[Calendar]) -> Calendar:
        return _edit_scope(_single(calendars, "set-prop"), self.scope, self._edit)


@dataclass(frozen=True)
class TzSubst:
    """Rename timezone identifiers.

    Only the identifier text changes: VTIMEZONE offsets and rules are left
    as they are, so the caller is responsible for the new name matching them.
    """

    pairs: tuple[tuple[str, str], ...]
    _mapping: dict[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        pairs = validate_tz_pairs(self.pairs)
        object.__setattr__(self, "pairs", pairs)
        object.__setattr__(self, "_mapping", dict(pairs))

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> TzSubst:
        return cls(tuple(pairs))

    def _rename(self, value: str) -> str:
        renamed = self._mapping.get(value, value)
        if renamed != value:
            logger.debug("Renaming timezone %s to %s", value, renamed)
        return renamed

    def _rename_params(self, prop: ContentLine) -> ContentLine:
        if prop.param("TZID") is None:
            return prop
        params = tuple(
            replace(parameter, values=tuple(self._rename(value) for value in parameter.values))
            if parameter.matches("TZID")
            else parameter
            for parameter in prop.params
        )
        return prop.with_params(params)

    def _rename_component(self, component: Component) -> Component:
        properties = []
        for prop in component.properties:
            prop = self._rename_params(prop)
            if component.is_kind(KnownKind.VTIMEZONE) and prop.matches("TZID"):
                prop = prop.with_value(self._rename(prop.value))
            properties.append(prop)
        children = tuple(self._rename_component(child) for child in component.children)
        return Component(component.kind, tuple(properties), children)

    def transform(self, calendars: Sequence[Calendar]) -> Calendar:
        calendar = _single(calendars, "tz-subst")
        properties = []
        for prop in calendar.properties:
            prop = self._rename_params(prop)
            if prop.matches(CALENDAR_TIMEZONE_PROPERTY):
                prop = prop.with_value(self._rename(prop.value))
            properties.append(prop)
        components = tuple(self._rename_component(component) for component in calendar.components)
        return Calendar(properties=tuple(properties), components=components)


@dataclass(frozen=True)
class Limit:
    count: int

    def __post_init__(self) -> None:
        validate_limit(self.count)

    def transform(self, calendars: Sequence[Calendar]) -> Calendar:
        calendar = _single(calendars, "limit")
        kept = 0
        components = []
        for component in calendar.components:
            if component.is_kind(KnownKind.VEVENT):
                if kept >= self.count:
                    continue
                kept += 1
            components.append(component)
        dropped = len(calendar.components) - len(components)
        if dropped:
            logger.debug("Dropped %d event(s) beyond limit %d", dropped, self.count)
        return calendar.with_components(tuple(components))


@dataclass(frozen=True)
class Pipeline:
    """Run stages in order: all inputs go to the first, each result to the next."""

    stages: tuple[Operator, ...] = ()

    def then(self, stage: Operator) -> Pipeline:
        return Pipeline(self.stages + (stage,))

    def transform(self, calendars: Sequence[Calendar]) -> Calendar:
        if not self.stages:
            return _single(calendars, "pipeline")
        current = list(calendars)
        for stage in self.stages:
            current = [stage.transform(current)]
        return current[0]


def run(operator: Operator, calendars: Iterable[Calendar]) -> Calendar:
    return operator.transform(list(calendars))
