"""Validation helpers for operator arguments."""

from __future__ import annotations

import re
from typing import Iterable, Optional

from .constants import DEFAULTS
from .errors import OperatorError
from .model import ComponentKind, component_kind

_NAME_RE = re.compile(r"^[A-Za-z0-9-]+$")


def validate_property_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise OperatorError("Property name is required", field="name")
    if not _NAME_RE.match(cleaned):
        raise OperatorError("Property names may only contain letters, digits and '-'", field="name", value=name)
    if cleaned.upper() in ("BEGIN", "END"):
        raise OperatorError("BEGIN and END are not properties", field="name", value=name)
    return cleaned


def validate_property_names(names: Iterable[str] | str) -> frozenset[str]:
    if isinstance(names, str):
        names = [names]
    validated = frozenset(validate_property_name(name).upper() for name in names)
    if not validated:
        raise OperatorError("At least one property name is required", field="names")
    return validated


def parse_name_list(value: str) -> frozenset[str]:
    return validate_property_names(part for part in value.split(",") if part.strip())


def validate_scope(scope: Optional[str]) -> ComponentKind:
    cleaned = (scope or DEFAULTS["SCOPE"]).strip()
    if not cleaned or not _NAME_RE.match(cleaned):
        raise OperatorError("Scope must be a component name such as VEVENT", field="scope", value=scope)
    return component_kind(cleaned)


def validate_property_value(value: str) -> str:
    if value is None:
        raise OperatorError("Property value is required", field="value")
    if "\r" in value or "\n" in value:
        raise OperatorError("Property value must not contain line breaks", field="value", value=value)
    return value


def validate_limit(count: int) -> int:
    if isinstance(count, bool) or not isinstance(count, int):
        raise OperatorError("Limit must be an integer", field="count", value=count)
    if count < 0:
        raise OperatorError("Limit must be >= 0", field="count", value=count)
    return count


def validate_tzid(value: str, field: str) -> str:
    if not value:
        raise OperatorError("Timezone identifier must not be empty", field=field, value=value)
    if "\r" in value or "\n" in value:
        raise OperatorError("Timezone identifier must not contain line breaks", field=field, value=value)
    return value


def validate_tz_pairs(pairs: Iterable[tuple[str, str]]) -> tuple[tuple[str, str], ...]:
    mapping: dict[str, str] = {}
    ordered: list[tuple[str, str]] = []
    for old, new in pairs:
        old = validate_tzid(old, "old")
        new = validate_tzid(new, "new")
        if old in mapping:
            if mapping[old] != new:
                raise OperatorError(f"Conflicting substitutions for timezone {old}", field="old", value=old)
            continue
        mapping[old] = new
        ordered.append((old, new))
    if not ordered:
        raise OperatorError("At least one timezone substitution is required", field="pairs")
    return tuple(ordered)


def parse_tz_pair(value: str) -> tuple[str, str]:
    old, sep, new = value.partition("=")
    if not sep:
        raise OperatorError("Timezone pairs must look like OLD=NEW", field="pair", value=value)
    return validate_tzid(old, "old"), validate_tzid(new, "new")
