"""Configuration loader for calpipe."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from .constants import DEFAULTS, PROD_ID


@dataclass(frozen=True)
class CalpipeConfig:
    prod_id: str
    log_level: int


def _resolve_log_level(value: str | None) -> int:
    name = (value or DEFAULTS["LOG_LEVEL"]).strip().upper()
    level = logging.getLevelName(name)
    if isinstance(level, int):
        return level
    return logging.WARNING


def load_config() -> CalpipeConfig:
    prod_id = os.getenv("CALPIPE_PRODID", "").strip() or PROD_ID
    return CalpipeConfig(
        prod_id=prod_id,
        log_level=_resolve_log_level(os.getenv("CALPIPE_LOG_LEVEL")),
    )
