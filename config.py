#!/usr/bin/env python3
"""Configuration loading and path resolution for labcal."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from date_ranges import GRANULARITIES
from drag import DEFAULT_ACTIVATION_DISTANCE
from models import DEFAULT_FOLLOW_UP_HOURS
from paths import app_config_dir, app_data_dir, ensure_dir
from view_month import MONTH_PREVIEW_LIMIT

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILENAME = "tasks.parquet"
DEFAULT_LOG_FILENAME = "labcal.log"
CONFIG_FILENAME = "config.json"


@dataclass
class Config:
    data_parquet_path: Path
    log_path: Path
    log_level: str = "INFO"
    default_granularity: str = "week"
    follow_up_after_hours: float = DEFAULT_FOLLOW_UP_HOURS
    month_preview_limit: int = MONTH_PREVIEW_LIMIT
    drag_activation_distance: float = DEFAULT_ACTIVATION_DISTANCE
    config_error: Optional[str] = None


def config_path() -> Path:
    return app_config_dir() / CONFIG_FILENAME


def _read_raw(path: Path) -> tuple[Dict[str, Any], Optional[str]]:
    if not path.exists():
        return {}, None
    raw_text = path.read_text()
    try:
        raw = json.loads(raw_text)
    except json.JSONDecodeError:
        try:
            raw = json.loads(_strip_trailing_commas(raw_text))
        except json.JSONDecodeError as exc:
            return {}, f"Invalid config at {path}: {exc}"
    if not isinstance(raw, dict):
        return {}, f"Invalid config at {path}: expected an object"
    return raw, None


def _positive_number(raw: Dict[str, Any], key: str, default: float) -> float:
    value = raw.get(key)
    if value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning("Config key %s must be numeric; using %s", key, default)
        return default
    if number <= 0:
        logger.warning("Config key %s must be positive; using %s", key, default)
        return default
    return number


def load_config(path: Optional[Path] = None) -> Config:
    """Load config from the XDG path, falling back to defaults.

    Invalid JSON or a missing file falls back to defaults; the error message
    is kept on ``config_error`` for the UI to show.
    """
    path = path or config_path()
    raw, error = _read_raw(path.expanduser())

    data_path = Path(
        raw.get("data_parquet_path") or app_data_dir() / DEFAULT_DATA_FILENAME
    ).expanduser()
    log_path = Path(raw.get("log_path") or data_path.parent / DEFAULT_LOG_FILENAME).expanduser()

    granularity = str(raw.get("default_granularity") or "week").lower()
    if granularity not in GRANULARITIES:
        logger.warning("Unknown default_granularity %r; using week", granularity)
        granularity = "week"

    ensure_dir(data_path.parent)

    return Config(
        data_parquet_path=data_path,
        log_path=log_path,
        log_level=str(raw.get("log_level") or "INFO").upper(),
        default_granularity=granularity,
        follow_up_after_hours=_positive_number(
            raw, "follow_up_after_hours", DEFAULT_FOLLOW_UP_HOURS
        ),
        month_preview_limit=int(
            _positive_number(raw, "month_preview_limit", MONTH_PREVIEW_LIMIT)
        ),
        drag_activation_distance=_positive_number(
            raw, "drag_activation_distance", DEFAULT_ACTIVATION_DISTANCE
        ),
        config_error=error,
    )


def _strip_trailing_commas(text: str) -> str:
    """Remove trailing commas before closing braces/brackets."""
    return re.sub(r",(\s*[}\]])", r"\1", text)


__all__ = ["Config", "load_config", "config_path", "CONFIG_FILENAME"]
