"""Configuration helpers for the message visualizer."""
from __future__ import annotations

import json
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from message_visualizer.crop_bounds import CropBounds, decode_crop_bounds
from message_visualizer.window_metrics import DEFAULT_DELAY_SECONDS, SizeClass

PACKAGE_DIR = Path(__file__).resolve().parent
SETTINGS_ENV_VAR = "MESSAGE_VISUALIZER_SETTINGS"
SETTINGS_FILE_NAME = "message_visualizer_settings.json"
LOG_RETENTION_MIN = 1
LOG_RETENTION_MAX = 20


@dataclass
class InitialSettings:
    """Defaults read from the settings file before CLI values are applied."""

    default_size: SizeClass = SizeClass.NORMAL
    default_delay: float = DEFAULT_DELAY_SECONDS
    log_retention: int = 5
    log_level: Optional[str] = None


@dataclass(frozen=True)
class OverlayRequest:
    """Everything one invocation needs to show its message."""

    text: str
    size_class: SizeClass = SizeClass.NORMAL
    key_combinations_only: bool = False
    delay: float = DEFAULT_DELAY_SECONDS
    display_index: Optional[int] = None
    crop_bounds: Optional[CropBounds] = None


def coerce_delay(value: Any, fallback: float = DEFAULT_DELAY_SECONDS) -> float:
    if value is None or isinstance(value, bool):
        return fallback
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(numeric) or numeric <= 0.0:
        return fallback
    return numeric


def resolve_settings_path(cli_value: Optional[str]) -> Path:
    if cli_value:
        return Path(cli_value).expanduser().resolve()
    env_override = os.getenv(SETTINGS_ENV_VAR)
    if env_override:
        return Path(env_override).expanduser().resolve()
    return (PACKAGE_DIR.parent / SETTINGS_FILE_NAME).resolve()


def load_initial_settings(settings_path: Path) -> InitialSettings:
    """Read defaults from the settings file if it exists."""
    defaults = InitialSettings()
    try:
        raw = settings_path.read_text(encoding="utf-8")
    except (FileNotFoundError, OSError):
        return defaults

    try:
        data: Dict[str, Any] = json.loads(raw)
    except json.JSONDecodeError:
        return defaults
    if not isinstance(data, dict):
        return defaults

    size = SizeClass.parse(data.get("default_size"), defaults.default_size)
    delay = coerce_delay(data.get("default_delay"), defaults.default_delay)
    try:
        retention = int(data.get("log_retention", defaults.log_retention))
    except (TypeError, ValueError):
        retention = defaults.log_retention
    retention = max(LOG_RETENTION_MIN, min(retention, LOG_RETENTION_MAX))
    level_value = data.get("log_level")
    log_level: Optional[str] = None
    if level_value is not None and not isinstance(level_value, bool):
        text = str(level_value).strip()
        log_level = text or None

    return InitialSettings(
        default_size=size,
        default_delay=delay,
        log_retention=retention,
        log_level=log_level,
    )


def build_overlay_request(
    text: str,
    *,
    settings: Optional[InitialSettings] = None,
    size: Optional[str] = None,
    key_combinations_only: bool = False,
    delay: Optional[float] = None,
    display: Optional[int] = None,
    bounds: Optional[str] = None,
) -> OverlayRequest:
    """Merge CLI values over settings-file defaults."""
    base = settings or InitialSettings()
    return OverlayRequest(
        text=text,
        size_class=SizeClass.parse(size, base.default_size),
        key_combinations_only=bool(key_combinations_only),
        delay=coerce_delay(delay, base.default_delay),
        display_index=display,
        crop_bounds=decode_crop_bounds(bounds),
    )
