"""Size presets and placement constants for the overlay window."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Tuple

# Placement tuning. Changing any of these moves the overlay on screen.
HORIZONTAL_INSET = 0.988
VERTICAL_INSET = 0.968
CROP_VERTICAL_ANCHOR = 0.15
MAX_TEXT_WIDTH = 500.0
DEFAULT_WINDOW_FRAME: Tuple[float, float, float, float] = (200.0, 200.0, 400.0, 200.0)
DEFAULT_DELAY_SECONDS = 1.5
CORNER_RADIUS = 10.0


class SizeClass(str, Enum):
    SMALL = "small"
    NORMAL = "normal"
    LARGE = "large"

    @classmethod
    def parse(cls, value: Any, default: "SizeClass | None" = None) -> "SizeClass":
        """Return the size class named by ``value``; unknown tokens fall back to ``default`` or NORMAL."""
        fallback = default if default is not None else cls.NORMAL
        if isinstance(value, cls):
            return value
        if value is None:
            return fallback
        try:
            token = str(value).strip().lower()
        except (TypeError, ValueError):
            return fallback
        try:
            return cls(token)
        except ValueError:
            return fallback


@dataclass(frozen=True)
class WindowMetrics:
    """Font size and padding applied around the measured text."""

    font_size: float
    padding_vertical: float
    padding_horizontal: float


_METRICS: Mapping[SizeClass, WindowMetrics] = MappingProxyType({
    SizeClass.SMALL: WindowMetrics(font_size=18.0, padding_vertical=10.0, padding_horizontal=12.0),
    SizeClass.NORMAL: WindowMetrics(font_size=22.0, padding_vertical=14.0, padding_horizontal=18.0),
    SizeClass.LARGE: WindowMetrics(font_size=26.0, padding_vertical=16.0, padding_horizontal=20.0),
})


def metrics_for(size_class: SizeClass) -> WindowMetrics:
    return _METRICS.get(size_class, _METRICS[SizeClass.NORMAL])
