"""Text measurement for the overlay content box."""
from __future__ import annotations

import math
from typing import Callable, Tuple

from message_visualizer.geometry import Size
from message_visualizer.window_metrics import MAX_TEXT_WIDTH

ContentSize = Size
MeasureFn = Callable[[str, float, float], Tuple[float, float]]

EMPTY_CONTENT = ContentSize(width=0.0, height=0.0)


def trim_text(text: str) -> str:
    return (text or "").strip()


def _coerce_dimension(value: object) -> float:
    try:
        numeric = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(numeric) or numeric < 0.0:
        return 0.0
    return numeric


class TextSizer:
    """Measures trimmed text wrapped to a fixed maximum width.

    ``measure_fn(text, font_size, max_width)`` is supplied by the host toolkit
    and must return the wrapped ``(width, height)`` of the text.
    """

    def __init__(self, measure_fn: MeasureFn, *, max_width: float = MAX_TEXT_WIDTH) -> None:
        self._measure_fn = measure_fn
        self._max_width = max(1.0, float(max_width))

    @property
    def max_width(self) -> float:
        return self._max_width

    def measure(self, text: str, font_size: float) -> ContentSize:
        string = trim_text(text)
        if not string:
            return EMPTY_CONTENT
        width, height = self._measure_fn(string, font_size, self._max_width)
        return ContentSize(
            width=min(_coerce_dimension(width), self._max_width),
            height=_coerce_dimension(height),
        )
