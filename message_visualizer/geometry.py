"""Placement calculations for the overlay window (pure, no Qt types)."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from message_visualizer.crop_bounds import CropBounds
from message_visualizer.window_metrics import (
    CROP_VERTICAL_ANCHOR,
    DEFAULT_WINDOW_FRAME,
    HORIZONTAL_INSET,
    VERTICAL_INSET,
    WindowMetrics,
)

_LOGGER_NAME = "MessageVisualizer.Client"
_CLIENT_LOGGER = logging.getLogger(_LOGGER_NAME)


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class ResolvedFrame:
    """Window rectangle in screen coordinates (top-left origin)."""

    x: float
    y: float
    width: float
    height: float

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.width / 2.0, self.y + self.height / 2.0

    def rounded(self) -> Tuple[int, int, int, int]:
        return (
            int(round(self.x)),
            int(round(self.y)),
            max(1, int(round(self.width))),
            max(1, int(round(self.height))),
        )


DEFAULT_FRAME = ResolvedFrame(*DEFAULT_WINDOW_FRAME)


@dataclass(frozen=True)
class ScreenDescriptor:
    """A screen as reported by the host toolkit.

    ``frame`` is the full screen rectangle; ``available`` excludes panels and
    task bars and is what corner placement is measured against.
    """

    identifier: int
    frame: ResolvedFrame
    available: Optional[ResolvedFrame] = None
    name: str = ""

    @property
    def usable(self) -> ResolvedFrame:
        return self.available if self.available is not None else self.frame


def select_target_screen(
    screens: Sequence[ScreenDescriptor],
    display_index: Optional[int],
    current_screen: Optional[ScreenDescriptor],
) -> Optional[ScreenDescriptor]:
    if display_index is not None:
        for screen in screens:
            if screen.identifier == display_index:
                return screen
        _CLIENT_LOGGER.debug(
            "Display %s not found among %d screen(s); falling back to current screen (%s)",
            display_index,
            len(screens),
            current_screen.name or current_screen.identifier if current_screen is not None else "none",
        )
    return current_screen


def resolve_initial_frame(
    window_size: Size,
    screen_frame: ResolvedFrame,
    crop_bounds: Optional[CropBounds] = None,
) -> ResolvedFrame:
    width = window_size.width
    height = window_size.height
    if crop_bounds is not None:
        x = screen_frame.x + crop_bounds.x + (crop_bounds.width / 2.0) - (width / 2.0)
        y = screen_frame.y + crop_bounds.y + (crop_bounds.height * CROP_VERTICAL_ANCHOR) - (height / 2.0)
    else:
        x = screen_frame.x + (screen_frame.width - width) * HORIZONTAL_INSET
        y = screen_frame.y + (screen_frame.height - height) * VERTICAL_INSET
    return ResolvedFrame(x=x, y=y, width=width, height=height)


def padded_size(content: Size, metrics: WindowMetrics) -> Size:
    return Size(
        width=content.width + 2.0 * metrics.padding_horizontal,
        height=content.height + 2.0 * metrics.padding_vertical,
    )


def resolve_updated_frame(current_frame: ResolvedFrame, content_size: Size, padding: WindowMetrics) -> ResolvedFrame:
    """Resize around the current centre so the overlay grows in place."""
    target = padded_size(content_size, padding)
    center_x, center_y = current_frame.center
    return ResolvedFrame(
        x=center_x - target.width / 2.0,
        y=center_y - target.height / 2.0,
        width=target.width,
        height=target.height,
    )
