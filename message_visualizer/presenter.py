"""Presenter interface between the lifecycle controller and the host window.

This module stays free of Qt types; ``qt_host`` provides the PyQt6
implementation.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Sequence, Tuple

from message_visualizer.clear_timer import Scheduler
from message_visualizer.geometry import ResolvedFrame, ScreenDescriptor
from message_visualizer.window_metrics import CORNER_RADIUS, WindowMetrics


class TextAlignment(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass(frozen=True)
class OverlayFont:
    point_size: float
    bold: bool = True
    monospace: bool = True


@dataclass(frozen=True)
class WindowConfig:
    """Window behaviour fixed at construction time."""

    title_bar: bool = False
    transparent_background: bool = True
    movable_by_background: bool = True
    floating: bool = True
    all_workspaces: bool = True
    activates: bool = False
    corner_radius: float = CORNER_RADIUS


OVERLAY_WINDOW_CONFIG = WindowConfig()

# None means "use the platform's text colour".
TextColor = Optional[str]


class OverlayPresenter(Protocol):
    def render(
        self,
        frame: ResolvedFrame,
        text: str,
        color: TextColor,
        alignment: TextAlignment,
        font: OverlayFont,
    ) -> None:
        ...

    def bring_to_front(self) -> None:
        ...

    def hide(self) -> None:
        ...


class HostToolkit(Protocol):
    """Capabilities the overlay needs from a UI backend."""

    def create_window(self, config: WindowConfig, metrics: WindowMetrics) -> OverlayPresenter:
        ...

    def enumerate_screens(self) -> Sequence[ScreenDescriptor]:
        ...

    def current_screen(self, window: OverlayPresenter) -> Optional[ScreenDescriptor]:
        ...

    def measure_text(self, text: str, font_size: float, max_width: float) -> Tuple[float, float]:
        ...

    def scheduler(self) -> Scheduler:
        ...

    def terminate(self) -> None:
        ...
