"""Shared fakes for exercising the overlay without a Qt event loop."""
from __future__ import annotations

from typing import Callable, Dict, List, Optional, Tuple

from message_visualizer.geometry import ResolvedFrame, ScreenDescriptor
from message_visualizer.presenter import OverlayFont, TextAlignment


class ClockStub:
    def __init__(self, value: float = 0.0) -> None:
        self.value = value

    def now(self) -> float:
        return self.value


class AfterHarness:
    """Scheduler fake driven by a virtual clock."""

    def __init__(self, clock: ClockStub) -> None:
        self.clock = clock
        self.scheduled: List[Tuple[str, int, Callable[[], None]]] = []
        self.cancelled: List[object] = []
        self._due: Dict[str, float] = {}

    def after(self, delay_ms: int, callback: Callable[[], None]) -> str:
        handle = f"h{len(self.scheduled) + 1}"
        self.scheduled.append((handle, delay_ms, callback))
        self._due[handle] = self.clock.value + delay_ms / 1000.0
        return handle

    def cancel(self, handle: object) -> None:
        self.cancelled.append(handle)
        self._due.pop(str(handle), None)

    def live_handles(self) -> List[str]:
        return sorted(self._due)

    def due_at(self, handle: str) -> Optional[float]:
        return self._due.get(handle)

    def advance(self, seconds: float) -> List[str]:
        """Move the clock forward and fire every callback that came due."""
        target = self.clock.value + seconds
        fired: List[str] = []
        while True:
            ready = [(due, handle) for handle, due in self._due.items() if due <= target + 1e-9]
            if not ready:
                break
            due, handle = min(ready)
            self.clock.value = max(self.clock.value, due)
            del self._due[handle]
            callback = next(cb for h, _ms, cb in self.scheduled if h == handle)
            fired.append(handle)
            callback()
        self.clock.value = target
        return fired


class RecordingPresenter:
    def __init__(self) -> None:
        self.calls: List[Tuple[str, object]] = []
        self.visible = False
        self.frame: Optional[ResolvedFrame] = None
        self.text = ""

    def render(
        self,
        frame: ResolvedFrame,
        text: str,
        color: Optional[str],
        alignment: TextAlignment,
        font: OverlayFont,
    ) -> None:
        self.calls.append(("render", (frame, text, color, alignment, font)))
        self.frame = frame
        self.text = text

    def bring_to_front(self) -> None:
        self.calls.append(("front", None))
        self.visible = True

    def hide(self) -> None:
        self.calls.append(("hide", None))
        self.visible = False

    def names(self) -> List[str]:
        return [name for name, _payload in self.calls]


def fixed_measurer(width: float = 100.0, height: float = 30.0):
    calls: List[Tuple[str, float, float]] = []

    def measure(text: str, font_size: float, max_width: float) -> Tuple[float, float]:
        calls.append((text, font_size, max_width))
        return width, height

    measure.calls = calls  # type: ignore[attr-defined]
    return measure


def char_measurer(char_width: float = 10.0, line_height: float = 20.0):
    def measure(text: str, font_size: float, max_width: float) -> Tuple[float, float]:
        raw = len(text) * char_width
        lines = max(1, int(-(-raw // max_width)))
        return min(raw, max_width), lines * line_height

    return measure


def screen(identifier: int, x: float, y: float, width: float, height: float, name: str = "") -> ScreenDescriptor:
    return ScreenDescriptor(identifier=identifier, frame=ResolvedFrame(x, y, width, height), name=name)
