from __future__ import annotations

import time
from typing import Callable, Optional, Protocol

LoggerFn = Callable[..., None]


class Scheduler(Protocol):
    """Event-loop hooks used to run a callback once after a delay."""

    def after(self, delay_ms: int, callback: Callable[[], None]) -> object:
        ...

    def cancel(self, handle: object) -> None:
        ...


def _noop_log(message: str, *args: object) -> None:
    return None


class ClearTimer:
    """Single outstanding one-shot timer.

    Arming always cancels the previous handle first, so at most one callback
    can be pending at any time.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        time_source: Callable[[], float] = time.monotonic,
        logger: Optional[LoggerFn] = None,
    ) -> None:
        self._scheduler = scheduler
        self._time = time_source
        self._logger = logger or _noop_log
        self._handle: Optional[object] = None
        self._deadline: Optional[float] = None
        self._callback: Optional[Callable[[], None]] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    def remaining(self) -> Optional[float]:
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._time())

    def arm(self, delay_seconds: float, callback: Callable[[], None]) -> object:
        self.cancel()
        delay_ms = max(0, int(round(delay_seconds * 1000)))
        self._callback = callback
        self._deadline = self._time() + delay_ms / 1000.0
        self._handle = self._scheduler.after(delay_ms, self._fire)
        self._log("Auto-clear armed: delay_ms=%d deadline=%.3f", delay_ms, self._deadline)
        return self._handle

    def cancel(self) -> None:
        handle = self._handle
        self._handle = None
        self._deadline = None
        self._callback = None
        if handle is None:
            return
        self._scheduler.cancel(handle)
        self._log("Auto-clear cancelled")

    def _fire(self) -> None:
        callback = self._callback
        self._handle = None
        self._deadline = None
        self._callback = None
        if callback is not None:
            callback()

    def _log(self, message: str, *args: object) -> None:
        try:
            self._logger(message, *args)
        except Exception:
            pass
