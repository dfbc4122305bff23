"""Show / auto-clear / terminate state machine for the overlay."""
from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional, Sequence

from message_visualizer.clear_timer import ClearTimer
from message_visualizer.client_config import OverlayRequest
from message_visualizer.geometry import (
    DEFAULT_FRAME,
    ResolvedFrame,
    ScreenDescriptor,
    resolve_initial_frame,
    resolve_updated_frame,
    select_target_screen,
)
from message_visualizer.presenter import OverlayFont, OverlayPresenter, TextAlignment
from message_visualizer.text_sizer import TextSizer, trim_text
from message_visualizer.window_metrics import metrics_for

_LOGGER_NAME = "MessageVisualizer.Client"
_CLIENT_LOGGER = logging.getLogger(_LOGGER_NAME)


class OverlayState(str, Enum):
    HIDDEN = "hidden"
    VISIBLE = "visible"
    PENDING_CLEAR = "pending_clear"


class LifecycleController:
    """Owns the request, the displayed text, the frame and the clear timer.

    Every transition runs on the UI thread. The controller never talks to Qt
    directly; the presenter, screen lookups and termination hook are injected.
    """

    def __init__(
        self,
        request: OverlayRequest,
        *,
        presenter: OverlayPresenter,
        sizer: TextSizer,
        clear_timer: ClearTimer,
        screens_fn: Callable[[], Sequence[ScreenDescriptor]],
        current_screen_fn: Callable[[], Optional[ScreenDescriptor]],
        terminate_fn: Callable[[], None],
        initial_frame: ResolvedFrame = DEFAULT_FRAME,
    ) -> None:
        self._request = request
        self._presenter = presenter
        self._sizer = sizer
        self._clear_timer = clear_timer
        self._screens = screens_fn
        self._current_screen = current_screen_fn
        self._terminate = terminate_fn
        self._metrics = metrics_for(request.size_class)
        self._font = OverlayFont(point_size=self._metrics.font_size)
        self._frame = initial_frame
        self._text = ""
        self._state = OverlayState.HIDDEN
        self._launched = False

    @property
    def request(self) -> OverlayRequest:
        return self._request

    @property
    def state(self) -> OverlayState:
        return self._state

    @property
    def text(self) -> str:
        return self._text

    @property
    def frame(self) -> ResolvedFrame:
        return self._frame

    @property
    def deadline(self) -> Optional[float]:
        return self._clear_timer.deadline

    def did_finish_launching(self) -> None:
        if self._launched:
            _CLIENT_LOGGER.debug("did_finish_launching called again; ignoring")
            return
        self._launched = True
        self.update_text(self._request.text)
        self._apply_initial_placement()

    def update_text(self, untrimmed: str, only_meta: bool = False) -> None:
        string = trim_text(untrimmed)
        if not string:
            if not self._clear_timer.pending:
                self._presenter.hide()
                self._text = ""
                if self._state is not OverlayState.HIDDEN:
                    _CLIENT_LOGGER.debug("Overlay hidden")
                self._state = OverlayState.HIDDEN
            return

        if not only_meta:
            self._clear_timer.arm(self._request.delay, self._on_clear_timeout)

        content = self._sizer.measure(string, self._metrics.font_size)
        self._frame = resolve_updated_frame(self._frame, content, self._metrics)
        self._text = string
        self._render()
        self._presenter.bring_to_front()
        self._state = OverlayState.PENDING_CLEAR if self._clear_timer.pending else OverlayState.VISIBLE
        _CLIENT_LOGGER.debug(
            "Overlay text updated: state=%s only_meta=%s frame=%s",
            self._state.value,
            only_meta,
            self._frame.rounded(),
        )

    def refresh_metadata(self, untrimmed: str) -> None:
        """Re-render the text in place for an embedding caller, such as a live key readout.

        Key-combination requests keep the running deadline; plain requests rearm it.
        The command-line launcher never calls this.
        """
        self.update_text(untrimmed, only_meta=self._request.key_combinations_only)

    def _render(self) -> None:
        self._presenter.render(self._frame, self._text, None, TextAlignment.CENTER, self._font)

    def _apply_initial_placement(self) -> None:
        screen = select_target_screen(
            self._screens(),
            self._request.display_index,
            self._current_screen(),
        )
        if screen is None:
            _CLIENT_LOGGER.debug("No target screen resolved; keeping default placement %s", self._frame.rounded())
            return
        crop = self._request.crop_bounds
        screen_frame = screen.frame if crop is not None else screen.usable
        self._frame = resolve_initial_frame(self._frame.size, screen_frame, crop)
        _CLIENT_LOGGER.debug(
            "Initial placement on screen %s (%s): frame=%s crop=%s",
            screen.identifier,
            screen.name or "unnamed",
            self._frame.rounded(),
            crop.as_tuple() if crop is not None else None,
        )
        if self._state is not OverlayState.HIDDEN:
            self._render()

    def _on_clear_timeout(self) -> None:
        _CLIENT_LOGGER.debug("Auto-clear fired; clearing overlay and terminating")
        self.update_text("")
        self._terminate()
