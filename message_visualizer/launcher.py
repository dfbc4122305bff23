from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional

from PyQt6.QtCore import QTimer
from PyQt6.QtWidgets import QApplication

from message_visualizer.clear_timer import ClearTimer
from message_visualizer.client_config import (
    OverlayRequest,
    build_overlay_request,
    load_initial_settings,
    resolve_settings_path,
)
from message_visualizer.errors import MissingContentSurfaceError
from message_visualizer.lifecycle import LifecycleController, OverlayState
from message_visualizer.logging_utils import LOGGER_NAME, configure_client_logging, resolve_log_level_hint
from message_visualizer.presenter import OVERLAY_WINDOW_CONFIG, HostToolkit
from message_visualizer.qt_host import QtHost
from message_visualizer.text_sizer import TextSizer
from message_visualizer.window_metrics import SizeClass, metrics_for

_CLIENT_LOGGER = logging.getLogger(LOGGER_NAME)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="message-visualizer",
        description="Show a short-lived floating text overlay, then exit.",
    )
    parser.add_argument("text", help="Text to display")
    parser.add_argument(
        "-s",
        "--size",
        choices=[member.value for member in SizeClass],
        default=None,
        help="Font and padding preset (default: normal)",
    )
    parser.add_argument(
        "-k",
        "--key-combinations-only",
        action="store_true",
        help=(
            "Mark the text as a key-combination readout. Only embedding callers that "
            "refresh the text through refresh_metadata() keep the running deadline; "
            "a single command-line run is unaffected"
        ),
    )
    parser.add_argument("-d", "--delay", type=float, default=None, help="Seconds before the overlay clears (default: 1.5)")
    parser.add_argument("--display", type=int, default=None, help="Index of the screen to show the overlay on")
    parser.add_argument(
        "-b",
        "--bounds",
        default=None,
        help='Crop rectangle as JSON, e.g. \'{"bounds":{"x":10,"y":20,"width":100,"height":50}}\'',
    )
    parser.add_argument("--settings", default=None, help="Path to a settings JSON file")
    parser.add_argument("--log-level", default=None, help="Logger level name or number")
    return parser


def build_controller(request: OverlayRequest, host: HostToolkit) -> LifecycleController:
    metrics = metrics_for(request.size_class)
    window = host.create_window(OVERLAY_WINDOW_CONFIG, metrics)
    return LifecycleController(
        request,
        presenter=window,
        sizer=TextSizer(host.measure_text),
        clear_timer=ClearTimer(host.scheduler(), logger=_CLIENT_LOGGER.debug),
        screens_fn=host.enumerate_screens,
        current_screen_fn=lambda: host.current_screen(window),
        terminate_fn=host.terminate,
    )


def launch(controller: LifecycleController, host: HostToolkit) -> None:
    controller.did_finish_launching()
    if controller.state is OverlayState.HIDDEN:
        _CLIENT_LOGGER.info("Nothing to display after trimming; exiting")
        host.terminate()


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings_path = resolve_settings_path(args.settings)
    settings = load_initial_settings(settings_path)
    level, level_source = resolve_log_level_hint(args.log_level, settings.log_level)
    log_path = configure_client_logging(_CLIENT_LOGGER, retention=settings.log_retention, level=level)

    _CLIENT_LOGGER.info("Starting message visualizer (pid=%s)", os.getpid())
    _CLIENT_LOGGER.debug(
        "Loaded settings from %s: size=%s delay=%.2f retention=%d log_level=%s (source=%s) log_path=%s",
        settings_path,
        settings.default_size.value,
        settings.default_delay,
        settings.log_retention,
        logging.getLevelName(level),
        level_source,
        log_path,
    )

    request = build_overlay_request(
        args.text,
        settings=settings,
        size=args.size,
        key_combinations_only=args.key_combinations_only,
        delay=args.delay,
        display=args.display,
        bounds=args.bounds,
    )
    _CLIENT_LOGGER.debug(
        "Overlay request: size=%s delay=%.2f display=%s crop=%s key_combinations_only=%s",
        request.size_class.value,
        request.delay,
        request.display_index,
        request.crop_bounds.as_tuple() if request.crop_bounds is not None else None,
        request.key_combinations_only,
    )

    app = QApplication(sys.argv[:1])
    app.setQuitOnLastWindowClosed(False)
    try:
        host = QtHost(app)
        controller = build_controller(request, host)
    except MissingContentSurfaceError as exc:
        _CLIENT_LOGGER.critical("Cannot render overlay: %s", exc)
        return 1

    QTimer.singleShot(0, lambda: launch(controller, host))
    exit_code = app.exec()
    _CLIENT_LOGGER.info("Message visualizer exiting with code %s", exit_code)
    return int(exit_code)
