"""PyQt6 backend: overlay window, text measurement, timers and screens."""
from __future__ import annotations

import logging
import math
from typing import Callable, List, Optional, Tuple

from PyQt6.QtCore import QPoint, QRectF, Qt, QTimer
from PyQt6.QtGui import (
    QColor,
    QFont,
    QFontDatabase,
    QGuiApplication,
    QMouseEvent,
    QPainter,
    QPainterPath,
    QPaintEvent,
    QPalette,
    QScreen,
    QTextDocument,
    QTextOption,
)
from PyQt6.QtWidgets import QApplication, QFrame, QTextEdit, QVBoxLayout, QWidget

from message_visualizer.errors import MissingContentSurfaceError
from message_visualizer.geometry import ResolvedFrame, ScreenDescriptor
from message_visualizer.presenter import OverlayFont, TextAlignment, TextColor, WindowConfig
from message_visualizer.window_metrics import WindowMetrics

_LOGGER_NAME = "MessageVisualizer.Client"
_CLIENT_LOGGER = logging.getLogger(_LOGGER_NAME)

_BACKGROUND_ALPHA = 215

_ALIGNMENT_FLAGS = {
    TextAlignment.LEFT: Qt.AlignmentFlag.AlignLeft,
    TextAlignment.CENTER: Qt.AlignmentFlag.AlignHCenter,
    TextAlignment.RIGHT: Qt.AlignmentFlag.AlignRight,
}


def overlay_text_option(alignment: TextAlignment = TextAlignment.CENTER) -> QTextOption:
    option = QTextOption(_ALIGNMENT_FLAGS.get(alignment, _ALIGNMENT_FLAGS[TextAlignment.CENTER]))
    # Tokens wider than the text box break mid-word instead of overflowing.
    option.setWrapMode(QTextOption.WrapMode.WrapAtWordBoundaryOrAnywhere)
    return option


def build_qfont(font: OverlayFont) -> QFont:
    if font.monospace:
        qfont = QFontDatabase.systemFont(QFontDatabase.SystemFont.FixedFont)
    else:
        qfont = QFontDatabase.systemFont(QFontDatabase.SystemFont.GeneralFont)
    qfont.setPointSizeF(max(1.0, float(font.point_size)))
    qfont.setWeight(QFont.Weight.Bold if font.bold else QFont.Weight.Normal)
    return qfont


def window_flags_for(config: WindowConfig) -> Qt.WindowType:
    flags = Qt.WindowType.Window
    if not config.title_bar:
        flags |= Qt.WindowType.FramelessWindowHint
    if config.floating:
        flags |= Qt.WindowType.WindowStaysOnTopHint
    if config.all_workspaces:
        flags |= Qt.WindowType.Tool
    if not config.activates:
        flags |= Qt.WindowType.WindowDoesNotAcceptFocus
    return flags


def _frame_from_rect(rect) -> ResolvedFrame:
    return ResolvedFrame(float(rect.x()), float(rect.y()), float(rect.width()), float(rect.height()))


def screen_descriptor(index: int, screen: QScreen) -> ScreenDescriptor:
    name = screen.name() or screen.manufacturer() or f"screen-{index}"
    return ScreenDescriptor(
        identifier=index,
        frame=_frame_from_rect(screen.geometry()),
        available=_frame_from_rect(screen.availableGeometry()),
        name=name,
    )


class OverlayWindow(QWidget):
    """Borderless, translucent, non-activating window holding a single label."""

    def __init__(self, config: WindowConfig, metrics: WindowMetrics) -> None:
        super().__init__()
        self._config = config
        self._drag_offset: Optional[QPoint] = None

        self.setWindowFlags(window_flags_for(config))
        if config.transparent_background:
            self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground, True)
            self.setAttribute(Qt.WidgetAttribute.WA_NoSystemBackground, True)
        if not config.activates:
            self.setAttribute(Qt.WidgetAttribute.WA_ShowWithoutActivating, True)
            self.setFocusPolicy(Qt.FocusPolicy.NoFocus)

        self.message_view = QTextEdit(self)
        self.message_view.setReadOnly(True)
        self.message_view.setFrameShape(QFrame.Shape.NoFrame)
        self.message_view.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.message_view.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.message_view.setTextInteractionFlags(Qt.TextInteractionFlag.NoTextInteraction)
        self.message_view.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        self.message_view.setLineWrapMode(QTextEdit.LineWrapMode.WidgetWidth)
        self.message_view.setMinimumSize(1, 1)
        self.message_view.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)
        self.message_view.viewport().setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)
        self.message_view.viewport().setAutoFillBackground(False)
        self.message_view.setStyleSheet("background: transparent;")
        self.message_view.document().setDocumentMargin(0.0)
        self._apply_text_option(TextAlignment.CENTER)

        layout = QVBoxLayout(self)
        horizontal = int(round(metrics.padding_horizontal))
        vertical = int(round(metrics.padding_vertical))
        layout.setContentsMargins(horizontal, vertical, horizontal, vertical)
        layout.setSpacing(0)
        layout.addWidget(self.message_view)
        if self.layout() is None:
            raise MissingContentSurfaceError("Overlay window did not accept a content layout")

    # OverlayPresenter -----------------------------------------------------

    def render(
        self,
        frame: ResolvedFrame,
        text: str,
        color: TextColor,
        alignment: TextAlignment,
        font: OverlayFont,
    ) -> None:
        qfont = build_qfont(font)
        self.message_view.setFont(qfont)
        self.message_view.document().setDefaultFont(qfont)
        self._apply_text_option(alignment)
        palette = self.message_view.palette()
        text_color = QColor(color) if color else self.palette().color(QPalette.ColorRole.WindowText)
        palette.setColor(QPalette.ColorRole.Text, text_color)
        palette.setColor(QPalette.ColorRole.Base, QColor(0, 0, 0, 0))
        self.message_view.setPalette(palette)
        self.message_view.setPlainText(text)
        self.setGeometry(*frame.rounded())

    def _apply_text_option(self, alignment: TextAlignment) -> None:
        option = overlay_text_option(alignment)
        self.message_view.document().setDefaultTextOption(option)
        self.message_view.setWordWrapMode(option.wrapMode())

    def bring_to_front(self) -> None:
        if not self.isVisible():
            self.show()
        self.raise_()

    # Qt events ------------------------------------------------------------

    def paintEvent(self, event: QPaintEvent) -> None:  # noqa: N802 - Qt override
        painter = QPainter(self)
        try:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
            background = QColor(self.palette().color(QPalette.ColorRole.Window))
            background.setAlpha(_BACKGROUND_ALPHA)
            path = QPainterPath()
            radius = float(self._config.corner_radius)
            path.addRoundedRect(QRectF(self.rect()), radius, radius)
            painter.fillPath(path, background)
        finally:
            painter.end()

    def mousePressEvent(self, event: QMouseEvent) -> None:  # noqa: N802 - Qt override
        if self._config.movable_by_background and event.button() == Qt.MouseButton.LeftButton:
            self._drag_offset = event.globalPosition().toPoint() - self.frameGeometry().topLeft()
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:  # noqa: N802 - Qt override
        if self._drag_offset is not None:
            self.move(event.globalPosition().toPoint() - self._drag_offset)
            event.accept()
            return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:  # noqa: N802 - Qt override
        if self._drag_offset is not None and event.button() == Qt.MouseButton.LeftButton:
            self._drag_offset = None
            event.accept()
            return
        super().mouseReleaseEvent(event)


class QtScheduler:
    """One single-shot QTimer per scheduled callback."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        self._parent = parent

    def after(self, delay_ms: int, callback: Callable[[], None]) -> QTimer:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        timer.timeout.connect(callback)
        timer.start(max(0, int(delay_ms)))
        return timer

    def cancel(self, handle: object) -> None:
        if isinstance(handle, QTimer):
            handle.stop()
            handle.deleteLater()


class QtHost:
    """PyQt6 implementation of the host toolkit capabilities."""

    def __init__(self, app: Optional[QGuiApplication] = None) -> None:
        instance = app if app is not None else QApplication.instance()
        if instance is None:
            raise MissingContentSurfaceError("No QApplication instance; cannot create overlay window")
        self._app = instance
        self._scheduler = QtScheduler()

    def create_window(self, config: WindowConfig, metrics: WindowMetrics) -> OverlayWindow:
        window = OverlayWindow(config, metrics)
        _CLIENT_LOGGER.debug(
            "Overlay window created: flags=%s padding=(%.1f, %.1f)",
            window.windowFlags(),
            metrics.padding_horizontal,
            metrics.padding_vertical,
        )
        return window

    def enumerate_screens(self) -> List[ScreenDescriptor]:
        return [screen_descriptor(index, screen) for index, screen in enumerate(QGuiApplication.screens())]

    def current_screen(self, window: object) -> Optional[ScreenDescriptor]:
        screens = QGuiApplication.screens()
        target: Optional[QScreen] = None
        if isinstance(window, QWidget):
            target = window.screen()
        if target is None:
            target = QGuiApplication.primaryScreen()
        if target is None:
            return None
        for index, screen in enumerate(screens):
            if screen is target or screen.name() == target.name():
                return screen_descriptor(index, screen)
        return screen_descriptor(0, target)

    def measure_text(self, text: str, font_size: float, max_width: float) -> Tuple[float, float]:
        document = QTextDocument()
        document.setDocumentMargin(0.0)
        document.setDefaultFont(build_qfont(OverlayFont(point_size=font_size)))
        document.setDefaultTextOption(overlay_text_option())
        document.setPlainText(text)
        document.setTextWidth(max_width)
        width = min(document.idealWidth(), max_width)
        height = document.size().height()
        return float(math.ceil(width)), float(math.ceil(height))

    def scheduler(self) -> QtScheduler:
        return self._scheduler

    def terminate(self) -> None:
        _CLIENT_LOGGER.info("Terminating overlay")
        self._app.quit()
