"""Exception types raised by the message visualizer."""
from __future__ import annotations


class MessageVisualizerError(Exception):
    """Base class for message visualizer failures."""


class CropBoundsDecodeError(MessageVisualizerError, ValueError):
    """The crop bounds payload could not be decoded into a rectangle."""


class MissingContentSurfaceError(MessageVisualizerError, RuntimeError):
    """The host toolkit could not provide a surface to render text into."""
