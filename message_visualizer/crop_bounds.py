"""Decoding of the crop-bounds payload passed on the command line."""
from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from message_visualizer.errors import CropBoundsDecodeError

_LOGGER_NAME = "MessageVisualizer.Client"
_CLIENT_LOGGER = logging.getLogger(_LOGGER_NAME)


@dataclass(frozen=True)
class CropBounds:
    """Region of interest, relative to the target screen's origin."""

    x: float
    y: float
    width: float
    height: float

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return self.x, self.y, self.width, self.height


def _number(value: Any, label: str) -> float:
    if isinstance(value, bool):
        raise CropBoundsDecodeError(f"{label} must be a number, got {value!r}")
    try:
        numeric = float(value)
    except (TypeError, ValueError) as exc:
        raise CropBoundsDecodeError(f"{label} must be a number, got {value!r}") from exc
    if not math.isfinite(numeric):
        raise CropBoundsDecodeError(f"{label} must be finite, got {value!r}")
    return numeric


def _pair(value: Any, label: str) -> Tuple[float, float]:
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return _number(value[0], f"{label}[0]"), _number(value[1], f"{label}[1]")
    raise CropBoundsDecodeError(f"{label} must be a two element array, got {value!r}")


def _rect_components(raw: Any) -> Tuple[float, float, float, float]:
    # Accepts {x,y,width,height}, {origin:{x,y}, size:{width,height}} and [[x,y],[w,h]].
    if isinstance(raw, Mapping):
        if "origin" in raw or "size" in raw:
            origin = raw.get("origin")
            size = raw.get("size")
            if isinstance(origin, Mapping) and isinstance(size, Mapping):
                return (
                    _number(origin.get("x"), "bounds.origin.x"),
                    _number(origin.get("y"), "bounds.origin.y"),
                    _number(size.get("width"), "bounds.size.width"),
                    _number(size.get("height"), "bounds.size.height"),
                )
            x, y = _pair(origin, "bounds.origin")
            width, height = _pair(size, "bounds.size")
            return x, y, width, height
        return (
            _number(raw.get("x"), "bounds.x"),
            _number(raw.get("y"), "bounds.y"),
            _number(raw.get("width"), "bounds.width"),
            _number(raw.get("height"), "bounds.height"),
        )
    if isinstance(raw, (list, tuple)) and len(raw) == 2:
        x, y = _pair(raw[0], "bounds[0]")
        width, height = _pair(raw[1], "bounds[1]")
        return x, y, width, height
    raise CropBoundsDecodeError(f"bounds has an unsupported shape: {raw!r}")


def parse_crop_bounds(payload: str) -> CropBounds:
    """Parse ``{"bounds": {...}}`` into a :class:`CropBounds`.

    Raises :class:`CropBoundsDecodeError` when the payload is not JSON, has no
    ``bounds`` key, or any component is missing or not a finite number. A
    negative width or height is folded into the origin so the rectangle is
    always stored with a positive size.
    """
    try:
        data = json.loads(payload)
    except (TypeError, json.JSONDecodeError) as exc:
        raise CropBoundsDecodeError(f"bounds payload is not valid JSON: {exc}") from exc
    if not isinstance(data, Mapping) or "bounds" not in data:
        raise CropBoundsDecodeError("bounds payload must be an object with a 'bounds' key")
    x, y, width, height = _rect_components(data["bounds"])
    if width < 0:
        x += width
        width = -width
    if height < 0:
        y += height
        height = -height
    return CropBounds(x=x, y=y, width=width, height=height)


def decode_crop_bounds(payload: Optional[str]) -> Optional[CropBounds]:
    """Decode the payload, degrading to ``None`` (no crop) on any failure."""
    if payload is None:
        return None
    try:
        bounds = parse_crop_bounds(payload)
    except CropBoundsDecodeError as exc:
        _CLIENT_LOGGER.warning("Ignoring crop bounds %r; using default placement (%s)", payload, exc)
        return None
    _CLIENT_LOGGER.debug("Decoded crop bounds: %s", bounds.as_tuple())
    return bounds
