from __future__ import annotations

import math

import pytest

from message_visualizer.crop_bounds import CropBounds
from message_visualizer.geometry import (
    ResolvedFrame,
    Size,
    padded_size,
    resolve_initial_frame,
    resolve_updated_frame,
    select_target_screen,
)
from message_visualizer.window_metrics import SizeClass, metrics_for

from harness import screen


def test_initial_frame_without_crop_uses_corner_insets() -> None:
    frame = resolve_initial_frame(Size(200.0, 100.0), ResolvedFrame(0.0, 0.0, 1000.0, 800.0))
    assert math.isclose(frame.x, 790.4)
    assert math.isclose(frame.y, 677.6)
    assert (frame.width, frame.height) == (200.0, 100.0)


def test_initial_frame_without_crop_offsets_by_screen_origin() -> None:
    frame = resolve_initial_frame(Size(200.0, 100.0), ResolvedFrame(1920.0, 0.0, 1000.0, 800.0))
    assert math.isclose(frame.x, 1920.0 + 790.4)
    assert math.isclose(frame.y, 677.6)


def test_initial_frame_with_crop_centres_horizontally_and_anchors_near_top() -> None:
    crop = CropBounds(100.0, 200.0, 400.0, 300.0)
    frame = resolve_initial_frame(Size(80.0, 40.0), ResolvedFrame(0.0, 0.0, 1000.0, 800.0), crop)
    assert math.isclose(frame.x, 100.0 + 200.0 - 40.0)
    assert math.isclose(frame.y, 200.0 + 45.0 - 20.0)
    crop_centre_x = crop.x + crop.width / 2.0
    assert math.isclose(frame.center[0], crop_centre_x)


def test_initial_frame_with_crop_is_relative_to_screen_origin() -> None:
    crop = CropBounds(0.0, 0.0, 100.0, 100.0)
    frame = resolve_initial_frame(Size(20.0, 10.0), ResolvedFrame(500.0, 300.0, 1000.0, 800.0), crop)
    assert math.isclose(frame.x, 500.0 + 50.0 - 10.0)
    assert math.isclose(frame.y, 300.0 + 15.0 - 5.0)


@pytest.mark.parametrize(
    "first, second",
    [
        (Size(100.0, 30.0), Size(400.0, 90.0)),
        (Size(0.0, 0.0), Size(500.0, 300.0)),
        (Size(37.5, 11.25), Size(12.0, 8.0)),
    ],
)
def test_updated_frames_share_centre(first, second) -> None:
    prior = ResolvedFrame(200.0, 200.0, 400.0, 200.0)
    metrics = metrics_for(SizeClass.NORMAL)
    a = resolve_updated_frame(prior, first, metrics)
    b = resolve_updated_frame(prior, second, metrics)
    assert a.center == pytest.approx(prior.center)
    assert b.center == pytest.approx(a.center)


def test_updated_frame_adds_padding_on_both_sides() -> None:
    metrics = metrics_for(SizeClass.LARGE)
    frame = resolve_updated_frame(ResolvedFrame(0.0, 0.0, 100.0, 100.0), Size(50.0, 20.0), metrics)
    assert frame.width == 50.0 + 40.0
    assert frame.height == 20.0 + 32.0
    assert padded_size(Size(50.0, 20.0), metrics) == Size(90.0, 52.0)


def test_select_target_screen_prefers_matching_identifier() -> None:
    screens = [screen(0, 0, 0, 1920, 1080), screen(1, 1920, 0, 1280, 1024)]
    current = screens[0]
    assert select_target_screen(screens, 1, current) is screens[1]


def test_select_target_screen_falls_back_to_current_on_miss() -> None:
    screens = [screen(0, 0, 0, 1920, 1080)]
    current = screens[0]
    assert select_target_screen(screens, 7, current) is current
    assert select_target_screen(screens, None, current) is current


def test_select_target_screen_returns_none_without_fallback() -> None:
    assert select_target_screen([], 3, None) is None
    assert select_target_screen([screen(0, 0, 0, 10, 10)], None, None) is None


def test_select_target_screen_takes_first_duplicate() -> None:
    first = screen(2, 0, 0, 100, 100, name="a")
    second = screen(2, 100, 0, 100, 100, name="b")
    assert select_target_screen([first, second], 2, None) is first


def test_rounded_frame_never_collapses() -> None:
    assert ResolvedFrame(10.4, 20.6, 0.2, 0.0).rounded() == (10, 21, 1, 1)
