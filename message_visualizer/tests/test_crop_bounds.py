from __future__ import annotations

import logging

import pytest

from message_visualizer.crop_bounds import CropBounds, decode_crop_bounds, parse_crop_bounds
from message_visualizer.errors import CropBoundsDecodeError


def test_decode_valid_payload() -> None:
    payload = '{"bounds":{"x":10,"y":20,"width":100,"height":50}}'
    assert decode_crop_bounds(payload) == CropBounds(10.0, 20.0, 100.0, 50.0)


def test_decode_invalid_json_degrades_to_none(caplog) -> None:
    logger = logging.getLogger("MessageVisualizer.Client")
    previous = logger.propagate
    logger.propagate = True
    try:
        with caplog.at_level(logging.WARNING, logger="MessageVisualizer.Client"):
            assert decode_crop_bounds("not json") is None
    finally:
        logger.propagate = previous
    assert any("Ignoring crop bounds" in record.getMessage() for record in caplog.records)


def test_decode_none_means_no_crop() -> None:
    assert decode_crop_bounds(None) is None


@pytest.mark.parametrize(
    "payload",
    [
        "",
        "[]",
        '{"rect":{"x":1,"y":2,"width":3,"height":4}}',
        '{"bounds":{"x":1,"y":2,"width":3}}',
        '{"bounds":{"x":"a","y":2,"width":3,"height":4}}',
        '{"bounds":{"x":true,"y":2,"width":3,"height":4}}',
        '{"bounds":{"x":1e999,"y":2,"width":3,"height":4}}',
        '{"bounds":[1,2,3,4]}',
        '{"bounds":null}',
    ],
)
def test_malformed_payloads_never_raise_from_decode(payload) -> None:
    assert decode_crop_bounds(payload) is None
    with pytest.raises(CropBoundsDecodeError):
        parse_crop_bounds(payload)


def test_parse_accepts_rect_coding_variants() -> None:
    expected = CropBounds(5.0, 6.0, 70.0, 80.0)
    assert parse_crop_bounds('{"bounds":[[5,6],[70,80]]}') == expected
    assert (
        parse_crop_bounds('{"bounds":{"origin":{"x":5,"y":6},"size":{"width":70,"height":80}}}') == expected
    )
    assert parse_crop_bounds('{"bounds":{"origin":[5,6],"size":[70,80]}}') == expected


def test_parse_standardises_negative_size() -> None:
    bounds = parse_crop_bounds('{"bounds":{"x":100,"y":100,"width":-40,"height":-20}}')
    assert bounds == CropBounds(60.0, 80.0, 40.0, 20.0)


def test_decode_error_is_a_value_error() -> None:
    assert issubclass(CropBoundsDecodeError, ValueError)
