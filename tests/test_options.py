import logging

import numpy as np
import pytest

from factchart.model.geometry_primitives import Vector
from factchart.shapes.colors import BLACK, darken, lerp_colors, parse_color
from factchart.shapes.options import (
    DiskOptions, HyperboloidOptions, LineOptions, LineType, SphereOptions,
    build_options, sniff_vectors, vector_fields
)


@pytest.mark.parametrize("value, expected", [
    (0xFF0000, (1.0, 0.0, 0.0)),
    ("0x00ff00", (0.0, 1.0, 0.0)),
    ("#0000ff", (0.0, 0.0, 1.0)),
    ("red", (1.0, 0.0, 0.0)),
    ([0.0, 0.5, 1.0], (0.0, 0.5, 1.0)),
    ([255, 0, 0], (1.0, 0.0, 0.0)),
])
def test_parse_color_accepts(value, expected):
    assert parse_color(value) == pytest.approx(expected)


@pytest.mark.parametrize("value", ["notacolor", None, True, -1, 0x1000000, [1, 2], {}, [0, -5, 0]])
def test_parse_color_rejects(value):
    assert parse_color(value) is None


def test_darken_and_ramp():
    assert darken((1.0, 0.5, 0.0), 0.5) == pytest.approx((0.5, 0.25, 0.0))
    ramp = lerp_colors((1.0, 1.0, 1.0), (0.0, 0.0, 0.0), 3)
    np.testing.assert_allclose(ramp, [[1, 1, 1], [0.5, 0.5, 0.5], [0, 0, 0]])


def test_defaults_when_options_missing():
    for raw in (None, {}, "garbage"):
        opts = build_options(DiskOptions, raw)
        assert opts.radius == 1.0
        assert opts.line_count == 12
        assert opts.line_type == LineType.LINE
        assert opts.color == BLACK
        assert opts.normal is None


def test_camel_case_and_snake_case_keys():
    assert build_options(DiskOptions, {"lineCount": 5}).line_count == 5
    assert build_options(DiskOptions, {"line_count": 7}).line_count == 7
    assert build_options(HyperboloidOptions, {"radiusX": 2, "twistAngle": -0.5}).radius_x == 2.0


def test_vector_fields_become_vectors():
    opts = build_options(LineOptions, {"start": [1, 2, 3], "end": [4, 5, 6]})
    assert opts.start == Vector(1.0, 2.0, 3.0)
    assert opts.end == Vector(4.0, 5.0, 6.0)
    assert set(vector_fields(LineOptions)) == {"start", "end"}


def test_color_triple_is_not_a_vector():
    opts = build_options(LineOptions, {"color": [1, 0, 0]})
    assert opts.color == (1.0, 0.0, 0.0)
    assert not isinstance(opts.color, Vector)


def test_zero_normal_means_no_reorientation():
    assert build_options(DiskOptions, {"normal": [0, 0, 0]}).normal is None
    assert build_options(DiskOptions, {"normal": [0, 1, 0]}).normal == Vector(0.0, 1.0, 0.0)


def test_invalid_values_fall_back_to_defaults(caplog):
    caplog.set_level(logging.DEBUG, logger="factchart.shapes.options")
    opts = build_options(SphereOptions, {
        "radius": "big",
        "lineCount": -3,
        "lineType": "spiral",
        "mirrored": "yes",
        "color": "notacolor",
    })
    assert opts == SphereOptions()
    assert "invalid value" in caplog.text


def test_existing_instance_is_passed_through():
    opts = DiskOptions(radius=3.0)
    assert build_options(DiskOptions, opts) is opts


def test_sniff_converts_top_level_triples_only():
    raw = {"anchor": [1, 2, 3], "pair": [1, 2], "flags": [True, False, True], "nested": {"p": [1, 2, 3]}}
    converted = sniff_vectors(raw)
    assert converted["anchor"] == Vector(1.0, 2.0, 3.0)
    assert converted["pair"] == [1, 2]
    assert converted["flags"] == [True, False, True]
    assert converted["nested"] == {"p": [1, 2, 3]}
    assert sniff_vectors(None) == {}


@pytest.mark.parametrize("value", [10 ** 400, float("inf"), float("nan")])
def test_non_finite_numbers_keep_defaults(value):
    opts = build_options(DiskOptions, {"radius": value, "lineCount": value, "normal": [value, 0, 0]})
    assert opts == DiskOptions()


def test_sniff_ignores_non_finite_triples():
    converted = sniff_vectors({"huge": [10 ** 400, 0, 0], "ok": [1, 0, 0]})
    assert converted["huge"] == [10 ** 400, 0, 0]
    assert converted["ok"] == Vector(1.0, 0.0, 0.0)
