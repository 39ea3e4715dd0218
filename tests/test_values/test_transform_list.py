"""Tests for the transform list grammar and matrix composition."""

from __future__ import annotations

import numpy as np
import pytest

from svgir.errors import ParseError
from svgir.values import TransformFunction, TransformList
from svgir.values.transform import parse_transform, serialize_transform


def _apply(matrix, x, y):
    out = matrix @ np.array([x, y, 1.0])
    return out[0], out[1]


class TestParseTransform:
    def test_list(self):
        transform = parse_transform("translate(10 20) rotate(45)")
        assert [fn.name for fn in transform.functions] == ["translate", "rotate"]
        assert transform.functions[0].operands == (10.0, 20.0)

    def test_commas(self):
        transform = parse_transform("translate(10,20),scale(2)")
        assert len(transform) == 2
        assert transform.functions[1].operands == (2.0,)

    def test_empty(self):
        assert parse_transform("") == TransformList()

    def test_wrong_arity(self):
        with pytest.raises(ParseError) as exc:
            parse_transform("rotate(1 2)")
        assert exc.value.message == "rotate expects 1 or 3 operands, found 2"
        assert exc.value.position == 0

    def test_unknown_function(self):
        with pytest.raises(ParseError, match="unknown transform function 'spin'"):
            parse_transform("spin(1)")

    def test_unbalanced(self):
        with pytest.raises(ParseError, match="unbalanced parenthesis"):
            parse_transform("translate(1 2")

    def test_trailing_comma(self):
        with pytest.raises(ParseError, match="unterminated transform list"):
            parse_transform("scale(2),")

    def test_serialize(self):
        assert serialize_transform(parse_transform("translate(10,20)  rotate(45)")) == "translate(10 20) rotate(45)"

    def test_function_checks_arity(self):
        with pytest.raises(ValueError):
            TransformFunction("matrix", (1, 2, 3))


class TestMatrix:
    def test_translate_then_scale(self):
        m = parse_transform("translate(10 20) scale(2)").to_matrix()
        assert _apply(m, 1, 1) == pytest.approx((12.0, 22.0))

    def test_rotate(self):
        m = parse_transform("rotate(90)").to_matrix()
        assert _apply(m, 1, 0) == pytest.approx((0.0, 1.0))

    def test_rotate_about_point(self):
        m = parse_transform("rotate(180 5 5)").to_matrix()
        assert _apply(m, 0, 0) == pytest.approx((10.0, 10.0))

    def test_single_operand_defaults(self):
        assert _apply(parse_transform("translate(3)").to_matrix(), 0, 0) == pytest.approx((3.0, 0.0))
        assert _apply(parse_transform("scale(3)").to_matrix(), 1, 1) == pytest.approx((3.0, 3.0))

    def test_matrix(self):
        m = parse_transform("matrix(1 0 0 1 5 6)").to_matrix()
        assert _apply(m, 0, 0) == pytest.approx((5.0, 6.0))

    def test_identity(self):
        assert np.allclose(TransformList().to_matrix(), np.identity(3))
