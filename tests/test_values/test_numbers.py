"""Tests for numbers, lengths, angles and the numeric formatting policy."""

from __future__ import annotations

import pytest

from svgir.errors import ParseError
from svgir.values import Angle, AngleUnit, Length, Number, Unit, format_number
from svgir.values.numbers import parse_angle, parse_length, parse_number, serialize_length


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

class TestFormatNumber:
    def test_trailing_zeros_trimmed(self):
        assert format_number(1.0) == "1"
        assert format_number(2.5) == "2.5"

    def test_float_noise_removed(self):
        assert format_number(0.1 + 0.2) == "0.3"

    def test_negative_zero(self):
        assert format_number(-0.0) == "0"
        assert format_number(-0.0000001) == "0"

    def test_never_scientific(self):
        assert format_number(1e21) == "1000000000000000000000"
        assert format_number(1.5e-5, precision=6) == "0.000015"

    def test_precision(self):
        assert format_number(1 / 3, precision=2) == "0.33"
        assert format_number(2 / 3, precision=0) == "1"

    def test_non_finite_rejected(self):
        with pytest.raises(ValueError):
            format_number(float("inf"))


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------

class TestNumbers:
    @pytest.mark.parametrize("text,expected", [
        ("3", 3.0),
        ("  -4.5 ", -4.5),
        (".5", 0.5),
        ("+2", 2.0),
        ("1e3", 1000.0),
        ("2.5E-1", 0.25),
    ])
    def test_parse(self, text, expected):
        assert parse_number(text) == Number(expected)

    def test_not_a_number(self):
        with pytest.raises(ParseError) as exc:
            parse_number("abc")
        assert exc.value.message == "expected number"
        assert exc.value.position == 0

    def test_trailing_text(self):
        with pytest.raises(ParseError) as exc:
            parse_number("3 4")
        assert exc.value.message == "unexpected trailing text"
        assert exc.value.position == 2

    def test_empty(self):
        with pytest.raises(ParseError, match="empty value"):
            parse_number("   ")

    def test_overflow(self):
        with pytest.raises(ParseError, match="out of range"):
            parse_number("1e400")


# ---------------------------------------------------------------------------
# Lengths
# ---------------------------------------------------------------------------

class TestLengths:
    def test_unitless(self):
        assert parse_length("10") == Length(10)

    @pytest.mark.parametrize("text,unit", [
        ("10px", Unit.PX),
        ("2.5cm", Unit.CM),
        ("1in", Unit.IN),
        ("50%", Unit.PERCENT),
        ("1.2em", Unit.EM),
    ])
    def test_units(self, text, unit):
        assert parse_length(text).unit is unit

    def test_unknown_unit(self):
        with pytest.raises(ParseError) as exc:
            parse_length("5foo")
        assert exc.value.message == "unknown unit 'foo'"
        assert exc.value.position == 1
        assert exc.value.fragment == "foo"

    def test_restricted_units(self):
        assert parse_length("50%", {None, Unit.PERCENT}) == Length(50, Unit.PERCENT)
        with pytest.raises(ParseError, match="px not allowed here"):
            parse_length("5px", {None, Unit.PERCENT})

    def test_space_before_unit_rejected(self):
        with pytest.raises(ParseError):
            parse_length("5 px")

    def test_serialize(self):
        assert serialize_length(Length(12.5, Unit.MM)) == "12.5mm"
        assert serialize_length(Length(3)) == "3"

    def test_user_units(self):
        assert Length(1, Unit.IN).to_user_units() == 96.0
        assert Length(72, Unit.PT).to_user_units() == pytest.approx(96.0)
        assert Length(2, Unit.EM).to_user_units(font_size=10) == 20.0
        with pytest.raises(ValueError):
            Length(50, Unit.PERCENT).to_user_units()


# ---------------------------------------------------------------------------
# Angles
# ---------------------------------------------------------------------------

class TestAngles:
    def test_plain_degrees(self):
        assert parse_angle("45") == Angle(45)
        assert parse_angle("45").as_degrees() == 45.0

    def test_units(self):
        assert parse_angle("1turn") == Angle(1, AngleUnit.TURN)
        assert parse_angle("1turn").as_degrees() == 360.0
        assert parse_angle("200grad").as_degrees() == pytest.approx(180.0)

    def test_unknown_unit(self):
        with pytest.raises(ParseError, match="unknown angle unit"):
            parse_angle("10foo")
