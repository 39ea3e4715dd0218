"""Numbers, lengths and angles, plus the canonical numeric formatting policy."""

from __future__ import annotations

import math
import re
from collections.abc import Collection

from svgir.values.scanner import Scanner, parse_all
from svgir.values.types import Angle, AngleUnit, Length, Number, Unit

DEFAULT_PRECISION = 6

_UNIT_RE = re.compile(r"[A-Za-z%]+")
_UNITS = {u.value: u for u in Unit}
_ANGLE_UNITS = {u.value: u for u in AngleUnit}


def format_number(value: float, precision: int = DEFAULT_PRECISION) -> str:
    """Fixed precision, trailing zeros trimmed, never scientific, locale independent."""
    if not math.isfinite(value):
        raise ValueError(f"cannot format non-finite number: {value!r}")
    text = f"{value:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


def scan_length(s: Scanner, units: Collection[Unit | None] | None = None) -> Length:
    value = s.number()
    start = s.pos
    token = s.match(_UNIT_RE)
    unit: Unit | None = None
    if token is not None:
        unit = _UNITS.get(token)
        if unit is None:
            raise s.error(f"unknown unit {token!r}", start, len(token))
    if units is not None and unit not in units:
        label = token if token is not None else "unitless value"
        raise s.error(f"{label} not allowed here", start, len(token or " "))
    return Length(value, unit)


def scan_angle(s: Scanner) -> Angle:
    value = s.number()
    start = s.pos
    token = s.match(_UNIT_RE)
    if token is None:
        return Angle(value)
    unit = _ANGLE_UNITS.get(token)
    if unit is None:
        raise s.error(f"unknown angle unit {token!r}", start, len(token))
    return Angle(value, unit)


def parse_number(text: str) -> Number:
    return parse_all(text, lambda s: Number(s.number()))


def parse_length(text: str, units: Collection[Unit | None] | None = None) -> Length:
    return parse_all(text, lambda s: scan_length(s, units))


def parse_angle(text: str) -> Angle:
    return parse_all(text, scan_angle)


def serialize_number(value: Number, precision: int = DEFAULT_PRECISION) -> str:
    return format_number(value.value, precision)


def serialize_length(value: Length, precision: int = DEFAULT_PRECISION) -> str:
    suffix = value.unit.value if value.unit is not None else ""
    return format_number(value.value, precision) + suffix


def serialize_angle(value: Angle, precision: int = DEFAULT_PRECISION) -> str:
    suffix = value.unit.value if value.unit is not None else ""
    return format_number(value.value, precision) + suffix
