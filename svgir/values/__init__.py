"""Attribute value grammar & codec."""

from svgir.values.codec import ValueSpec, enum_spec, length_spec, list_spec, parse, serialize
from svgir.values.colors import NAMED_COLORS
from svgir.values.langtag import is_valid_language_tag
from svgir.values.numbers import DEFAULT_PRECISION, format_number
from svgir.values.types import (
    Angle,
    AngleUnit,
    AttributeValue,
    Color,
    ColorKind,
    EnumToken,
    Inherit,
    Iri,
    Length,
    ListOf,
    Number,
    NumberOptNumber,
    Paint,
    PathCommand,
    PathData,
    PreserveAspectRatio,
    RawValue,
    StringValue,
    TransformFunction,
    TransformList,
    Unit,
    ValueKind,
    ViewBox,
    arc_to,
    close_path,
    cubic_to,
    horizontal_to,
    line_to,
    move_to,
    quadratic_to,
    smooth_cubic_to,
    smooth_quadratic_to,
    vertical_to,
)

__all__ = [
    "DEFAULT_PRECISION",
    "NAMED_COLORS",
    "Angle",
    "AngleUnit",
    "AttributeValue",
    "Color",
    "ColorKind",
    "EnumToken",
    "Inherit",
    "Iri",
    "Length",
    "ListOf",
    "Number",
    "NumberOptNumber",
    "Paint",
    "PathCommand",
    "PathData",
    "PreserveAspectRatio",
    "RawValue",
    "StringValue",
    "TransformFunction",
    "TransformList",
    "Unit",
    "ValueKind",
    "ValueSpec",
    "ViewBox",
    "arc_to",
    "close_path",
    "cubic_to",
    "enum_spec",
    "format_number",
    "horizontal_to",
    "is_valid_language_tag",
    "length_spec",
    "line_to",
    "list_spec",
    "move_to",
    "parse",
    "quadratic_to",
    "serialize",
    "smooth_cubic_to",
    "smooth_quadratic_to",
    "vertical_to",
]
