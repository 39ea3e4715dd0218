"""Parse/serialize dispatch over every value kind.

``parse(text, kind_or_spec)`` picks the grammar; ``serialize(value)`` produces
the canonical text. Both are pure.
"""

from __future__ import annotations

import re
from collections.abc import Collection
from dataclasses import dataclass

from svgir.errors import ParseError
from svgir.values.colors import parse_color, parse_paint, serialize_color, serialize_paint
from svgir.values.langtag import parse_language_tag
from svgir.values.numbers import (
    DEFAULT_PRECISION,
    format_number,
    parse_angle,
    parse_length,
    parse_number,
    scan_angle,
    scan_length,
    serialize_angle,
    serialize_length,
    serialize_number,
)
from svgir.values.path import parse_path, serialize_path
from svgir.values.scanner import Scanner
from svgir.values.transform import parse_transform, serialize_transform
from svgir.values.types import (
    ALIGN_VALUES,
    Angle,
    AttributeValue,
    Color,
    EnumToken,
    Inherit,
    Iri,
    Length,
    ListOf,
    Number,
    NumberOptNumber,
    Paint,
    PathData,
    PreserveAspectRatio,
    RawValue,
    StringValue,
    TransformList,
    Unit,
    ValueKind,
    ViewBox,
)

_ITEM_RE = re.compile(r"[^\s,]+")
_WORD_RE = re.compile(r"\S+")


@dataclass(frozen=True)
class ValueSpec:
    """Grammar selection for one attribute.

    ``units`` narrows lengths (``None`` in the set allows unitless values);
    ``keywords`` are accepted in front of the main grammar (or are the whole
    grammar for ENUM); ``item``/``group``/``separator`` describe lists.
    """

    kind: ValueKind
    units: frozenset[Unit | None] | None = None
    keywords: tuple[str, ...] = ()
    case_sensitive: bool = True
    item: ValueSpec | None = None
    group: int = 1
    separator: str = " "

    def match_keyword(self, token: str) -> str | None:
        if token in self.keywords:
            return token
        if not self.case_sensitive:
            lowered = token.lower()
            for keyword in self.keywords:
                if keyword.lower() == lowered:
                    return keyword
        return None


def _token_bounds(text: str) -> tuple[int, str]:
    stripped = text.strip()
    return (text.find(stripped) if stripped else 0), stripped


def _parse_enum(text: str, spec: ValueSpec) -> EnumToken:
    offset, token = _token_bounds(text)
    keyword = spec.match_keyword(token)
    if keyword is None:
        raise ParseError(f"expected one of {', '.join(spec.keywords)}", text, offset, len(token))
    return EnumToken(keyword)


_NUMERIC_ITEMS = frozenset({ValueKind.NUMBER, ValueKind.LENGTH, ValueKind.ANGLE})


def _scan_numeric(s: Scanner, spec: ValueSpec) -> AttributeValue:
    if spec.kind is ValueKind.LENGTH:
        return scan_length(s, spec.units)
    if spec.kind is ValueKind.ANGLE:
        return scan_angle(s)
    return Number(s.number())


def _rebase(error: ParseError, text: str, offset: int) -> ParseError:
    return ParseError(error.message, text, offset + error.position, len(error.fragment))


def _parse_list(text: str, spec: ValueSpec) -> ListOf:
    item_spec = spec.item or ValueSpec(ValueKind.NUMBER)
    items: list[AttributeValue] = []
    if item_spec.kind in (ValueKind.STRING, ValueKind.ENUM):
        # Comma-only separation so multi-word names (font families) stay whole.
        pos = 0
        for chunk in text.split(","):
            _, token = _token_bounds(chunk)
            if not token:
                if not text.strip():
                    break
                raise ParseError("unterminated list", text, pos, max(len(chunk), 1))
            start = text.find(token, pos)
            try:
                items.append(_parse_with_spec(token, item_spec))
            except ParseError as exc:
                raise _rebase(exc, text, start) from None
            pos += len(chunk) + 1
    elif item_spec.kind in _NUMERIC_ITEMS and not item_spec.keywords:
        # Scanned in place: a sign may start the next item with no separator ("10-5").
        s = Scanner(text)
        s.skip_ws()
        while not s.at_end():
            items.append(_scan_numeric(s, item_spec))
            item_end = s.pos
            had_comma = s.skip_comma_ws()
            if had_comma and s.at_end():
                raise s.error("unterminated list", item_end)
            if s.pos == item_end and not s.at_end() and not s.starts_number():
                raise s.error("unexpected trailing text", length=len(text) - s.pos)
    else:
        s = Scanner(text)
        s.skip_ws()
        while not s.at_end():
            start = s.pos
            token = s.match(_ITEM_RE)
            if token is None:
                raise s.error("expected list item")
            try:
                items.append(_parse_with_spec(token, item_spec))
            except ParseError as exc:
                raise _rebase(exc, text, start) from None
            comma_pos = s.pos
            if s.skip_comma_ws() and s.at_end():
                raise s.error("unterminated list", comma_pos)
    if spec.group > 1 and len(items) % spec.group:
        raise ParseError(
            f"expected items in groups of {spec.group}, found {len(items)}", text, len(text.rstrip()) - 1
        )
    return ListOf(tuple(items), spec.separator)


def _parse_view_box(text: str) -> ViewBox:
    s = Scanner(text)
    s.skip_ws()
    values: list[float] = []
    for i in range(4):
        if i:
            s.skip_comma_ws()
        values.append(s.number())
    s.skip_ws()
    if not s.at_end():
        raise s.error("unexpected trailing text", length=len(text) - s.pos)
    if values[2] < 0 or values[3] < 0:
        raise ParseError("viewBox width and height must not be negative", text, 0, len(text))
    return ViewBox(*values)


def _parse_preserve_aspect_ratio(text: str) -> PreserveAspectRatio:
    words = [(m.start(), m.group(0)) for m in _WORD_RE.finditer(text)]
    if words and words[0][1] == "defer":
        words = words[1:]
    if not words or len(words) > 2:
        raise ParseError("expected '<align> [meet|slice]'", text, 0, len(text))
    pos, align = words[0]
    if align not in ALIGN_VALUES:
        raise ParseError(f"invalid align value {align!r}", text, pos, len(align))
    meet_or_slice = None
    if len(words) == 2:
        pos, meet_or_slice = words[1]
        if meet_or_slice not in ("meet", "slice"):
            raise ParseError(f"expected 'meet' or 'slice', found {meet_or_slice!r}", text, pos, len(meet_or_slice))
    return PreserveAspectRatio(align, meet_or_slice)


def _parse_iri(text: str) -> Iri:
    offset, target = _token_bounds(text)
    if not target:
        raise ParseError("empty reference", text, 0)
    if any(ch.isspace() for ch in target):
        raise ParseError("whitespace in reference", text, offset, len(target))
    return Iri(target)


def _parse_func_iri(text: str) -> Iri:
    offset, token = _token_bounds(text)
    if not (token.startswith("url(") and token.endswith(")")):
        raise ParseError("expected url(...)", text, offset, max(len(token), 1))
    inner = _parse_iri(token[4:-1])
    return Iri(inner.target, functional=True)


def _parse_number_opt_number(text: str) -> NumberOptNumber:
    s = Scanner(text)
    s.skip_ws()
    first = s.number()
    second = None
    s.skip_comma_ws()
    if not s.at_end():
        second = s.number()
        s.skip_ws()
    if not s.at_end():
        raise s.error("unexpected trailing text", length=len(text) - s.pos)
    return NumberOptNumber(first, second)


def _parse_with_spec(text: str, spec: ValueSpec) -> AttributeValue:
    kind = spec.kind
    if kind is ValueKind.ENUM:
        return _parse_enum(text, spec)
    if spec.keywords:
        keyword = spec.match_keyword(text.strip())
        if keyword is not None:
            return EnumToken(keyword)
    if kind is ValueKind.NUMBER:
        return parse_number(text)
    if kind is ValueKind.LENGTH:
        return parse_length(text, spec.units)
    if kind is ValueKind.ANGLE:
        return parse_angle(text)
    if kind is ValueKind.COLOR:
        return parse_color(text)
    if kind is ValueKind.PAINT:
        return parse_paint(text)
    if kind is ValueKind.PATH_DATA:
        return parse_path(text)
    if kind is ValueKind.TRANSFORM_LIST:
        return parse_transform(text)
    if kind is ValueKind.STRING:
        return StringValue(text)
    if kind is ValueKind.LIST:
        return _parse_list(text, spec)
    if kind is ValueKind.VIEW_BOX:
        return _parse_view_box(text)
    if kind is ValueKind.PRESERVE_ASPECT_RATIO:
        return _parse_preserve_aspect_ratio(text)
    if kind is ValueKind.IRI:
        return _parse_iri(text)
    if kind is ValueKind.FUNC_IRI:
        return _parse_func_iri(text)
    if kind is ValueKind.NUMBER_OPT_NUMBER:
        return _parse_number_opt_number(text)
    if kind is ValueKind.LANGUAGE:
        return StringValue(parse_language_tag(text))
    if kind is ValueKind.INHERIT:
        if text.strip() != "inherit":
            raise ParseError("expected 'inherit'", text, 0, len(text))
        return Inherit()
    if kind is ValueKind.RAW:
        return RawValue(text)
    raise ValueError(f"no grammar for {kind!r}")


def parse(text: str, kind: ValueKind | ValueSpec) -> AttributeValue:
    """Parse ``text`` with the grammar for ``kind``. Raises ParseError."""
    spec = kind if isinstance(kind, ValueSpec) else ValueSpec(kind)
    return _parse_with_spec(text, spec)


def serialize(value: AttributeValue, precision: int = DEFAULT_PRECISION) -> str:
    """Canonical text for ``value``."""
    if isinstance(value, Number):
        return serialize_number(value, precision)
    if isinstance(value, Length):
        return serialize_length(value, precision)
    if isinstance(value, Angle):
        return serialize_angle(value, precision)
    if isinstance(value, Color):
        return serialize_color(value)
    if isinstance(value, Paint):
        return serialize_paint(value)
    if isinstance(value, PathData):
        return serialize_path(value, precision)
    if isinstance(value, TransformList):
        return serialize_transform(value, precision)
    if isinstance(value, EnumToken):
        return value.value
    if isinstance(value, StringValue):
        return value.value
    if isinstance(value, ListOf):
        return value.separator.join(serialize(item, precision) for item in value.items)
    if isinstance(value, ViewBox):
        return " ".join(format_number(v, precision) for v in (value.min_x, value.min_y, value.width, value.height))
    if isinstance(value, PreserveAspectRatio):
        if value.meet_or_slice is None:
            return value.align
        return f"{value.align} {value.meet_or_slice}"
    if isinstance(value, Iri):
        return f"url({value.target})" if value.functional else value.target
    if isinstance(value, NumberOptNumber):
        if value.second is None:
            return format_number(value.first, precision)
        return f"{format_number(value.first, precision)} {format_number(value.second, precision)}"
    if isinstance(value, Inherit):
        return "inherit"
    if isinstance(value, RawValue):
        return value.text
    raise TypeError(f"not an attribute value: {value!r}")


def length_spec(units: Collection[Unit | None] | None = None, keywords: tuple[str, ...] = ()) -> ValueSpec:
    return ValueSpec(ValueKind.LENGTH, units=frozenset(units) if units is not None else None, keywords=keywords)


def enum_spec(*keywords: str, case_sensitive: bool = True) -> ValueSpec:
    return ValueSpec(ValueKind.ENUM, keywords=keywords, case_sensitive=case_sensitive)


def list_spec(item: ValueSpec, group: int = 1, separator: str = " ", keywords: tuple[str, ...] = ()) -> ValueSpec:
    return ValueSpec(ValueKind.LIST, item=item, group=group, separator=separator, keywords=keywords)
