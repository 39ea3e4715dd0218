"""Language tags (RFC 5646 well-formedness) for ``lang`` and ``xml:lang``."""

from __future__ import annotations

import re

from svgir.errors import ParseError

_LANGTAG_RE = re.compile(
    r"(?P<language>[A-Za-z]{2,3}(?:-[A-Za-z]{3}){0,3}|[A-Za-z]{4}|[A-Za-z]{5,8})"
    r"(?:-(?P<script>[A-Za-z]{4}))?"
    r"(?:-(?P<region>[A-Za-z]{2}|\d{3}))?"
    r"(?P<variants>(?:-(?:[A-Za-z0-9]{5,8}|\d[A-Za-z0-9]{3}))*)"
    r"(?P<extensions>(?:-[0-9A-WYZa-wyz](?:-[A-Za-z0-9]{2,8})+)*)"
    r"(?:-(?P<privateuse>[xX](?:-[A-Za-z0-9]{1,8})+))?"
)
_PRIVATE_USE_RE = re.compile(r"[xX](?:-[A-Za-z0-9]{1,8})+")
_SINGLETON_RE = re.compile(r"-([0-9A-WYZa-wyz])(?=-)")

GRANDFATHERED = frozenset(
    tag.lower()
    for tag in (
        "en-GB-oed", "i-ami", "i-bnn", "i-default", "i-enochian", "i-hak", "i-klingon",
        "i-lux", "i-mingo", "i-navajo", "i-pwn", "i-tao", "i-tay", "i-tsu",
        "sgn-BE-FR", "sgn-BE-NL", "sgn-CH-DE",
        "art-lojban", "cel-gaulish", "no-bok", "no-nyn", "zh-guoyu", "zh-hakka",
        "zh-min", "zh-min-nan", "zh-xiang",
    )
)


def is_valid_language_tag(tag: str) -> bool:
    if tag.lower() in GRANDFATHERED or _PRIVATE_USE_RE.fullmatch(tag):
        return True
    m = _LANGTAG_RE.fullmatch(tag)
    if m is None:
        return False
    variants = [v.lower() for v in m.group("variants").split("-") if v]
    if len(variants) != len(set(variants)):
        return False
    singletons = [s.lower() for s in _SINGLETON_RE.findall(m.group("extensions"))]
    return len(singletons) == len(set(singletons))


def parse_language_tag(text: str) -> str:
    tag = text.strip()
    if tag and not is_valid_language_tag(tag):
        offset = text.find(tag)
        raise ParseError(f"invalid language tag {tag!r}", text, offset, len(tag))
    return tag
