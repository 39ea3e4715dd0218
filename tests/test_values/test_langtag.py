"""Tests for language tag well-formedness."""

from __future__ import annotations

import pytest

from svgir.errors import ParseError
from svgir.values import is_valid_language_tag
from svgir.values.langtag import parse_language_tag


@pytest.mark.parametrize("tag", [
    "en",
    "en-US",
    "zh-Hant-TW",
    "sr-Latn-RS",
    "de-CH-1901",
    "es-419",
    "x-private",
    "i-klingon",
    "en-a-bbb-x-a-ccc",
])
def test_valid_tags(tag):
    assert is_valid_language_tag(tag)


@pytest.mark.parametrize("tag", [
    "en--US",
    "1en",
    "de-1901-1901",
    "en-a-bbb-a-ccc",
    "toolongtag",
    "en_US",
])
def test_invalid_tags(tag):
    assert not is_valid_language_tag(tag)


def test_parse_strips_whitespace():
    assert parse_language_tag("  en-GB ") == "en-GB"


def test_parse_empty_allowed():
    assert parse_language_tag("") == ""


def test_parse_reports_tag():
    with pytest.raises(ParseError) as exc:
        parse_language_tag(" en--US")
    assert exc.value.message == "invalid language tag 'en--US'"
    assert exc.value.position == 1
