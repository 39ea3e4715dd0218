"""Shared test fixtures."""

from __future__ import annotations

import pytest

from svgir.document import Document
from svgir.svg import parse_svg


# Sample documents

CIRCLE_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2" stroke-linecap="round" stroke-linejoin="round">
  <circle id="ring" cx="12" cy="12" r="10"/>
</svg>'''

SMILEY_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2" stroke-linecap="round" stroke-linejoin="round">
  <circle id="face" cx="12" cy="12" r="10"/>
  <g id="eyes">
    <circle id="eye-left" cx="8" cy="9" r="1"/>
    <circle id="eye-right" cx="16" cy="9" r="1"/>
  </g>
  <path id="mouth" d="M8 14s1.5 2 4 2 4-2 4-2"/>
</svg>'''

GRADIENT_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" viewBox="0 0 100 100">
  <defs>
    <linearGradient id="grad1" x1="0%" y1="0%" x2="100%" y2="0%">
      <stop offset="0%" stop-color="#ff0000"/>
      <stop offset="100%" stop-color="rgb(0, 0, 255)"/>
    </linearGradient>
    <linearGradient id="grad2" xlink:href="#grad1" gradientTransform="rotate(45)"/>
  </defs>
  <rect id="box" x="10" y="10" width="80" height="80" fill="url(#grad2)" stroke="red"/>
</svg>'''

USE_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" viewBox="0 0 100 100">
  <defs>
    <symbol id="dot" viewBox="0 0 10 10">
      <circle id="dot-body" cx="5" cy="5" r="4"/>
    </symbol>
  </defs>
  <g id="layer" fill="green" transform="translate(10 20)">
    <use id="first" xlink:href="#dot" x="5" y="5"/>
  </g>
</svg>'''

TEXT_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 200 50" lang="en">
  <title>Greeting</title>
  <text id="hello" x="10" y="30" font-family="Open Sans, sans-serif">Hello <tspan id="who" font-weight="bold">world</tspan>!</text>
</svg>'''

FOREIGN_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" xmlns:ex="http://example.com/ns" viewBox="0 0 10 10">
  <metadata><ex:info ex:author="someone">notes</ex:info></metadata>
  <ex:widget ex:size="3"><ex:part/></ex:widget>
  <rect id="r" width="5" height="5" ex:tag="keep"/>
</svg>'''

BROKEN_ATTRIBUTES_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 10 10">
  <path id="p" d="M10 10 L20"/>
  <rect id="r" width="5" height="5" fill="notacolor" xml:lang="en--US"/>
  <circle cx="1" cy="1"/>
</svg>'''

FILLED_RECT_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">
  <rect id="bg" x="10" y="10" width="80" height="80" fill="#4ECDC4"/>
  <circle id="spot" cx="50" cy="50" r="20" fill="#FF6B6B"/>
</svg>'''


def nested_groups_svg(depth: int) -> str:
    """An svg root wrapping ``depth`` nested <g> elements."""
    return (
        '<svg xmlns="http://www.w3.org/2000/svg">'
        + "<g>" * depth
        + "</g>" * depth
        + "</svg>"
    )


@pytest.fixture
def circle_svg() -> str:
    return CIRCLE_SVG


@pytest.fixture
def smiley_svg() -> str:
    return SMILEY_SVG


@pytest.fixture
def smiley_doc() -> Document:
    return parse_svg(SMILEY_SVG).document


@pytest.fixture
def gradient_doc() -> Document:
    return parse_svg(GRADIENT_SVG).document


@pytest.fixture
def use_doc() -> Document:
    return parse_svg(USE_SVG).document
