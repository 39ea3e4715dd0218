"""Cursor over attribute text shared by every grammar in ``svgir.values``."""

from __future__ import annotations

import math
import re
from typing import Callable, TypeVar

from svgir.errors import ParseError

T = TypeVar("T")

NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_WS = " \t\r\n\f"
_NUMBER_START = "+-.0123456789"


class Scanner:
    __slots__ = ("text", "pos")

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def advance(self, n: int = 1) -> None:
        self.pos += n

    def skip_ws(self) -> None:
        text = self.text
        while self.pos < len(text) and text[self.pos] in _WS:
            self.pos += 1

    def skip_comma_ws(self) -> bool:
        """Skip ``ws* [,] ws*``. Returns True if a comma was consumed."""
        self.skip_ws()
        if self.peek() == ",":
            self.pos += 1
            self.skip_ws()
            return True
        return False

    def starts_number(self) -> bool:
        return self.peek() != "" and self.peek() in _NUMBER_START

    def match(self, pattern: re.Pattern[str]) -> str | None:
        m = pattern.match(self.text, self.pos)
        if m is None or m.end() == self.pos:
            return None
        self.pos = m.end()
        return m.group(0)

    def number(self) -> float:
        start = self.pos
        m = NUMBER_RE.match(self.text, self.pos)
        if m is None:
            raise self.error("expected number")
        value = float(m.group(0))
        if not math.isfinite(value):
            raise self.error("number out of range", start, m.end() - start)
        self.pos = m.end()
        return value

    def expect(self, literal: str) -> None:
        if not self.text.startswith(literal, self.pos):
            raise self.error(f"expected {literal!r}")
        self.pos += len(literal)

    def error(self, message: str, position: int | None = None, length: int = 1) -> ParseError:
        return ParseError(message, self.text, self.pos if position is None else position, length)


def parse_all(text: str, fn: Callable[[Scanner], T]) -> T:
    """Run ``fn`` over the whole of ``text``, allowing surrounding whitespace only."""
    s = Scanner(text)
    s.skip_ws()
    if s.at_end():
        raise s.error("empty value")
    value = fn(s)
    s.skip_ws()
    if not s.at_end():
        raise s.error("unexpected trailing text", length=len(text) - s.pos)
    return value
