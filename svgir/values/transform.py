"""Transform list grammar (the ``transform`` and ``gradientTransform`` attributes)."""

from __future__ import annotations

import re

from svgir.values.numbers import DEFAULT_PRECISION, format_number
from svgir.values.scanner import Scanner
from svgir.values.types import TRANSFORM_ARITY, TransformFunction, TransformList

_NAME_RE = re.compile(r"[A-Za-z]+")


def _arity_text(arities: tuple[int, ...]) -> str:
    return " or ".join(str(n) for n in arities)


def _scan_function(s: Scanner) -> TransformFunction:
    name_pos = s.pos
    name = s.match(_NAME_RE)
    if name is None:
        raise s.error("expected transform function")
    if name not in TRANSFORM_ARITY:
        raise s.error(f"unknown transform function {name!r}", name_pos, len(name))
    s.skip_ws()
    if s.peek() != "(":
        raise s.error("expected '('")
    open_pos = s.pos
    s.advance()
    operands: list[float] = []
    while True:
        s.skip_ws()
        if s.at_end():
            raise s.error("unbalanced parenthesis", open_pos, s.pos - open_pos)
        if s.peek() == ")":
            s.advance()
            break
        if operands and s.peek() == ",":
            s.advance()
            s.skip_ws()
            if s.at_end():
                raise s.error("unbalanced parenthesis", open_pos, s.pos - open_pos)
        operands.append(s.number())
    arities = TRANSFORM_ARITY[name]
    if len(operands) not in arities:
        raise s.error(
            f"{name} expects {_arity_text(arities)} operands, found {len(operands)}",
            name_pos,
            s.pos - name_pos,
        )
    return TransformFunction(name, tuple(operands))


def parse_transform(text: str) -> TransformList:
    s = Scanner(text)
    functions: list[TransformFunction] = []
    s.skip_ws()
    while not s.at_end():
        functions.append(_scan_function(s))
        comma_pos = s.pos
        if s.skip_comma_ws() and s.at_end():
            raise s.error("unterminated transform list", comma_pos)
    return TransformList(tuple(functions))


def serialize_transform(value: TransformList, precision: int = DEFAULT_PRECISION) -> str:
    return " ".join(
        f"{fn.name}({' '.join(format_number(v, precision) for v in fn.operands)})" for fn in value.functions
    )
