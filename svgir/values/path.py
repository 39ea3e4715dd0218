"""Path data grammar (the ``d`` attribute).

Repeated operand groups after a command letter repeat the command; extra
coordinate pairs after a moveto are implicit linetos of the same relativity.
"""

from __future__ import annotations

from svgir.values.numbers import DEFAULT_PRECISION, format_number
from svgir.values.scanner import Scanner
from svgir.values.types import PATH_ARITY, PATH_COMMAND_NAMES, PathCommand, PathData

_ARC_FLAGS = (3, 4)


def _scan_flag(s: Scanner) -> float:
    ch = s.peek()
    if ch not in ("0", "1"):
        raise s.error("arc flag must be 0 or 1")
    s.advance()
    return float(ch)


def _scan_group(s: Scanner, letter: str, group_start: int) -> tuple[float, ...]:
    command = letter.upper()
    arity = PATH_ARITY[command]
    operands: list[float] = []
    for i in range(arity):
        if i > 0:
            s.skip_comma_ws()
        if command == "A" and i in _ARC_FLAGS:
            operands.append(_scan_flag(s))
            continue
        if not s.starts_number():
            raise s.error(
                f"{PATH_COMMAND_NAMES[command]} command {letter!r} is missing operand {i + 1} of {arity}",
                group_start,
                max(s.pos - group_start, 1),
            )
        operands.append(s.number())
    return tuple(operands)


def parse_path(text: str) -> PathData:
    s = Scanner(text)
    commands: list[PathCommand] = []
    s.skip_ws()
    while not s.at_end():
        letter = s.peek()
        if letter.upper() not in PATH_ARITY:
            raise s.error(f"expected path command, found {letter!r}")
        if not commands and letter not in "Mm":
            raise s.error("path data must begin with a moveto")
        s.advance()
        if letter in "Zz":
            commands.append(PathCommand(letter))
            s.skip_ws()
            continue
        current = letter
        s.skip_ws()
        while True:
            group_start = s.pos
            commands.append(PathCommand(current, _scan_group(s, letter, group_start)))
            if current in "Mm":
                current = "l" if current == "m" else "L"
                letter = current
            comma_pos = s.pos
            had_comma = s.skip_comma_ws()
            if not s.starts_number():
                if had_comma:
                    raise s.error("unexpected comma", comma_pos)
                break
    return PathData(tuple(commands))


def serialize_path(value: PathData, precision: int = DEFAULT_PRECISION) -> str:
    parts = []
    for cmd in value.commands:
        if cmd.operands:
            parts.append(cmd.letter + " ".join(format_number(v, precision) for v in cmd.operands))
        else:
            parts.append(cmd.letter)
    return " ".join(parts)
