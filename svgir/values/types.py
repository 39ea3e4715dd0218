"""Attribute value types: a closed tagged union of immutable values.

Every value class carries a ``kind`` class attribute naming the grammar that
produced it; ``svgir.values.codec`` dispatches on it for serialization.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import ClassVar, Union

import numpy as np
from numpy.typing import NDArray


class ValueKind(str, enum.Enum):
    NUMBER = "number"
    LENGTH = "length"
    ANGLE = "angle"
    COLOR = "color"
    PAINT = "paint"
    PATH_DATA = "path-data"
    TRANSFORM_LIST = "transform-list"
    ENUM = "enum"
    STRING = "string"
    LIST = "list"
    VIEW_BOX = "view-box"
    PRESERVE_ASPECT_RATIO = "preserve-aspect-ratio"
    IRI = "iri"
    FUNC_IRI = "func-iri"
    NUMBER_OPT_NUMBER = "number-optional-number"
    LANGUAGE = "language"
    INHERIT = "inherit"
    RAW = "raw"


class Unit(str, enum.Enum):
    PX = "px"
    IN = "in"
    CM = "cm"
    MM = "mm"
    PT = "pt"
    PC = "pc"
    EM = "em"
    EX = "ex"
    PERCENT = "%"


# User units per absolute unit at 96dpi.
_ABSOLUTE_SCALE = {
    None: 1.0,
    Unit.PX: 1.0,
    Unit.IN: 96.0,
    Unit.CM: 96.0 / 2.54,
    Unit.MM: 96.0 / 25.4,
    Unit.PT: 96.0 / 72.0,
    Unit.PC: 16.0,
}


class AngleUnit(str, enum.Enum):
    DEG = "deg"
    GRAD = "grad"
    RAD = "rad"
    TURN = "turn"


class ColorKind(str, enum.Enum):
    RGBA = "rgba"
    KEYWORD = "keyword"
    CURRENT = "currentColor"
    NONE = "none"


@dataclass(frozen=True)
class Number:
    kind: ClassVar[ValueKind] = ValueKind.NUMBER
    value: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", float(self.value))


@dataclass(frozen=True)
class Length:
    kind: ClassVar[ValueKind] = ValueKind.LENGTH
    value: float
    unit: Unit | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", float(self.value))

    def to_user_units(self, font_size: float = 16.0) -> float:
        if self.unit is Unit.EM:
            return self.value * font_size
        if self.unit is Unit.EX:
            return self.value * font_size / 2.0
        if self.unit is Unit.PERCENT:
            raise ValueError("percentage lengths need a reference length")
        return self.value * _ABSOLUTE_SCALE[self.unit]


@dataclass(frozen=True)
class Angle:
    kind: ClassVar[ValueKind] = ValueKind.ANGLE
    value: float
    unit: AngleUnit | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", float(self.value))

    def as_degrees(self) -> float:
        if self.unit is AngleUnit.GRAD:
            return self.value * 360.0 / 400.0
        if self.unit is AngleUnit.RAD:
            return math.degrees(self.value)
        if self.unit is AngleUnit.TURN:
            return self.value * 360.0
        return self.value


@dataclass(frozen=True)
class Color:
    """RGBA channels are integers 0-255 (alpha included) so hex output is exact."""

    kind: ClassVar[ValueKind] = ValueKind.COLOR
    color_kind: ColorKind
    rgba: tuple[int, int, int, int] | None = None
    name: str | None = None

    @classmethod
    def rgb(cls, r: int, g: int, b: int, a: int = 255) -> Color:
        channels = (r, g, b, a)
        if any(not 0 <= c <= 255 for c in channels):
            raise ValueError(f"color channels must be within 0-255: {channels}")
        return cls(ColorKind.RGBA, rgba=tuple(int(c) for c in channels))

    @classmethod
    def keyword(cls, name: str) -> Color:
        from svgir.values.colors import NAMED_COLORS

        lowered = name.lower()
        if lowered not in NAMED_COLORS:
            raise ValueError(f"unknown color keyword: {name!r}")
        return cls(ColorKind.KEYWORD, name=lowered)

    @classmethod
    def current(cls) -> Color:
        return cls(ColorKind.CURRENT)

    @classmethod
    def none(cls) -> Color:
        return cls(ColorKind.NONE)

    @property
    def is_none(self) -> bool:
        return self.color_kind is ColorKind.NONE

    def to_rgba(self) -> tuple[int, int, int, int] | None:
        """Concrete channels, or None for ``none``/``currentColor``."""
        if self.color_kind is ColorKind.RGBA:
            return self.rgba
        if self.color_kind is ColorKind.KEYWORD:
            from svgir.values.colors import NAMED_COLORS

            hex_value = NAMED_COLORS[self.name]
            alpha = int(hex_value[7:9], 16) if len(hex_value) == 9 else 255
            return (int(hex_value[1:3], 16), int(hex_value[3:5], 16), int(hex_value[5:7], 16), alpha)
        return None


@dataclass(frozen=True)
class Paint:
    """Solid color, or a ``url(...)`` reference with an optional fallback."""

    kind: ClassVar[ValueKind] = ValueKind.PAINT
    color: Color | None = None
    ref: str | None = None
    fallback: Color | None = None

    def __post_init__(self) -> None:
        if (self.color is None) == (self.ref is None):
            raise ValueError("Paint needs exactly one of color or ref")
        if self.fallback is not None and self.ref is None:
            raise ValueError("Paint fallback requires a reference")

    @classmethod
    def url(cls, element_id: str, fallback: Color | None = None) -> Paint:
        return cls(ref=f"#{element_id}", fallback=fallback)

    @property
    def is_reference(self) -> bool:
        return self.ref is not None

    @property
    def ref_id(self) -> str | None:
        if self.ref is not None and self.ref.startswith("#"):
            return self.ref[1:]
        return None


PATH_ARITY = {"M": 2, "L": 2, "H": 1, "V": 1, "C": 6, "S": 4, "Q": 4, "T": 2, "A": 7, "Z": 0}

PATH_COMMAND_NAMES = {
    "M": "moveto",
    "L": "lineto",
    "H": "horizontal lineto",
    "V": "vertical lineto",
    "C": "curveto",
    "S": "smooth curveto",
    "Q": "quadratic curveto",
    "T": "smooth quadratic curveto",
    "A": "elliptical arc",
    "Z": "closepath",
}


@dataclass(frozen=True)
class PathCommand:
    letter: str
    operands: tuple[float, ...] = ()

    def __post_init__(self) -> None:
        upper = self.letter.upper()
        if len(self.letter) != 1 or upper not in PATH_ARITY:
            raise ValueError(f"unknown path command: {self.letter!r}")
        if len(self.operands) != PATH_ARITY[upper]:
            raise ValueError(
                f"path command {self.letter!r} takes {PATH_ARITY[upper]} operands, got {len(self.operands)}"
            )
        object.__setattr__(self, "operands", tuple(float(v) for v in self.operands))

    @property
    def command(self) -> str:
        return self.letter.upper()

    @property
    def is_relative(self) -> bool:
        return self.letter.islower()

    @property
    def name(self) -> str:
        return PATH_COMMAND_NAMES[self.command]


def _cmd(letter: str, relative: bool, *operands: float) -> PathCommand:
    return PathCommand(letter.lower() if relative else letter, operands)


def move_to(x: float, y: float, relative: bool = False) -> PathCommand:
    return _cmd("M", relative, x, y)


def line_to(x: float, y: float, relative: bool = False) -> PathCommand:
    return _cmd("L", relative, x, y)


def horizontal_to(x: float, relative: bool = False) -> PathCommand:
    return _cmd("H", relative, x)


def vertical_to(y: float, relative: bool = False) -> PathCommand:
    return _cmd("V", relative, y)


def cubic_to(x1, y1, x2, y2, x, y, relative: bool = False) -> PathCommand:
    return _cmd("C", relative, x1, y1, x2, y2, x, y)


def smooth_cubic_to(x2, y2, x, y, relative: bool = False) -> PathCommand:
    return _cmd("S", relative, x2, y2, x, y)


def quadratic_to(x1, y1, x, y, relative: bool = False) -> PathCommand:
    return _cmd("Q", relative, x1, y1, x, y)


def smooth_quadratic_to(x, y, relative: bool = False) -> PathCommand:
    return _cmd("T", relative, x, y)


def arc_to(rx, ry, rotation, large_arc: bool, sweep: bool, x, y, relative: bool = False) -> PathCommand:
    return _cmd("A", relative, rx, ry, rotation, 1.0 if large_arc else 0.0, 1.0 if sweep else 0.0, x, y)


def close_path(relative: bool = False) -> PathCommand:
    return _cmd("Z", relative)


@dataclass(frozen=True)
class PathData:
    kind: ClassVar[ValueKind] = ValueKind.PATH_DATA
    commands: tuple[PathCommand, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "commands", tuple(self.commands))

    def __len__(self) -> int:
        return len(self.commands)

    def __iter__(self):
        return iter(self.commands)

    def to_absolute(self) -> PathData:
        """Rewrite every command into its absolute (upper-case) form."""
        out: list[PathCommand] = []
        cx = cy = 0.0
        sx = sy = 0.0
        for cmd in self.commands:
            ops = list(cmd.operands)
            c = cmd.command
            if cmd.is_relative and c != "Z":
                if c == "H":
                    ops[0] += cx
                elif c == "V":
                    ops[0] += cy
                elif c == "A":
                    ops[5] += cx
                    ops[6] += cy
                else:
                    for i in range(0, len(ops), 2):
                        ops[i] += cx
                        ops[i + 1] += cy
            if c == "Z":
                cx, cy = sx, sy
            elif c == "H":
                cx = ops[0]
            elif c == "V":
                cy = ops[0]
            else:
                cx, cy = ops[-2], ops[-1]
            if c == "M":
                sx, sy = cx, cy
            out.append(PathCommand(c, tuple(ops)))
        return PathData(tuple(out))


TRANSFORM_ARITY: dict[str, tuple[int, ...]] = {
    "matrix": (6,),
    "translate": (1, 2),
    "scale": (1, 2),
    "rotate": (1, 3),
    "skewX": (1,),
    "skewY": (1,),
}


@dataclass(frozen=True)
class TransformFunction:
    name: str
    operands: tuple[float, ...]

    def __post_init__(self) -> None:
        if self.name not in TRANSFORM_ARITY:
            raise ValueError(f"unknown transform function: {self.name!r}")
        if len(self.operands) not in TRANSFORM_ARITY[self.name]:
            raise ValueError(f"{self.name} takes {TRANSFORM_ARITY[self.name]} operands, got {len(self.operands)}")
        object.__setattr__(self, "operands", tuple(float(v) for v in self.operands))

    def to_matrix(self) -> NDArray[np.float64]:
        ops = self.operands
        if self.name == "matrix":
            a, b, c, d, e, f = ops
            return np.array([[a, c, e], [b, d, f], [0.0, 0.0, 1.0]])
        if self.name == "translate":
            tx, ty = ops[0], ops[1] if len(ops) == 2 else 0.0
            return np.array([[1.0, 0.0, tx], [0.0, 1.0, ty], [0.0, 0.0, 1.0]])
        if self.name == "scale":
            sx, sy = ops[0], ops[1] if len(ops) == 2 else ops[0]
            return np.array([[sx, 0.0, 0.0], [0.0, sy, 0.0], [0.0, 0.0, 1.0]])
        if self.name == "rotate":
            a = math.radians(ops[0])
            rot = np.array([[math.cos(a), -math.sin(a), 0.0], [math.sin(a), math.cos(a), 0.0], [0.0, 0.0, 1.0]])
            if len(ops) == 3:
                cx, cy = ops[1], ops[2]
                to_origin = np.array([[1.0, 0.0, -cx], [0.0, 1.0, -cy], [0.0, 0.0, 1.0]])
                back = np.array([[1.0, 0.0, cx], [0.0, 1.0, cy], [0.0, 0.0, 1.0]])
                return back @ rot @ to_origin
            return rot
        t = math.tan(math.radians(ops[0]))
        if self.name == "skewX":
            return np.array([[1.0, t, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]])
        return np.array([[1.0, 0.0, 0.0], [t, 1.0, 0.0], [0.0, 0.0, 1.0]])


@dataclass(frozen=True)
class TransformList:
    kind: ClassVar[ValueKind] = ValueKind.TRANSFORM_LIST
    functions: tuple[TransformFunction, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "functions", tuple(self.functions))

    def __len__(self) -> int:
        return len(self.functions)

    def to_matrix(self) -> NDArray[np.float64]:
        """Compose left-to-right into a 3x3 affine matrix."""
        m = np.identity(3)
        for fn in self.functions:
            m = m @ fn.to_matrix()
        return m


@dataclass(frozen=True)
class EnumToken:
    kind: ClassVar[ValueKind] = ValueKind.ENUM
    value: str


@dataclass(frozen=True)
class StringValue:
    kind: ClassVar[ValueKind] = ValueKind.STRING
    value: str


@dataclass(frozen=True)
class ListOf:
    kind: ClassVar[ValueKind] = ValueKind.LIST
    items: tuple = ()
    separator: str = field(default=" ", compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)


@dataclass(frozen=True)
class ViewBox:
    kind: ClassVar[ValueKind] = ValueKind.VIEW_BOX
    min_x: float
    min_y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("viewBox width and height must not be negative")
        for name in ("min_x", "min_y", "width", "height"):
            object.__setattr__(self, name, float(getattr(self, name)))


ALIGN_VALUES = (
    "none",
    "xMinYMin",
    "xMidYMin",
    "xMaxYMin",
    "xMinYMid",
    "xMidYMid",
    "xMaxYMid",
    "xMinYMax",
    "xMidYMax",
    "xMaxYMax",
)


@dataclass(frozen=True)
class PreserveAspectRatio:
    kind: ClassVar[ValueKind] = ValueKind.PRESERVE_ASPECT_RATIO
    align: str = "xMidYMid"
    meet_or_slice: str | None = None

    def __post_init__(self) -> None:
        if self.align not in ALIGN_VALUES:
            raise ValueError(f"invalid align value: {self.align!r}")
        if self.meet_or_slice not in (None, "meet", "slice"):
            raise ValueError(f"invalid meetOrSlice value: {self.meet_or_slice!r}")


@dataclass(frozen=True)
class Iri:
    """Element reference. ``functional`` IRIs are written as ``url(...)``."""

    kind: ClassVar[ValueKind] = ValueKind.IRI
    target: str
    functional: bool = False

    @property
    def fragment(self) -> str | None:
        """Local element id for ``#id`` references."""
        return self.target[1:] if self.target.startswith("#") else None


@dataclass(frozen=True)
class NumberOptNumber:
    kind: ClassVar[ValueKind] = ValueKind.NUMBER_OPT_NUMBER
    first: float
    second: float | None = None


@dataclass(frozen=True)
class Inherit:
    kind: ClassVar[ValueKind] = ValueKind.INHERIT


@dataclass(frozen=True)
class RawValue:
    """Unparsed attribute text kept verbatim (unknown or malformed attributes)."""

    kind: ClassVar[ValueKind] = ValueKind.RAW
    text: str


AttributeValue = Union[
    Number,
    Length,
    Angle,
    Color,
    Paint,
    PathData,
    TransformList,
    EnumToken,
    StringValue,
    ListOf,
    ViewBox,
    PreserveAspectRatio,
    Iri,
    NumberOptNumber,
    Inherit,
    RawValue,
]

VALUE_TYPES = AttributeValue.__args__
