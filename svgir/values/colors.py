"""Color and paint grammars."""

from __future__ import annotations

import re

from svgir.values.scanner import Scanner, parse_all
from svgir.values.types import Color, ColorKind, Paint

_HEX_RE = re.compile(r"#[0-9A-Fa-f]*")
_IDENT_RE = re.compile(r"[A-Za-z]+")
_FUNC_RE = re.compile(r"rgba?\(", re.IGNORECASE)

# fmt: off
NAMED_COLORS = {
    "aliceblue": "#f0f8ff", "antiquewhite": "#faebd7", "aqua": "#00ffff",
    "aquamarine": "#7fffd4", "azure": "#f0ffff", "beige": "#f5f5dc",
    "bisque": "#ffe4c4", "black": "#000000", "blanchedalmond": "#ffebcd",
    "blue": "#0000ff", "blueviolet": "#8a2be2", "brown": "#a52a2a",
    "burlywood": "#deb887", "cadetblue": "#5f9ea0", "chartreuse": "#7fff00",
    "chocolate": "#d2691e", "coral": "#ff7f50", "cornflowerblue": "#6495ed",
    "cornsilk": "#fff8dc", "crimson": "#dc143c", "cyan": "#00ffff",
    "darkblue": "#00008b", "darkcyan": "#008b8b", "darkgoldenrod": "#b8860b",
    "darkgray": "#a9a9a9", "darkgrey": "#a9a9a9", "darkgreen": "#006400",
    "darkkhaki": "#bdb76b", "darkmagenta": "#8b008b", "darkolivegreen": "#556b2f",
    "darkorange": "#ff8c00", "darkorchid": "#9932cc", "darkred": "#8b0000",
    "darksalmon": "#e9967a", "darkseagreen": "#8fbc8f", "darkslateblue": "#483d8b",
    "darkslategray": "#2f4f4f", "darkslategrey": "#2f4f4f",
    "darkturquoise": "#00ced1", "darkviolet": "#9400d3", "deeppink": "#ff1493",
    "deepskyblue": "#00bfff", "dimgray": "#696969", "dimgrey": "#696969",
    "dodgerblue": "#1e90ff", "firebrick": "#b22222", "floralwhite": "#fffaf0",
    "forestgreen": "#228b22", "fuchsia": "#ff00ff", "gainsboro": "#dcdcdc",
    "ghostwhite": "#f8f8ff", "gold": "#ffd700", "goldenrod": "#daa520",
    "gray": "#808080", "grey": "#808080", "green": "#008000",
    "greenyellow": "#adff2f", "honeydew": "#f0fff0", "hotpink": "#ff69b4",
    "indianred": "#cd5c5c", "indigo": "#4b0082", "ivory": "#fffff0",
    "khaki": "#f0e68c", "lavender": "#e6e6fa", "lavenderblush": "#fff0f5",
    "lawngreen": "#7cfc00", "lemonchiffon": "#fffacd", "lightblue": "#add8e6",
    "lightcoral": "#f08080", "lightcyan": "#e0ffff",
    "lightgoldenrodyellow": "#fafad2", "lightgray": "#d3d3d3",
    "lightgrey": "#d3d3d3", "lightgreen": "#90ee90", "lightpink": "#ffb6c1",
    "lightsalmon": "#ffa07a", "lightseagreen": "#20b2aa", "lightskyblue": "#87cefa",
    "lightslategray": "#778899", "lightslategrey": "#778899",
    "lightsteelblue": "#b0c4de", "lightyellow": "#ffffe0", "lime": "#00ff00",
    "limegreen": "#32cd32", "linen": "#faf0e6", "magenta": "#ff00ff",
    "maroon": "#800000", "mediumaquamarine": "#66cdaa", "mediumblue": "#0000cd",
    "mediumorchid": "#ba55d3", "mediumpurple": "#9370db",
    "mediumseagreen": "#3cb371", "mediumslateblue": "#7b68ee",
    "mediumspringgreen": "#00fa9a", "mediumturquoise": "#48d1cc",
    "mediumvioletred": "#c71585", "midnightblue": "#191970", "mintcream": "#f5fffa",
    "mistyrose": "#ffe4e1", "moccasin": "#ffe4b5", "navajowhite": "#ffdead",
    "navy": "#000080", "oldlace": "#fdf5e6", "olive": "#808000",
    "olivedrab": "#6b8e23", "orange": "#ffa500", "orangered": "#ff4500",
    "orchid": "#da70d6", "palegoldenrod": "#eee8aa", "palegreen": "#98fb98",
    "paleturquoise": "#afeeee", "palevioletred": "#db7093", "papayawhip": "#ffefd5",
    "peachpuff": "#ffdab9", "peru": "#cd853f", "pink": "#ffc0cb", "plum": "#dda0dd",
    "powderblue": "#b0e0e6", "purple": "#800080", "rebeccapurple": "#663399",
    "red": "#ff0000", "rosybrown": "#bc8f8f", "royalblue": "#4169e1",
    "saddlebrown": "#8b4513", "salmon": "#fa8072", "sandybrown": "#f4a460",
    "seagreen": "#2e8b57", "seashell": "#fff5ee", "sienna": "#a0522d",
    "silver": "#c0c0c0", "skyblue": "#87ceeb", "slateblue": "#6a5acd",
    "slategray": "#708090", "slategrey": "#708090", "snow": "#fffafa",
    "springgreen": "#00ff7f", "steelblue": "#4682b4", "tan": "#d2b48c",
    "teal": "#008080", "thistle": "#d8bfd8", "tomato": "#ff6347",
    "transparent": "#00000000",
    "turquoise": "#40e0d0", "violet": "#ee82ee", "wheat": "#f5deb3",
    "white": "#ffffff", "whitesmoke": "#f5f5f5", "yellow": "#ffff00",
    "yellowgreen": "#9acd32",
}
# fmt: on


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _scan_channel(s: Scanner) -> int:
    value = s.number()
    if s.peek() == "%":
        s.advance()
        return round(_clamp(value, 0.0, 100.0) * 255 / 100)
    return round(_clamp(value, 0.0, 255.0))


def _scan_alpha(s: Scanner) -> int:
    value = s.number()
    if s.peek() == "%":
        s.advance()
        value /= 100.0
    return round(_clamp(value, 0.0, 1.0) * 255)


def _scan_hex(s: Scanner) -> Color:
    start = s.pos
    token = s.match(_HEX_RE)
    digits = token[1:]
    if len(digits) in (3, 4):
        digits = "".join(ch * 2 for ch in digits)
    if len(digits) not in (6, 8):
        raise s.error("hex color needs 3, 4, 6 or 8 digits", start, len(token))
    channels = [int(digits[i:i + 2], 16) for i in range(0, len(digits), 2)]
    if len(channels) == 3:
        channels.append(255)
    return Color.rgb(*channels)


def _scan_function(s: Scanner) -> Color:
    open_pos = s.pos
    s.match(_FUNC_RE)
    s.skip_ws()
    channels = [_scan_channel(s)]
    s.skip_ws()
    comma_syntax = s.peek() == ","
    for _ in range(2):
        if comma_syntax:
            s.skip_ws()
            if s.peek() != ",":
                raise s.error("expected ','")
            s.advance()
            s.skip_ws()
        elif s.at_end():
            break
        channels.append(_scan_channel(s))
        s.skip_ws()
    if len(channels) < 3:
        raise s.error("unbalanced functional notation", open_pos, s.pos - open_pos)
    alpha = 255
    separator = "," if comma_syntax else "/"
    if s.peek() == separator:
        s.advance()
        s.skip_ws()
        alpha = _scan_alpha(s)
        s.skip_ws()
    if s.peek() != ")":
        if s.at_end():
            raise s.error("unbalanced functional notation", open_pos, s.pos - open_pos)
        raise s.error("expected ')'")
    s.advance()
    return Color.rgb(channels[0], channels[1], channels[2], alpha)


def scan_color(s: Scanner) -> Color:
    ch = s.peek()
    if ch == "#":
        return _scan_hex(s)
    if _FUNC_RE.match(s.text, s.pos):
        return _scan_function(s)
    start = s.pos
    token = s.match(_IDENT_RE)
    if token is None:
        raise s.error("expected color")
    lowered = token.lower()
    if lowered == "none":
        return Color.none()
    if lowered == "currentcolor":
        return Color.current()
    if lowered in NAMED_COLORS:
        return Color(ColorKind.KEYWORD, name=lowered)
    raise s.error(f"unknown color keyword {token!r}", start, len(token))


def scan_paint(s: Scanner) -> Paint:
    if not s.text.startswith("url(", s.pos):
        return Paint(color=scan_color(s))
    open_pos = s.pos
    s.advance(4)
    close = s.text.find(")", s.pos)
    if close < 0:
        raise s.error("unbalanced functional notation", open_pos, len(s.text) - open_pos)
    ref = s.text[s.pos:close].strip().strip("'\"")
    if not ref:
        raise s.error("empty url reference", open_pos, close + 1 - open_pos)
    s.pos = close + 1
    s.skip_ws()
    fallback = scan_color(s) if not s.at_end() else None
    return Paint(ref=ref, fallback=fallback)


def parse_color(text: str) -> Color:
    return parse_all(text, scan_color)


def parse_paint(text: str) -> Paint:
    return parse_all(text, scan_paint)


def serialize_color(value: Color) -> str:
    if value.color_kind is ColorKind.RGBA:
        r, g, b, a = value.rgba
        text = f"#{r:02x}{g:02x}{b:02x}"
        return text if a == 255 else text + f"{a:02x}"
    if value.color_kind is ColorKind.KEYWORD:
        return value.name
    if value.color_kind is ColorKind.CURRENT:
        return "currentColor"
    return "none"


def serialize_paint(value: Paint) -> str:
    if value.ref is None:
        return serialize_color(value.color)
    text = f"url({value.ref})"
    if value.fallback is not None:
        text += " " + serialize_color(value.fallback)
    return text
