"""Declarative node-kind table: attribute groups, content models, one entry per kind.

Adding an element = one ``element(...)`` entry in ``_elements()``. Defaults are
written as attribute text and parsed once, when the registry is built.
"""

from __future__ import annotations

from svgir.schema.registry import AttributeDefinition, NodeKind, Schema, SchemaRegistry
from svgir.values import Unit, ValueKind, ValueSpec, enum_spec, length_spec, list_spec, parse

K = NodeKind

NUMBER = ValueSpec(ValueKind.NUMBER)
LENGTH = length_spec()
STRING = ValueSpec(ValueKind.STRING)
PAINT = ValueSpec(ValueKind.PAINT)
COLOR = ValueSpec(ValueKind.COLOR)
IRI = ValueSpec(ValueKind.IRI)
FUNC_IRI = ValueSpec(ValueKind.FUNC_IRI, keywords=("none",))
LANGUAGE = ValueSpec(ValueKind.LANGUAGE)
TRANSFORM = ValueSpec(ValueKind.TRANSFORM_LIST)
VIEW_BOX = ValueSpec(ValueKind.VIEW_BOX)
ASPECT = ValueSpec(ValueKind.PRESERVE_ASPECT_RATIO)
AUTO_LENGTH = length_spec(keywords=("auto",))
UNITS = enum_spec("userSpaceOnUse", "objectBoundingBox")
LENGTH_LIST = list_spec(LENGTH)
NUMBER_LIST = list_spec(NUMBER)


def attr(
    name: str,
    spec: ValueSpec,
    *,
    required: bool = False,
    default: str | None = None,
    inheritable: bool = False,
) -> AttributeDefinition:
    if required and default is not None:
        raise ValueError(f"required attribute {name!r} cannot declare a default")
    return AttributeDefinition(
        name=name,
        spec=spec,
        required=required,
        default=parse(default, spec) if default is not None else None,
        inheritable=inheritable,
    )


# ---------------------------------------------------------------------------
# Attribute groups
# ---------------------------------------------------------------------------

CORE = (
    attr("id", STRING),
    attr("class", STRING),
    attr("style", STRING),
    attr("lang", LANGUAGE),
    attr("xml:lang", LANGUAGE),
    attr("xml:space", enum_spec("default", "preserve")),
    attr("tabindex", NUMBER),
)

CONDITIONAL = (
    attr("requiredExtensions", list_spec(STRING, separator=" ")),
    attr("systemLanguage", list_spec(LANGUAGE, separator=",")),
)

XLINK = (
    attr("href", IRI),
    attr("xlink:href", IRI),
)

PRESENTATION = (
    attr("fill", PAINT, default="black", inheritable=True),
    attr("fill-opacity", NUMBER, default="1", inheritable=True),
    attr("fill-rule", enum_spec("nonzero", "evenodd"), default="nonzero", inheritable=True),
    attr("stroke", PAINT, default="none", inheritable=True),
    attr("stroke-width", LENGTH, default="1", inheritable=True),
    attr("stroke-opacity", NUMBER, default="1", inheritable=True),
    attr("stroke-linecap", enum_spec("butt", "round", "square"), default="butt", inheritable=True),
    attr(
        "stroke-linejoin",
        enum_spec("miter", "miter-clip", "round", "bevel", "arcs"),
        default="miter",
        inheritable=True,
    ),
    attr("stroke-miterlimit", NUMBER, default="4", inheritable=True),
    attr("stroke-dasharray", list_spec(LENGTH, keywords=("none",)), default="none", inheritable=True),
    attr("stroke-dashoffset", LENGTH, default="0", inheritable=True),
    attr("color", COLOR, default="black", inheritable=True),
    attr("opacity", NUMBER, default="1"),
    attr("visibility", enum_spec("visible", "hidden", "collapse"), default="visible", inheritable=True),
    attr(
        "display",
        enum_spec("inline", "block", "list-item", "inline-block", "table", "none"),
        default="inline",
    ),
    attr("overflow", enum_spec("visible", "hidden", "scroll", "auto")),
    attr("clip-rule", enum_spec("nonzero", "evenodd"), default="nonzero", inheritable=True),
    attr("clip-path", FUNC_IRI),
    attr("mask", FUNC_IRI),
    attr("filter", FUNC_IRI),
    attr("marker-start", FUNC_IRI, inheritable=True),
    attr("marker-mid", FUNC_IRI, inheritable=True),
    attr("marker-end", FUNC_IRI, inheritable=True),
    attr("stop-color", COLOR, default="black"),
    attr("stop-opacity", NUMBER, default="1"),
    attr("flood-color", COLOR, default="black"),
    attr("flood-opacity", NUMBER, default="1"),
    attr("font-family", list_spec(STRING, separator=", "), inheritable=True),
    attr(
        "font-size",
        length_spec(
            keywords=("xx-small", "x-small", "small", "medium", "large", "x-large", "xx-large", "larger", "smaller")
        ),
        default="medium",
        inheritable=True,
    ),
    attr(
        "font-weight",
        enum_spec("normal", "bold", "bolder", "lighter", "100", "200", "300", "400", "500", "600", "700", "800", "900"),
        default="normal",
        inheritable=True,
    ),
    attr("font-style", enum_spec("normal", "italic", "oblique"), default="normal", inheritable=True),
    attr("text-anchor", enum_spec("start", "middle", "end"), default="start", inheritable=True),
    attr(
        "dominant-baseline",
        enum_spec("auto", "text-bottom", "alphabetic", "ideographic", "middle", "central", "mathematical",
                  "hanging", "text-top"),
        default="auto",
        inheritable=True,
    ),
    attr(
        "shape-rendering",
        enum_spec("auto", "optimizeSpeed", "crispEdges", "geometricPrecision"),
        default="auto",
        inheritable=True,
    ),
)

GRAPHICS = CORE + CONDITIONAL + PRESENTATION + (attr("transform", TRANSFORM),)

POSITION = (
    attr("x", LENGTH, default="0"),
    attr("y", LENGTH, default="0"),
)

SIZE = (
    attr("width", AUTO_LENGTH),
    attr("height", AUTO_LENGTH),
)

REGION = (
    attr("x", LENGTH, default="-10%"),
    attr("y", LENGTH, default="-10%"),
    attr("width", LENGTH, default="120%"),
    attr("height", LENGTH, default="120%"),
)

PRIMITIVE = CORE + PRESENTATION + (
    attr("x", LENGTH),
    attr("y", LENGTH),
    attr("width", LENGTH),
    attr("height", LENGTH),
    attr("result", STRING),
)

IN = attr("in", STRING)
IN2 = attr("in2", STRING)

TEXT_POSITIONING = (
    attr("x", LENGTH_LIST),
    attr("y", LENGTH_LIST),
    attr("dx", LENGTH_LIST),
    attr("dy", LENGTH_LIST),
    attr("rotate", NUMBER_LIST),
    attr("textLength", LENGTH),
    attr("lengthAdjust", enum_spec("spacing", "spacingAndGlyphs"), default="spacing"),
)

GRADIENT = CORE + PRESENTATION + XLINK + (
    attr("gradientUnits", UNITS, default="objectBoundingBox"),
    attr("gradientTransform", TRANSFORM),
    attr("spreadMethod", enum_spec("pad", "reflect", "repeat"), default="pad"),
)

# ---------------------------------------------------------------------------
# Content models
# ---------------------------------------------------------------------------

DESCRIPTIVE = frozenset({K.DESC, K.TITLE, K.METADATA})
SHAPES = frozenset({K.PATH, K.RECT, K.CIRCLE, K.ELLIPSE, K.LINE, K.POLYLINE, K.POLYGON})
STRUCTURAL = frozenset({K.SVG, K.G, K.DEFS, K.SYMBOL, K.USE, K.SWITCH, K.A, K.IMAGE})
PAINT_SERVERS = frozenset({K.LINEAR_GRADIENT, K.RADIAL_GRADIENT, K.PATTERN})
CONTAINER = (
    DESCRIPTIVE | SHAPES | STRUCTURAL | PAINT_SERVERS
    | {K.TEXT, K.STYLE, K.CLIP_PATH, K.MASK, K.MARKER, K.FILTER}
)
TEXT_CONTENT = DESCRIPTIVE | {K.CHARACTERS, K.TSPAN, K.TEXT_PATH, K.A}
GRADIENT_CONTENT = DESCRIPTIVE | {K.STOP}
FILTER_PRIMITIVES = frozenset({
    K.FE_GAUSSIAN_BLUR, K.FE_OFFSET, K.FE_FLOOD, K.FE_BLEND,
    K.FE_COLOR_MATRIX, K.FE_COMPOSITE, K.FE_MERGE,
})
SWITCH_CONTENT = DESCRIPTIVE | SHAPES | {K.G, K.SVG, K.USE, K.IMAGE, K.TEXT, K.A, K.SWITCH}
CLIP_CONTENT = DESCRIPTIVE | SHAPES | {K.TEXT, K.USE}


def element(
    kind: NodeKind,
    *groups: tuple[AttributeDefinition, ...],
    children: frozenset[NodeKind] = frozenset(),
    any_children: bool = False,
    description: str = "",
) -> Schema:
    """Merge attribute groups (later groups override earlier names) into a Schema.

    Foreign content is allowed under every kind.
    """
    attributes: dict[str, AttributeDefinition] = {}
    for group in groups:
        for definition in group:
            attributes[definition.name] = definition
    return Schema(
        kind=kind,
        element_name=kind.value,
        attributes=attributes,
        children=frozenset(children) | {K.OPAQUE},
        accepts_any_children=any_children,
        description=description,
    )


def _elements() -> list[Schema]:
    return [
        # Structure
        element(
            K.SVG, GRAPHICS, POSITION, (
                attr("width", AUTO_LENGTH, default="100%"),
                attr("height", AUTO_LENGTH, default="100%"),
                attr("viewBox", VIEW_BOX),
                attr("preserveAspectRatio", ASPECT, default="xMidYMid meet"),
                attr("version", STRING),
                attr("baseProfile", STRING),
            ),
            children=CONTAINER,
            description="Root or nested viewport",
        ),
        element(K.G, GRAPHICS, children=CONTAINER, description="Group"),
        element(K.DEFS, GRAPHICS, children=CONTAINER, description="Definitions, never rendered directly"),
        element(K.DESC, CORE, children=frozenset({K.CHARACTERS})),
        element(K.TITLE, CORE, children=frozenset({K.CHARACTERS})),
        element(K.METADATA, CORE, any_children=True),
        element(
            K.SYMBOL, CORE, PRESENTATION, POSITION, SIZE, (
                attr("viewBox", VIEW_BOX),
                attr("preserveAspectRatio", ASPECT, default="xMidYMid meet"),
                attr("refX", LENGTH),
                attr("refY", LENGTH),
            ),
            children=CONTAINER,
        ),
        element(K.USE, GRAPHICS, XLINK, POSITION, SIZE, children=DESCRIPTIVE, description="Instance of a template"),
        element(K.SWITCH, GRAPHICS, children=SWITCH_CONTENT),
        element(
            K.A, GRAPHICS, XLINK, (attr("target", STRING),),
            children=CONTAINER | TEXT_CONTENT,
            description="Hyperlink",
        ),
        element(
            K.IMAGE, GRAPHICS, XLINK, POSITION, SIZE, (attr("preserveAspectRatio", ASPECT, default="xMidYMid meet"),),
            children=DESCRIPTIVE,
        ),
        element(
            K.STYLE, CORE, (attr("type", STRING), attr("media", STRING), attr("title", STRING)),
            children=frozenset({K.CHARACTERS}),
            description="Style sheet kept as character data",
        ),
        # Shapes
        element(
            K.PATH, GRAPHICS, (
                attr("d", ValueSpec(ValueKind.PATH_DATA), required=True),
                attr("pathLength", NUMBER),
            ),
            children=DESCRIPTIVE,
        ),
        element(
            K.RECT, GRAPHICS, POSITION, (
                attr("width", LENGTH, required=True),
                attr("height", LENGTH, required=True),
                attr("rx", AUTO_LENGTH),
                attr("ry", AUTO_LENGTH),
            ),
            children=DESCRIPTIVE,
        ),
        element(
            K.CIRCLE, GRAPHICS, (
                attr("cx", LENGTH, default="0"),
                attr("cy", LENGTH, default="0"),
                attr("r", LENGTH, required=True),
            ),
            children=DESCRIPTIVE,
        ),
        element(
            K.ELLIPSE, GRAPHICS, (
                attr("cx", LENGTH, default="0"),
                attr("cy", LENGTH, default="0"),
                attr("rx", LENGTH, required=True),
                attr("ry", LENGTH, required=True),
            ),
            children=DESCRIPTIVE,
        ),
        element(
            K.LINE, GRAPHICS, (
                attr("x1", LENGTH, default="0"),
                attr("y1", LENGTH, default="0"),
                attr("x2", LENGTH, default="0"),
                attr("y2", LENGTH, default="0"),
            ),
            children=DESCRIPTIVE,
        ),
        element(K.POLYLINE, GRAPHICS, (attr("points", list_spec(NUMBER, group=2), required=True),), children=DESCRIPTIVE),
        element(K.POLYGON, GRAPHICS, (attr("points", list_spec(NUMBER, group=2), required=True),), children=DESCRIPTIVE),
        # Text
        element(K.TEXT, GRAPHICS, TEXT_POSITIONING, children=TEXT_CONTENT),
        element(K.TSPAN, CORE, CONDITIONAL, PRESENTATION, TEXT_POSITIONING, children=TEXT_CONTENT),
        element(
            K.TEXT_PATH, CORE, CONDITIONAL, PRESENTATION, XLINK, (
                attr("startOffset", LENGTH, default="0"),
                attr("method", enum_spec("align", "stretch"), default="align"),
                attr("spacing", enum_spec("auto", "exact"), default="exact"),
                attr("side", enum_spec("left", "right"), default="left"),
                attr("textLength", LENGTH),
                attr("lengthAdjust", enum_spec("spacing", "spacingAndGlyphs"), default="spacing"),
            ),
            children=DESCRIPTIVE | {K.CHARACTERS, K.TSPAN, K.A},
        ),
        # Paint servers
        element(
            K.LINEAR_GRADIENT, GRADIENT, (
                attr("x1", LENGTH, default="0%"),
                attr("y1", LENGTH, default="0%"),
                attr("x2", LENGTH, default="100%"),
                attr("y2", LENGTH, default="0%"),
            ),
            children=GRADIENT_CONTENT,
        ),
        element(
            K.RADIAL_GRADIENT, GRADIENT, (
                attr("cx", LENGTH, default="50%"),
                attr("cy", LENGTH, default="50%"),
                attr("r", LENGTH, default="50%"),
                attr("fx", LENGTH),
                attr("fy", LENGTH),
                attr("fr", LENGTH, default="0%"),
            ),
            children=GRADIENT_CONTENT,
        ),
        element(
            K.STOP, CORE, PRESENTATION,
            (attr("offset", length_spec(units=(None, Unit.PERCENT)), required=True),),
        ),
        element(
            K.PATTERN, CORE, CONDITIONAL, PRESENTATION, XLINK, POSITION, (
                attr("width", LENGTH, default="0"),
                attr("height", LENGTH, default="0"),
                attr("patternUnits", UNITS, default="objectBoundingBox"),
                attr("patternContentUnits", UNITS, default="userSpaceOnUse"),
                attr("patternTransform", TRANSFORM),
                attr("viewBox", VIEW_BOX),
                attr("preserveAspectRatio", ASPECT, default="xMidYMid meet"),
            ),
            children=CONTAINER,
        ),
        # Clipping, masking, markers
        element(
            K.CLIP_PATH, CORE, CONDITIONAL, PRESENTATION, (
                attr("transform", TRANSFORM),
                attr("clipPathUnits", UNITS, default="userSpaceOnUse"),
            ),
            children=CLIP_CONTENT,
        ),
        element(
            K.MASK, CORE, CONDITIONAL, PRESENTATION, REGION, (
                attr("maskUnits", UNITS, default="objectBoundingBox"),
                attr("maskContentUnits", UNITS, default="userSpaceOnUse"),
            ),
            children=CONTAINER,
        ),
        element(
            K.MARKER, CORE, PRESENTATION, (
                attr("refX", LENGTH, default="0"),
                attr("refY", LENGTH, default="0"),
                attr("markerWidth", LENGTH, default="3"),
                attr("markerHeight", LENGTH, default="3"),
                attr("markerUnits", enum_spec("strokeWidth", "userSpaceOnUse"), default="strokeWidth"),
                attr("orient", ValueSpec(ValueKind.ANGLE, keywords=("auto", "auto-start-reverse")), default="0"),
                attr("viewBox", VIEW_BOX),
                attr("preserveAspectRatio", ASPECT, default="xMidYMid meet"),
            ),
            children=CONTAINER,
        ),
        # Filters
        element(
            K.FILTER, CORE, PRESENTATION, XLINK, REGION, (
                attr("filterUnits", UNITS, default="objectBoundingBox"),
                attr("primitiveUnits", UNITS, default="userSpaceOnUse"),
            ),
            children=DESCRIPTIVE | FILTER_PRIMITIVES,
        ),
        element(
            K.FE_GAUSSIAN_BLUR, PRIMITIVE, (
                IN,
                attr("stdDeviation", ValueSpec(ValueKind.NUMBER_OPT_NUMBER), default="0"),
                attr("edgeMode", enum_spec("duplicate", "wrap", "none"), default="none"),
            ),
        ),
        element(K.FE_OFFSET, PRIMITIVE, (IN, attr("dx", NUMBER, default="0"), attr("dy", NUMBER, default="0"))),
        element(K.FE_FLOOD, PRIMITIVE),
        element(
            K.FE_BLEND, PRIMITIVE, (
                IN,
                IN2,
                attr(
                    "mode",
                    enum_spec("normal", "multiply", "screen", "overlay", "darken", "lighten", "color-dodge",
                              "color-burn", "hard-light", "soft-light", "difference", "exclusion", "hue",
                              "saturation", "color", "luminosity"),
                    default="normal",
                ),
            ),
        ),
        element(
            K.FE_COLOR_MATRIX, PRIMITIVE, (
                IN,
                attr("type", enum_spec("matrix", "saturate", "hueRotate", "luminanceToAlpha"), default="matrix"),
                attr("values", NUMBER_LIST),
            ),
        ),
        element(
            K.FE_COMPOSITE, PRIMITIVE, (
                IN,
                IN2,
                attr(
                    "operator",
                    enum_spec("over", "in", "out", "atop", "xor", "lighter", "arithmetic"),
                    default="over",
                ),
                attr("k1", NUMBER, default="0"),
                attr("k2", NUMBER, default="0"),
                attr("k3", NUMBER, default="0"),
                attr("k4", NUMBER, default="0"),
            ),
        ),
        element(K.FE_MERGE, PRIMITIVE, children=frozenset({K.FE_MERGE_NODE})),
        element(K.FE_MERGE_NODE, CORE, (IN,)),
        # Non-element kinds
        Schema(kind=K.CHARACTERS, element_name=K.CHARACTERS.value, description="Character data"),
        Schema(
            kind=K.OPAQUE,
            element_name=K.OPAQUE.value,
            accepts_any_children=True,
            description="Foreign or unrecognised content kept verbatim",
        ),
    ]


def build_registry() -> SchemaRegistry:
    registry = SchemaRegistry()
    for schema in _elements():
        registry.register(schema)
    for definition in PRESENTATION:
        registry.register_presentation(definition)
    registry.freeze()
    return registry
