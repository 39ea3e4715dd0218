"""Schema registry: one Schema per node kind, frozen after construction.

Usage:
    registry = get_registry()
    registry.allowed_children(NodeKind.G)          # frozenset of NodeKind
    registry.attribute_schema(NodeKind.CIRCLE, "r")  # AttributeDefinition

The table itself lives in ``svgir.schema.definitions``; this module only holds
the lookup structure and the lazily built singleton.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from svgir.values import AttributeValue, Inherit, ValueSpec, parse

logger = logging.getLogger(__name__)


class NodeKind(str, enum.Enum):
    SVG = "svg"
    G = "g"
    DEFS = "defs"
    DESC = "desc"
    TITLE = "title"
    METADATA = "metadata"
    SYMBOL = "symbol"
    USE = "use"
    SWITCH = "switch"
    A = "a"
    IMAGE = "image"
    STYLE = "style"
    PATH = "path"
    RECT = "rect"
    CIRCLE = "circle"
    ELLIPSE = "ellipse"
    LINE = "line"
    POLYLINE = "polyline"
    POLYGON = "polygon"
    TEXT = "text"
    TSPAN = "tspan"
    TEXT_PATH = "textPath"
    LINEAR_GRADIENT = "linearGradient"
    RADIAL_GRADIENT = "radialGradient"
    STOP = "stop"
    PATTERN = "pattern"
    CLIP_PATH = "clipPath"
    MASK = "mask"
    MARKER = "marker"
    FILTER = "filter"
    FE_GAUSSIAN_BLUR = "feGaussianBlur"
    FE_OFFSET = "feOffset"
    FE_FLOOD = "feFlood"
    FE_BLEND = "feBlend"
    FE_COLOR_MATRIX = "feColorMatrix"
    FE_COMPOSITE = "feComposite"
    FE_MERGE = "feMerge"
    FE_MERGE_NODE = "feMergeNode"
    CHARACTERS = "#text"
    OPAQUE = "#opaque"

    @property
    def is_element(self) -> bool:
        return not self.value.startswith("#")


@dataclass(frozen=True)
class AttributeDefinition:
    name: str
    spec: ValueSpec
    required: bool = False
    default: AttributeValue | None = None
    inheritable: bool = False

    def parse(self, text: str) -> AttributeValue:
        """Parse with this attribute's grammar. Raises ParseError."""
        if self.inheritable and text.strip() == "inherit":
            return Inherit()
        return parse(text, self.spec)


@dataclass(frozen=True, eq=False)
class Schema:
    kind: NodeKind
    element_name: str
    attributes: Mapping[str, AttributeDefinition] = field(default_factory=dict)
    children: frozenset[NodeKind] = frozenset()
    accepts_any_children: bool = False
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    def allows(self, child: NodeKind) -> bool:
        return self.accepts_any_children or child in self.children

    @property
    def required(self) -> tuple[str, ...]:
        return tuple(name for name, d in self.attributes.items() if d.required)


class SchemaRegistry:
    """Registry of node schemas plus the shared presentation attributes."""

    def __init__(self) -> None:
        self._schemas: dict[NodeKind, Schema] = {}
        self._by_tag: dict[str, NodeKind] = {}
        self._presentation: dict[str, AttributeDefinition] = {}
        self._frozen = False

    def _check_open(self) -> None:
        if self._frozen:
            raise ValueError("Schema registry is frozen")

    def register(self, schema: Schema) -> None:
        self._check_open()
        if schema.kind in self._schemas:
            raise ValueError(f"Duplicate schema for node kind: {schema.kind.value}")
        self._schemas[schema.kind] = schema
        if schema.kind.is_element:
            self._by_tag[schema.element_name] = schema.kind
        logger.debug("Registered schema %s (%d attributes)", schema.element_name, len(schema.attributes))

    def register_presentation(self, definition: AttributeDefinition) -> None:
        self._check_open()
        self._presentation[definition.name] = definition

    def freeze(self) -> None:
        missing = [kind.value for kind in NodeKind if kind not in self._schemas]
        if missing:
            raise ValueError(f"No schema registered for: {', '.join(missing)}")
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, kind: NodeKind) -> Schema:
        return self._schemas[kind]

    def kind_for_tag(self, name: str) -> NodeKind | None:
        return self._by_tag.get(name)

    def allowed_children(self, kind: NodeKind) -> frozenset[NodeKind]:
        schema = self._schemas[kind]
        if schema.accepts_any_children:
            return frozenset(NodeKind)
        return schema.children

    def attribute_schema(self, kind: NodeKind, name: str) -> AttributeDefinition | None:
        return self._schemas[kind].attributes.get(name)

    def required_attributes(self, kind: NodeKind) -> tuple[str, ...]:
        return self._schemas[kind].required

    def presentation_attribute(self, name: str) -> AttributeDefinition | None:
        return self._presentation.get(name)

    def presentation_items(self) -> list[tuple[str, AttributeDefinition]]:
        return list(self._presentation.items())

    def is_inheritable(self, name: str) -> bool:
        definition = self._presentation.get(name)
        return definition is not None and definition.inheritable

    def all(self) -> list[Schema]:
        return list(self._schemas.values())

    @property
    def count(self) -> int:
        return len(self._schemas)


_registry: SchemaRegistry | None = None


def get_registry() -> SchemaRegistry:
    global _registry
    if _registry is None:
        from svgir.schema.definitions import build_registry

        _registry = build_registry()
    return _registry
