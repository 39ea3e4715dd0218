"""IR nodes. One element (or character-data run, or opaque payload) of a document tree.

Nodes own their children; the parent link and the owning document are weak
references, so a detached subtree is released as soon as nothing else holds it.
"""

from __future__ import annotations

import weakref
import xml.etree.ElementTree as ET
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Union

from svgir.errors import ParseError, SchemaViolation
from svgir.schema import AttributeDefinition, NodeKind, get_registry
from svgir.values import (
    Angle,
    AttributeValue,
    Color,
    EnumToken,
    Inherit,
    Iri,
    Length,
    Number,
    NumberOptNumber,
    Paint,
    RawValue,
    StringValue,
    ValueKind,
    format_number,
    is_valid_language_tag,
)
from svgir.values.types import VALUE_TYPES

if TYPE_CHECKING:
    from svgir.document.document import Document

AttributeInput = Union[AttributeValue, str, int, float]
OpaquePayload = Union[ET.Element, str]

LANGUAGE_ATTRIBUTES = ("lang", "xml:lang")

# Value kinds a spec kind accepts besides its own.
_COMPATIBLE = {
    ValueKind.LANGUAGE: ValueKind.STRING,
    ValueKind.FUNC_IRI: ValueKind.IRI,
}


def _adapt(definition: AttributeDefinition, value: AttributeValue) -> AttributeValue:
    spec = definition.spec
    if isinstance(value, RawValue):
        return value
    if isinstance(value, Inherit):
        if not definition.inheritable:
            raise SchemaViolation(f"{definition.name!r} does not accept 'inherit'")
        return value
    if isinstance(value, EnumToken):
        if spec.match_keyword(value.value) is None:
            raise SchemaViolation(f"{value.value!r} is not a keyword of {definition.name!r}")
        return value
    if spec.kind is ValueKind.PAINT and isinstance(value, Color):
        return Paint(color=value)
    if spec.kind is ValueKind.LENGTH and isinstance(value, Number):
        return Length(value.value)
    if spec.kind is ValueKind.FUNC_IRI and isinstance(value, Iri):
        return Iri(value.target, functional=True)
    expected = _COMPATIBLE.get(spec.kind, spec.kind)
    if value.kind is not expected:
        raise SchemaViolation(f"{definition.name!r} expects a {spec.kind.value} value, got {value.kind.value}")
    if spec.kind is ValueKind.LANGUAGE and value.value and not is_valid_language_tag(value.value):
        raise ParseError(f"invalid language tag {value.value!r}", value.value, 0, len(value.value))
    return value


def coerce_attribute(kind: NodeKind, name: str, value: AttributeInput) -> AttributeValue:
    """Turn builder input into an AttributeValue using the schema grammar for ``name``."""
    definition = get_registry().attribute_schema(kind, name)
    if isinstance(value, str):
        return definition.parse(value) if definition is not None else RawValue(value)
    if isinstance(value, bool):
        raise TypeError(f"boolean is not a valid value for {name!r}")
    if isinstance(value, (int, float)):
        if definition is None:
            return RawValue(format_number(value))
        spec_kind = definition.spec.kind
        if spec_kind is ValueKind.NUMBER:
            return Number(value)
        if spec_kind is ValueKind.LENGTH:
            return Length(value)
        if spec_kind is ValueKind.ANGLE:
            return Angle(value)
        if spec_kind is ValueKind.NUMBER_OPT_NUMBER:
            return NumberOptNumber(value)
        return definition.parse(format_number(value))
    if isinstance(value, VALUE_TYPES):
        return _adapt(definition, value) if definition is not None else value
    raise TypeError(f"cannot use {type(value).__name__} as value of {name!r}")


def check_placement(parent: Node, child: Node) -> None:
    """Detached-ness, cycle and content-model checks shared by Node and Document."""
    if not isinstance(child, Node):
        raise TypeError(f"expected Node, got {type(child).__name__}")
    if child.parent is not None or child.document is not None:
        raise SchemaViolation(f"{child.element_name} is already attached; remove it first")
    if child is parent or child.is_ancestor_of(parent):
        raise SchemaViolation(f"inserting {child.element_name} under {parent.element_name} would create a cycle")
    if not get_registry().get(parent.kind).allows(child.kind):
        raise SchemaViolation(f"{child.element_name} is not allowed inside {parent.element_name}")


class Node:
    def __init__(
        self,
        kind: NodeKind | str,
        attributes: Mapping[str, AttributeInput] | None = None,
        children: tuple[Node, ...] | list[Node] = (),
        *,
        text: str | None = None,
        raw: OpaquePayload | None = None,
    ) -> None:
        self._kind = NodeKind(kind)
        self._attributes: dict[str, AttributeValue] = {}
        self._children: list[Node] = []
        self._parent: weakref.ref[Node] | None = None
        self._document: weakref.ref[Document] | None = None
        self._text = text
        self._raw = raw
        if self._kind is NodeKind.CHARACTERS and not isinstance(text, str):
            raise ValueError("character data nodes need text")
        if self._kind is NodeKind.OPAQUE and raw is None:
            raise ValueError("opaque nodes need a raw payload")
        for name, value in (attributes or {}).items():
            self.set(name, value)
        for child in children:
            self.append(child)

    def __repr__(self) -> str:
        label = self.element_name
        if self.id is not None:
            label += f" id={self.id!r}"
        return f"<Node {label} children={len(self._children)}>"

    # -- identity ---------------------------------------------------------

    @property
    def kind(self) -> NodeKind:
        return self._kind

    @property
    def element_name(self) -> str:
        if self._kind is NodeKind.OPAQUE and isinstance(self._raw, ET.Element):
            return self._raw.tag
        return self._kind.value

    @property
    def id(self) -> str | None:
        value = self._attributes.get("id")
        return value.value if isinstance(value, StringValue) and value.value else None

    @property
    def lang(self) -> str | None:
        for name in LANGUAGE_ATTRIBUTES:
            value = self._attributes.get(name)
            if isinstance(value, StringValue):
                return value.value
        return None

    @property
    def text(self) -> str | None:
        return self._text

    @text.setter
    def text(self, value: str) -> None:
        if self._kind is not NodeKind.CHARACTERS:
            raise SchemaViolation("only character data nodes carry text")
        self._text = value

    @property
    def raw(self) -> OpaquePayload | None:
        return self._raw

    # -- tree links -------------------------------------------------------

    @property
    def parent(self) -> Node | None:
        return self._parent() if self._parent is not None else None

    @property
    def document(self) -> Document | None:
        return self._document() if self._document is not None else None

    @property
    def children(self) -> tuple[Node, ...]:
        return tuple(self._children)

    def iter(self) -> Iterator[Node]:
        """Pre-order traversal of this subtree, self first."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node._children))

    def ancestors(self) -> Iterator[Node]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    @property
    def depth(self) -> int:
        return sum(1 for _ in self.ancestors())

    def is_ancestor_of(self, other: Node) -> bool:
        return any(a is self for a in other.ancestors())

    def index_in_parent(self) -> int | None:
        parent = self.parent
        if parent is None:
            return None
        for i, child in enumerate(parent._children):
            if child is self:
                return i
        return None

    # -- attributes -------------------------------------------------------

    @property
    def attributes(self) -> Mapping[str, AttributeValue]:
        return MappingProxyType(self._attributes)

    def get(self, name: str, default: Any = None) -> AttributeValue | Any:
        return self._attributes.get(name, default)

    def set(self, name: str, value: AttributeInput) -> AttributeValue:
        if not self._kind.is_element:
            raise SchemaViolation(f"{self._kind.value} nodes carry no attributes")
        parsed = coerce_attribute(self._kind, name, value)
        if name == "id":
            new_id = parsed.value if isinstance(parsed, StringValue) and parsed.value else None
            document = self.document
            if document is not None:
                document._reindex(self, self.id, new_id)
        self._attributes[name] = parsed
        return parsed

    def remove_attribute(self, name: str) -> AttributeValue | None:
        if name == "id" and self.id is not None:
            document = self.document
            if document is not None:
                document._reindex(self, self.id, None)
        return self._attributes.pop(name, None)

    # -- structure --------------------------------------------------------

    def append(self, child: Node) -> Node:
        return self.insert(None, child)

    def insert(self, index: int | None, child: Node) -> Node:
        """Insert ``child`` at ``index`` (None appends). Attached nodes go through their Document."""
        document = self.document
        if document is not None:
            return document.insert(self, index, child)
        check_placement(self, child)
        self._attach(index, child)
        return child

    def _attach(self, index: int | None, child: Node) -> None:
        if index is None:
            self._children.append(child)
        else:
            self._children.insert(index, child)
        child._parent = weakref.ref(self)

    def _detach(self, child: Node) -> None:
        for i, existing in enumerate(self._children):
            if existing is child:
                del self._children[i]
                break
        child._parent = None
