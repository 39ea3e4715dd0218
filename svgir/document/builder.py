"""Programmatic construction of nodes and documents.

    from svgir.document.builder import E, build_document

    doc = build_document(
        E.svg(
            E.defs(E.linear_gradient(E.stop(offset="0%", stop_color="red"), id="g")),
            E.circle(cx=10, cy=10, r=5, fill="url(#g)"),
            view_box="0 0 20 20",
        )
    )

Constructors are derived from the schema registry, so every node kind has one
and keyword names are resolved against that kind's declared attributes.
"""

from __future__ import annotations

from collections.abc import Callable

from svgir.document.document import Document
from svgir.document.metadata import DocumentMetadata
from svgir.document.node import AttributeInput, Node
from svgir.schema import NodeKind, get_registry

_SPECIAL_NAMES = {
    "class_": "class",
    "xlink_href": "xlink:href",
    "xml_lang": "xml:lang",
    "xml_space": "xml:space",
}


def _camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def attribute_name(kind: NodeKind, key: str) -> str:
    """Map a Python keyword to the attribute name the schema declares for ``kind``."""
    if key in _SPECIAL_NAMES:
        return _SPECIAL_NAMES[key]
    declared = get_registry().get(kind).attributes
    if key in declared:
        return key
    for candidate in (key.replace("_", "-"), _camel(key)):
        if candidate in declared:
            return candidate
    return key.replace("_", "-")


def _builder_names() -> dict[str, NodeKind]:
    names: dict[str, NodeKind] = {}
    for kind in NodeKind:
        if kind.is_element:
            names[kind.name.lower()] = kind
            names[kind.value] = kind
    return names


class ElementBuilder:
    """``E.<element>(*children, **attributes)`` for every element kind."""

    def __init__(self) -> None:
        self._names = _builder_names()

    def __getattr__(self, name: str) -> Callable[..., Node]:
        if name.startswith("_"):
            raise AttributeError(name)
        kind = self._names.get(name)
        if kind is None:
            raise AttributeError(f"No element named {name!r}")

        def make(*children: Node | str, **attributes: AttributeInput) -> Node:
            return self.make(kind, *children, **attributes)

        make.__name__ = name
        return make

    def make(self, kind: NodeKind | str, *children: Node | str, **attributes: AttributeInput) -> Node:
        kind = NodeKind(kind)
        node = Node(kind)
        for key, value in attributes.items():
            node.set(attribute_name(kind, key), value)
        for child in children:
            node.append(self.text_node(child) if isinstance(child, str) else child)
        return node

    def text_node(self, text: str) -> Node:
        return Node(NodeKind.CHARACTERS, text=text)


E = ElementBuilder()


def build_document(root: Node, *, metadata: DocumentMetadata | None = None) -> Document:
    return Document(root, metadata=metadata)
