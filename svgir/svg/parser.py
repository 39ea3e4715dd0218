"""SVG decoder: text to generic attributed tree (defusedxml) to IR Document.

Decoding is best-effort: attribute grammar failures, disallowed children,
missing required attributes and duplicate ids are collected into a
DecodeReport instead of aborting. Only input that is not well-formed, or that
trips a resource guard, raises.
"""

from __future__ import annotations

import copy
import io
import logging
import xml.etree.ElementTree as StdET
from dataclasses import dataclass
from typing import TYPE_CHECKING

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException

from svgir.document import Document, DocumentMetadata, Node
from svgir.document.issues import (
    DISALLOWED_CHILD,
    DUPLICATE_ID,
    INVALID_LANGUAGE_TAG,
    MISSING_ATTRIBUTE,
    PARSE_ERROR,
    UNEXPECTED_TEXT,
    DecodeReport,
)
from svgir.document.metadata import SVG_NS, XLINK_NS, XML_NS
from svgir.document.node import LANGUAGE_ATTRIBUTES
from svgir.errors import MalformedDocumentError, ParseError, ResourceLimitExceeded
from svgir.schema import NodeKind, get_registry
from svgir.values import RawValue

if TYPE_CHECKING:
    from svgir.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 256
DEFAULT_MAX_NODES = 100_000
DEFAULT_MAX_INPUT_CHARS = 10_000_000

_FIXED_PREFIXES = {XML_NS: "xml", XLINK_NS: "xlink"}


@dataclass(frozen=True)
class DecodeLimits:
    max_depth: int = DEFAULT_MAX_DEPTH
    max_nodes: int = DEFAULT_MAX_NODES
    max_input_chars: int = DEFAULT_MAX_INPUT_CHARS

    @classmethod
    def from_settings(cls, settings: Settings) -> DecodeLimits:
        return cls(
            max_depth=settings.max_depth,
            max_nodes=settings.max_nodes,
            max_input_chars=settings.max_input_chars,
        )


@dataclass
class DecodeResult:
    document: Document
    report: DecodeReport


def split_name(name: str) -> tuple[str | None, str]:
    """Split a Clark name into (namespace URI, local name)."""
    if name.startswith("{"):
        uri, local = name[1:].split("}", 1)
        return uri, local
    return None, name


def _read_tree(text: str, limits: DecodeLimits, namespaces: dict[str, str]) -> StdET.Element:
    """Stream-parse ``text``, enforcing depth and node-count guards as elements open."""
    if len(text) > limits.max_input_chars:
        raise ResourceLimitExceeded("input size", len(text), limits.max_input_chars)
    depth = 0
    count = 0
    root = None
    try:
        for event, item in ET.iterparse(io.StringIO(text), events=("start", "end", "start-ns")):
            if event == "start-ns":
                # Only declarations on the root element describe the document.
                if root is None:
                    prefix, uri = item
                    namespaces.setdefault(prefix or "", uri)
            elif event == "start":
                depth += 1
                count += 1
                if depth > limits.max_depth:
                    raise ResourceLimitExceeded("nesting depth", depth, limits.max_depth)
                if count > limits.max_nodes:
                    raise ResourceLimitExceeded("node count", count, limits.max_nodes)
                if root is None:
                    root = item
            else:
                depth -= 1
    except ET.ParseError as exc:
        line, column = getattr(exc, "position", (0, 0))
        raise MalformedDocumentError(f"not well-formed XML at line {line}, column {column}: {exc}") from exc
    except DefusedXmlException as exc:
        raise MalformedDocumentError(f"forbidden XML construct: {exc}") from exc
    if root is None:
        raise MalformedDocumentError("document has no root element")
    return root


class _Decoder:
    def __init__(self, namespaces: dict[str, str], report: DecodeReport) -> None:
        self.registry = get_registry()
        self.report = report
        self.namespaces = namespaces
        self.prefixes = {uri: prefix for prefix, uri in namespaces.items() if prefix}
        self.prefixes.update(_FIXED_PREFIXES)
        self.seen_ids: set[str] = set()

    def kind_of(self, element: StdET.Element) -> NodeKind | None:
        if not isinstance(element.tag, str):
            return None
        uri, local = split_name(element.tag)
        if uri not in (None, SVG_NS):
            return None
        return self.registry.kind_for_tag(local)

    def attribute_name(self, name: str) -> str:
        uri, local = split_name(name)
        if uri is None:
            return local
        prefix = self.prefixes.get(uri)
        return f"{prefix}:{local}" if prefix else name

    def opaque(self, element: StdET.Element) -> Node:
        raw = copy.deepcopy(element)
        raw.tail = None
        return Node(NodeKind.OPAQUE, raw=raw)

    def decode(self, root: StdET.Element) -> Node:
        root_kind = self.kind_of(root)
        if root_kind is None:
            raise MalformedDocumentError(f"unsupported root element {root.tag!r}")
        root_node = self.element_node(root, root_kind)
        self.decode_content(root, root_node)
        return root_node

    def decode_content(self, element: StdET.Element, container: Node, *, typed_top_level: bool = False) -> None:
        """Decode the children and character data of ``element`` into ``container``.

        With ``typed_top_level`` a known element that ``container`` does not allow
        is still decoded as a typed node, so the caller can reject it on insert.
        """
        # (element | text, parent) work items, processed in document order.
        stack: list[tuple[StdET.Element | str, Node]] = []
        self.push_content(element, container, stack)
        while stack:
            item, parent = stack.pop()
            if isinstance(item, str):
                self.add_text(item, parent)
                continue
            kind = self.kind_of(item)
            if kind is None:
                parent.append(self.opaque(item))
                continue
            if not self.registry.get(parent.kind).allows(kind):
                if typed_top_level and parent is container:
                    node = self.element_node(item, kind)
                    container._attach(None, node)
                    self.push_content(item, node, stack)
                    continue
                self.report.add(
                    DISALLOWED_CHILD,
                    f"{kind.value} is not allowed inside {parent.element_name}; kept as opaque content",
                    element=kind.value,
                )
                parent.append(self.opaque(item))
                continue
            node = self.element_node(item, kind)
            parent.append(node)
            self.push_content(item, node, stack)

    def push_content(self, element: StdET.Element, node: Node, stack: list) -> None:
        items: list[StdET.Element | str] = []
        if element.text:
            items.append(element.text)
        for child in element:
            items.append(child)
            if child.tail:
                items.append(child.tail)
        stack.extend((item, node) for item in reversed(items))

    def add_text(self, text: str, parent: Node) -> None:
        if self.registry.get(parent.kind).allows(NodeKind.CHARACTERS):
            parent.append(Node(NodeKind.CHARACTERS, text=text))
        elif text.strip():
            self.report.add(
                UNEXPECTED_TEXT,
                f"character data inside {parent.element_name} kept as opaque content",
                element=parent.element_name,
            )
            parent.append(Node(NodeKind.OPAQUE, raw=text))

    def element_node(self, element: StdET.Element, kind: NodeKind) -> Node:
        node = Node(kind)
        for raw_name, text in element.attrib.items():
            name = self.attribute_name(raw_name)
            definition = self.registry.attribute_schema(kind, name)
            if definition is None:
                node.set(name, RawValue(text))
                continue
            if name == "id":
                if text in self.seen_ids:
                    self.report.add(
                        DUPLICATE_ID, f"duplicate id {text!r} kept as unindexed text", element=kind.value, attribute=name
                    )
                    node.set(name, RawValue(text))
                    continue
                self.seen_ids.add(text)
            try:
                value = definition.parse(text)
            except ParseError as exc:
                code = INVALID_LANGUAGE_TAG if name in LANGUAGE_ATTRIBUTES else PARSE_ERROR
                self.report.add(code, exc.message, element=kind.value, attribute=name, position=exc.position)
                logger.debug("Attribute %s on %s kept raw: %s", name, kind.value, exc)
                value = RawValue(text)
            node.set(name, value)
        for name in self.registry.required_attributes(kind):
            if name not in node.attributes:
                self.report.add(
                    MISSING_ATTRIBUTE, f"{kind.value} requires {name!r}", element=kind.value, attribute=name
                )
        return node


def parse_svg(text: str, *, limits: DecodeLimits | None = None) -> DecodeResult:
    """Decode SVG text into a Document plus a report of recovered problems.

    Raises MalformedDocumentError for text that is not well-formed XML and
    ResourceLimitExceeded when a depth, node-count or size guard trips.
    """
    limits = limits or DecodeLimits()
    namespaces: dict[str, str] = {}
    root = _read_tree(text, limits, namespaces)
    report = DecodeReport()
    decoder = _Decoder(namespaces, report)
    root_node = decoder.decode(root)
    document = Document(root_node, metadata=DocumentMetadata(namespaces=namespaces))
    logger.info("Decoded %s: %d nodes, %d issues", root_node.element_name, document.node_count, len(report))
    return DecodeResult(document, report)


def parse_fragment(
    text: str,
    namespaces: dict[str, str] | None = None,
    *,
    parent: NodeKind = NodeKind.SVG,
    limits: DecodeLimits | None = None,
) -> tuple[list[Node], DecodeReport]:
    """Decode markup for one or more elements into detached nodes.

    Children are checked against ``parent``'s content model, so markup meant
    for a gradient, a text run or a filter primitive decodes into typed nodes.
    The markup is read inside a wrapper declaring ``namespaces`` so prefixed
    attributes such as ``xlink:href`` resolve.
    """
    namespaces = dict(namespaces or {"": SVG_NS})
    if XLINK_NS not in namespaces.values():
        namespaces.setdefault("xlink", XLINK_NS)
    declarations = " ".join(
        f'xmlns="{uri}"' if not prefix else f'xmlns:{prefix}="{uri}"' for prefix, uri in namespaces.items()
    )
    wrapped = f"<fragment {declarations}>{text}</fragment>"
    seen: dict[str, str] = {}
    root = _read_tree(wrapped, limits or DecodeLimits(), seen)
    if parent in (NodeKind.CHARACTERS, NodeKind.OPAQUE):
        parent = NodeKind.SVG
    report = DecodeReport()
    container = Node(parent)
    _Decoder({**namespaces, **seen}, report).decode_content(root, container, typed_top_level=True)
    nodes = list(container.children)
    for node in nodes:
        container._detach(node)
    return nodes, report
