"""Write SVG text (and generic element trees) from an IR Document.

Attribute and child order are exactly as stored. Opaque payloads are written
verbatim; elements that may hold character data are written inline so
re-decoding never picks up indentation as content. Both writers walk the tree
with an explicit stack, so document depth is bounded by memory only.
"""

from __future__ import annotations

import copy
import xml.etree.ElementTree as ET

from svgir.document import Document, DocumentMetadata, Node
from svgir.document.metadata import SVG_NS, XLINK_NS, XML_NS
from svgir.schema import NodeKind, get_registry
from svgir.svg.parser import split_name
from svgir.values import DEFAULT_PRECISION, serialize

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

# Prefixes whose meaning is fixed in IR attribute names, whatever the document binds.
_FIXED_URIS = {"xml": XML_NS, "xlink": XLINK_NS}

# Work item tags for the writer's stack; plain strings on the stack are literal output.
_NODE = "node"
_RAW = "raw"


def _escape_text(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _escape_attr(text: str) -> str:
    return (
        _escape_text(text)
        .replace('"', "&quot;")
        .replace("\n", "&#10;")
        .replace("\r", "&#13;")
        .replace("\t", "&#09;")
    )


def _is_inline(node: Node) -> bool:
    if node.kind is NodeKind.OPAQUE:
        return True
    if get_registry().get(node.kind).allows(NodeKind.CHARACTERS):
        return True
    return any(child.kind is NodeKind.OPAQUE and isinstance(child.raw, str) for child in node.children)


class _Writer:
    """Markup writer for one subtree.

    Namespaces the subtree needs beyond the document's table are added to the
    declarations of the top element once the whole subtree has been written.
    Elements whose namespace has no prefix get a local default declaration.
    """

    def __init__(self, metadata: DocumentMetadata, precision: int, indent: int | None) -> None:
        self.precision = precision
        self.indent = indent or 0
        self.bound = dict(metadata.namespaces)
        self.namespaces = dict(metadata.namespaces)
        if "" in self.namespaces or SVG_NS in self.namespaces.values():
            self.svg_uri = SVG_NS
        else:
            self.svg_uri = ""
        self._slot: int | None = None
        self._top_declares_default = False

    # -- names ------------------------------------------------------------

    def _bound_prefix(self, uri: str) -> str | None:
        for prefix, known in self.namespaces.items():
            if known == uri and prefix:
                return prefix
        return None

    def _prefix_for(self, uri: str, preferred: str | None = None) -> str:
        """A non-empty prefix for ``uri``, declared on the top element if new."""
        if uri == XML_NS:
            return "xml"
        prefix = self._bound_prefix(uri)
        if prefix:
            return prefix
        prefix = preferred
        n = 0
        while not prefix or prefix in self.namespaces:
            prefix = f"ns{n}"
            n += 1
        self.namespaces[prefix] = uri
        return prefix

    def _attribute_name(self, name: str) -> str:
        if name.startswith("{"):
            uri, local = split_name(name)
            preferred = None
        else:
            preferred, sep, local = name.partition(":")
            if not sep:
                return name
            uri = _FIXED_URIS.get(preferred) or self.bound.get(preferred)
            if not uri:
                return name
        return f"{self._prefix_for(uri, preferred)}:{local}"

    def _tag(self, uri: str, local: str, default: str) -> tuple[str, str, str]:
        """(tag, local namespace declaration, default namespace of the content)."""
        if uri == default:
            return local, "", default
        if not uri:
            return local, ' xmlns=""', ""
        prefix = self._bound_prefix(uri)
        if prefix:
            return f"{prefix}:{local}", "", default
        return local, f' xmlns="{_escape_attr(uri)}"', uri

    def _declarations(self) -> str:
        out = []
        for prefix, uri in self.namespaces.items():
            if not prefix:
                if not self._top_declares_default:
                    out.append(f' xmlns="{_escape_attr(uri)}"')
            else:
                out.append(f' xmlns:{prefix}="{_escape_attr(uri)}"')
        return "".join(out)

    # -- writing ----------------------------------------------------------

    def _start(self, out: list[str], tag: str, local_declaration: str) -> None:
        out.append(f"<{tag}{local_declaration}")
        if self._slot is None:
            self._slot = len(out)
            self._top_declares_default = bool(local_declaration)
            out.append("")

    def _open_raw(
        self, element: ET.Element, default: str, out: list[str], stack: list, extra: tuple[Node, ...] = ()
    ) -> None:
        """Open a verbatim subtree; ``extra`` IR children go after its own content."""
        if not isinstance(element.tag, str):
            return
        uri, local = split_name(element.tag)
        tag, local_declaration, inner = self._tag(uri or "", local, default)
        self._start(out, tag, local_declaration)
        attrs = "".join(
            f' {self._attribute_name(name)}="{_escape_attr(value)}"' for name, value in element.attrib.items()
        )
        if element.text is None and len(element) == 0 and not extra:
            out.append(attrs + "/>")
            return
        out.append(attrs + ">")
        pending: list = []
        if element.text:
            pending.append(_escape_text(element.text))
        for child in element:
            pending.append((_RAW, child, inner))
            if child.tail:
                pending.append(_escape_text(child.tail))
        pending.extend((_NODE, node, 0, True, inner) for node in extra)
        pending.append(f"</{tag}>")
        stack.extend(reversed(pending))

    def _open(self, node: Node, level: int, inline: bool, default: str, out: list[str], stack: list) -> None:
        if node.kind is NodeKind.CHARACTERS:
            out.append(_escape_text(node.text or ""))
            return
        if node.kind is NodeKind.OPAQUE:
            if isinstance(node.raw, str):
                out.append(_escape_text(node.raw))
            else:
                self._open_raw(node.raw, default, out, stack, node.children)
            return
        tag, local_declaration, inner = self._tag(self.svg_uri, node.kind.value, default)
        self._start(out, tag, local_declaration)
        attrs = "".join(
            f' {self._attribute_name(name)}="{_escape_attr(serialize(value, self.precision))}"'
            for name, value in node.attributes.items()
        )
        children = node.children
        if not children:
            out.append(attrs + "/>")
            return
        out.append(attrs + ">")
        child_inline = inline or not self.indent or _is_inline(node)
        pending: list = []
        for child in children:
            if not child_inline:
                pending.append("\n" + " " * (self.indent * (level + 1)))
            pending.append((_NODE, child, level + 1, child_inline, inner))
        if not child_inline:
            pending.append("\n" + " " * (self.indent * level))
        pending.append(f"</{tag}>")
        stack.extend(reversed(pending))

    def write(self, node: Node) -> str:
        out: list[str] = []
        stack: list = [(_NODE, node, 0, False, self.namespaces.get("", ""))]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                out.append(item)
            elif item[0] == _RAW:
                self._open_raw(item[1], item[2], out, stack)
            else:
                _, child, level, inline, default = item
                self._open(child, level, inline, default, out, stack)
        if self._slot is not None:
            out[self._slot] = self._declarations()
        return "".join(out)


def serialize_node(
    node: Node,
    metadata: DocumentMetadata | None = None,
    *,
    precision: int = DEFAULT_PRECISION,
    indent: int | None = 2,
) -> str:
    """Markup for ``node``'s subtree, with namespace declarations on its top element."""
    return _Writer(metadata or DocumentMetadata(), precision, indent).write(node)


def serialize_svg(
    document: Document,
    *,
    precision: int = DEFAULT_PRECISION,
    indent: int | None = 2,
    xml_declaration: bool = True,
) -> str:
    """Encode a Document as SVG text."""
    body = serialize_node(document.root, document.metadata, precision=precision, indent=indent)
    if xml_declaration:
        return XML_DECLARATION + "\n" + body
    return body


# ---------------------------------------------------------------------------
# Generic element tree
# ---------------------------------------------------------------------------


def _clark(name: str, namespaces: dict[str, str]) -> str:
    prefix, sep, local = name.partition(":")
    if not sep or name.startswith("{"):
        return name
    uri = _FIXED_URIS.get(prefix) or namespaces.get(prefix)
    return f"{{{uri}}}{local}" if uri else name


def _append_text(parent: ET.Element, text: str) -> None:
    if len(parent):
        last = parent[-1]
        last.tail = (last.tail or "") + text
    else:
        parent.text = (parent.text or "") + text


def _element_for(node: Node, namespaces: dict[str, str], precision: int) -> ET.Element:
    if node.kind is NodeKind.OPAQUE:
        return copy.deepcopy(node.raw)
    element = ET.Element(f"{{{SVG_NS}}}{node.kind.value}")
    for name, value in node.attributes.items():
        element.set(_clark(name, namespaces), serialize(value, precision))
    return element


def document_to_element(document: Document, *, precision: int = DEFAULT_PRECISION) -> ET.Element:
    """IR to generic attributed tree with Clark-notation names."""
    namespaces = document.metadata.namespaces
    root = _element_for(document.root, namespaces, precision)
    # Children are handled in document order so text lands after its preceding sibling.
    stack = [(child, root) for child in reversed(document.root.children)]
    while stack:
        node, parent = stack.pop()
        if node.kind is NodeKind.CHARACTERS:
            _append_text(parent, node.text or "")
        elif node.kind is NodeKind.OPAQUE and isinstance(node.raw, str):
            _append_text(parent, node.raw)
        else:
            element = _element_for(node, namespaces, precision)
            parent.append(element)
            stack.extend((child, element) for child in reversed(node.children))
    return root
