"""Document: owns the root node, the weak id index and document metadata.

All structural mutation of an attached tree goes through ``insert`` and
``remove`` so the id index never disagrees with the tree.
"""

from __future__ import annotations

import logging
import weakref
from collections.abc import Iterator

from svgir.document.issues import (
    INVALID_LANGUAGE_TAG,
    MISSING_ATTRIBUTE,
    PARSE_ERROR,
    UNRESOLVED_REFERENCE,
    Issue,
)
from svgir.document.metadata import DocumentMetadata
from svgir.document.node import LANGUAGE_ATTRIBUTES, Node, check_placement
from svgir.errors import DuplicateIdError, IntegrityError, SchemaViolation, UnresolvedReferenceError
from svgir.schema import NodeKind, get_registry
from svgir.values import AttributeValue, Color, Inherit, Iri, ListOf, Paint, RawValue, ViewBox, serialize

logger = logging.getLogger(__name__)


def _local_id(value: AttributeValue | str) -> str | None:
    """The ``#id`` fragment named by a paint, IRI or reference text, if any."""
    if isinstance(value, Paint):
        return value.ref_id
    if isinstance(value, Iri):
        return value.fragment
    if isinstance(value, RawValue):
        value = value.text.strip()
    if isinstance(value, str):
        if value.startswith("url(") and value.endswith(")"):
            value = value[4:-1].strip()
        return value[1:] if value.startswith("#") and len(value) > 1 else None
    return None


def _references(value: AttributeValue) -> Iterator[AttributeValue]:
    if isinstance(value, ListOf):
        for item in value.items:
            yield from _references(item)
    elif isinstance(value, (Paint, Iri)):
        yield value


def missing_required(node: Node) -> list[tuple[Node, str]]:
    """(node, attribute) pairs for required attributes absent in ``node``'s subtree."""
    registry = get_registry()
    missing = []
    for n in node.iter():
        if n.kind.is_element:
            for name in registry.required_attributes(n.kind):
                if name not in n.attributes:
                    missing.append((n, name))
    return missing


def effective_value(node: Node, name: str) -> AttributeValue | None:
    """Explicit value > nearest ancestor's explicit value (inheritable only) > schema default.

    An explicit ``inherit`` continues the walk for any attribute. Unparsed text
    stored for a known attribute counts as absent.
    """
    registry = get_registry()
    definition = None
    if node.kind.is_element:
        definition = registry.attribute_schema(node.kind, name)
    if definition is None:
        definition = registry.presentation_attribute(name)
    inheritable = definition is not None and definition.inheritable

    current: Node | None = node
    while current is not None:
        value = current.get(name)
        if isinstance(value, RawValue) and definition is not None:
            value = None
        if value is not None and not isinstance(value, Inherit):
            return value
        if value is None and not inheritable:
            break
        current = current.parent
    return definition.default if definition is not None else None


class Document:
    def __init__(self, root: Node, *, metadata: DocumentMetadata | None = None) -> None:
        if root.parent is not None or root.document is not None:
            raise SchemaViolation("document root must be a detached node")
        if not root.kind.is_element:
            raise SchemaViolation(f"{root.kind.value} cannot be a document root")
        self._root = root
        self.metadata = metadata or DocumentMetadata()
        self._index: dict[str, weakref.ref[Node]] = {}
        ids = self._collect_ids(root)
        for node in root.iter():
            node._document = weakref.ref(self)
        for element_id, node in ids.items():
            self._index[element_id] = weakref.ref(node)
        logger.debug("Document created: %d nodes, %d ids", self.node_count, len(self._index))

    @classmethod
    def build(cls, root: Node, *, metadata: DocumentMetadata | None = None) -> Document:
        return cls(root, metadata=metadata)

    def __repr__(self) -> str:
        return f"<Document root={self._root.element_name} nodes={self.node_count}>"

    @property
    def root(self) -> Node:
        return self._root

    @property
    def view_box(self) -> ViewBox | None:
        value = self._root.get("viewBox")
        return value if isinstance(value, ViewBox) else None

    # -- traversal --------------------------------------------------------

    def iter_nodes(self) -> Iterator[Node]:
        return self._root.iter()

    @property
    def node_count(self) -> int:
        return sum(1 for _ in self._root.iter())

    def ids(self) -> list[str]:
        return list(self._index)

    # -- id index ---------------------------------------------------------

    def _collect_ids(self, subtree: Node) -> dict[str, Node]:
        found: dict[str, Node] = {}
        for node in subtree.iter():
            element_id = node.id
            if element_id is None:
                continue
            if element_id in found or element_id in self._index:
                raise DuplicateIdError(element_id)
            found[element_id] = node
        return found

    def _reindex(self, node: Node, old_id: str | None, new_id: str | None) -> None:
        if old_id == new_id:
            return
        if new_id is not None and new_id in self._index:
            raise DuplicateIdError(new_id)
        if old_id is not None:
            self._index.pop(old_id, None)
        if new_id is not None:
            self._index[new_id] = weakref.ref(node)

    def resolve(self, element_id: str) -> Node | None:
        ref = self._index.get(element_id)
        if ref is None:
            return None
        node = ref()
        if node is None or node.document is not self or node.id != element_id:
            raise IntegrityError(f"id index entry {element_id!r} is stale")
        return node

    # -- mutation ---------------------------------------------------------

    def insert(self, parent: Node, index: int | None, node: Node) -> Node:
        """Attach ``node`` under ``parent``; on any failure the document is left unchanged."""
        if parent.document is not self:
            raise SchemaViolation(f"{parent.element_name} does not belong to this document")
        check_placement(parent, node)
        missing = missing_required(node)
        if missing:
            where, name = missing[0]
            raise SchemaViolation(f"{where.element_name} is missing required attribute {name!r}")
        ids = self._collect_ids(node)

        parent._attach(index, node)
        for n in node.iter():
            n._document = weakref.ref(self)
        for element_id, n in ids.items():
            self._index[element_id] = weakref.ref(n)
        logger.debug("Inserted %s under %s (%d ids)", node.element_name, parent.element_name, len(ids))
        return node

    def append(self, parent: Node, node: Node) -> Node:
        return self.insert(parent, None, node)

    def remove(self, node: Node) -> Node:
        """Detach ``node``'s subtree and drop its ids from the index."""
        if node.document is not self:
            raise SchemaViolation(f"{node.element_name} does not belong to this document")
        if node is self._root:
            raise SchemaViolation("cannot remove the document root")
        parent = node.parent
        if parent is None:
            raise IntegrityError(f"attached {node.element_name} has no parent")
        parent._detach(node)
        for n in node.iter():
            element_id = n.id
            if element_id is not None:
                ref = self._index.get(element_id)
                if ref is not None and ref() is n:
                    del self._index[element_id]
            n._document = None
        logger.debug("Removed %s", node.element_name)
        return node

    # -- attribute resolution ---------------------------------------------

    def effective(self, node: Node, name: str) -> AttributeValue | None:
        return effective_value(node, name)

    def resolve_reference(self, value: AttributeValue | str) -> Node:
        element_id = _local_id(value)
        if element_id is None:
            raise UnresolvedReferenceError(value if isinstance(value, str) else serialize(value))
        target = self.resolve(element_id)
        if target is None:
            raise UnresolvedReferenceError(f"#{element_id}")
        return target

    def resolve_paint(self, node: Node, name: str = "fill") -> Color | Node | None:
        """Solid color or paint-server node for ``name``; falls back to the paint's fallback color."""
        value = self.effective(node, name)
        if isinstance(value, Color):
            return value
        if not isinstance(value, Paint):
            return None
        if value.color is not None:
            return value.color
        try:
            return self.resolve_reference(value)
        except UnresolvedReferenceError:
            if value.fallback is not None:
                logger.debug("Paint %s unresolved, using fallback", value.ref)
                return value.fallback
            raise

    def reference_chain(self, node: Node, attribute: str = "href") -> list[Node]:
        """``node`` followed by the templates it names through ``href``/``xlink:href``.

        Stops at a missing target or at the first node already seen.
        """
        names = (attribute, "xlink:href") if attribute == "href" else (attribute,)
        chain = [node]
        seen = {node}
        current = node
        while True:
            ref = next((current.get(n) for n in names if current.get(n) is not None), None)
            element_id = _local_id(ref) if ref is not None else None
            if element_id is None:
                break
            target = self.resolve(element_id)
            if target is None:
                logger.info("Template reference #%s is unresolved", element_id)
                break
            if target in seen:
                logger.warning("Reference cycle through #%s", element_id)
                break
            seen.add(target)
            chain.append(target)
            current = target
        return chain

    def gradient_stops(self, gradient: Node) -> list[Node]:
        """Own stops, or those of the first template in the chain that has any."""
        for node in self.reference_chain(gradient):
            stops = [c for c in node.children if c.kind is NodeKind.STOP]
            if stops:
                return stops
        return []

    # -- checks -----------------------------------------------------------

    def validate(self) -> list[Issue]:
        issues: list[Issue] = []
        for node, name in missing_required(self._root):
            issues.append(
                Issue(MISSING_ATTRIBUTE, f"{node.element_name} requires {name!r}", node.element_name, name)
            )
        registry = get_registry()
        for node in self._root.iter():
            if not node.kind.is_element:
                continue
            for name, value in node.attributes.items():
                if isinstance(value, RawValue):
                    if name in LANGUAGE_ATTRIBUTES:
                        issues.append(
                            Issue(INVALID_LANGUAGE_TAG, f"invalid language tag {value.text!r}", node.element_name, name)
                        )
                    elif name != "id" and registry.attribute_schema(node.kind, name) is not None:
                        issues.append(
                            Issue(PARSE_ERROR, f"unparsed value {value.text!r}", node.element_name, name)
                        )
                    continue
                for ref in _references(value):
                    element_id = _local_id(ref)
                    if element_id is not None and self.resolve(element_id) is None:
                        issues.append(
                            Issue(
                                UNRESOLVED_REFERENCE,
                                f"reference to missing element #{element_id}",
                                node.element_name,
                                name,
                            )
                        )
        return issues

    def check_integrity(self) -> None:
        """Raise IntegrityError if parent links, document links or the id index are inconsistent."""
        if self._root.parent is not None:
            raise IntegrityError("document root has a parent")
        seen: dict[str, Node] = {}
        for node in self._root.iter():
            if node.document is not self:
                raise IntegrityError(f"{node.element_name} is not linked to this document")
            for child in node.children:
                if child.parent is not node:
                    raise IntegrityError(f"{child.element_name} has a wrong parent link")
            element_id = node.id
            if element_id is None:
                continue
            if element_id in seen:
                raise IntegrityError(f"id {element_id!r} appears twice")
            seen[element_id] = node
            ref = self._index.get(element_id)
            if ref is None or ref() is not node:
                raise IntegrityError(f"id {element_id!r} is not indexed")
        stale = set(self._index) - set(seen)
        if stale:
            raise IntegrityError(f"id index holds detached entries: {sorted(stale)}")
