"""Device boundary: the visiting contract rendering backends implement.

``visit`` walks a Document in document order and yields DrawOps carrying each
node's resolved presentation attributes and current transformation matrix.
Backends either consume ``visit`` directly or subclass VisitingDevice.
"""

from __future__ import annotations

import abc
import enum
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

import numpy as np
from numpy.typing import NDArray

from svgir.document import Document, Node, effective_value
from svgir.errors import UnresolvedReferenceError
from svgir.schema import NodeKind, get_registry
from svgir.values import AttributeValue, Inherit, Length, RawValue, TransformList

logger = logging.getLogger(__name__)

K = NodeKind

CONTAINERS = frozenset({K.SVG, K.G, K.A, K.SWITCH, K.USE})
GRAPHICS = frozenset({K.PATH, K.RECT, K.CIRCLE, K.ELLIPSE, K.LINE, K.POLYLINE, K.POLYGON, K.IMAGE})
TEXT = frozenset({K.TEXT})

_Computed = dict[str, AttributeValue]


class OpKind(str, enum.Enum):
    PUSH = "push"
    DRAW = "draw"
    TEXT = "text"
    POP = "pop"


@dataclass(frozen=True)
class DrawOp:
    kind: OpKind
    node: Node
    attributes: Mapping[str, AttributeValue] = field(default_factory=dict)
    ctm: NDArray[np.float64] = field(default_factory=lambda: np.identity(3))
    text: str | None = None

    @property
    def element_name(self) -> str:
        return self.node.element_name


def _user_units(value: AttributeValue | None) -> float:
    if not isinstance(value, Length):
        return 0.0
    try:
        return value.to_user_units()
    except ValueError:
        logger.debug("Percentage offset %r treated as 0", value)
        return 0.0


def _translation(tx: float, ty: float) -> NDArray[np.float64]:
    return np.array([[1.0, 0.0, tx], [0.0, 1.0, ty], [0.0, 0.0, 1.0]])


def _local_transform(node: Node) -> NDArray[np.float64]:
    m = np.identity(3)
    transform = node.get("transform")
    if isinstance(transform, TransformList):
        m = m @ transform.to_matrix()
    if node.kind is K.USE or (node.kind is K.SVG and node.parent is not None):
        m = m @ _translation(_user_units(node.get("x")), _user_units(node.get("y")))
    return m


def _compute(node: Node, inherited: _Computed) -> _Computed:
    """Own attributes overlaid with resolved presentation values.

    Inheritance follows the traversal path, so content instanced by ``use``
    inherits from the ``use`` element rather than from its definition site.
    """
    registry = get_registry()
    computed: _Computed = {}
    for name, value in node.attributes.items():
        if not isinstance(value, (RawValue, Inherit)) or registry.presentation_attribute(name) is None:
            computed[name] = value
    for name, definition in registry.presentation_items():
        own = node.get(name)
        if isinstance(own, RawValue):
            own = None
        if own is not None and not isinstance(own, Inherit):
            continue
        if own is not None or definition.inheritable:
            value = inherited.get(name, definition.default)
        else:
            value = definition.default
        if value is not None:
            computed[name] = value
        else:
            computed.pop(name, None)
    return computed


def _text_content(node: Node) -> str:
    return "".join(n.text or "" for n in node.iter() if n.kind is K.CHARACTERS)


def _renderable(kind: NodeKind) -> bool:
    return kind in CONTAINERS or kind in GRAPHICS or kind in TEXT


# Work item tags for the visitor's stack.
_VISIT = "visit"
_EMIT = "emit"
_LEAVE = "leave"


class _Visitor:
    """Walks the render tree with an explicit stack, so depth is bounded by memory only."""

    def __init__(self, document: Document) -> None:
        self.document = document
        self.expanding: list[Node] = []

    def ops(self, start: Node, ctm: NDArray[np.float64], inherited: _Computed) -> Iterator[DrawOp]:
        stack: list[tuple] = [(_VISIT, start, ctm, inherited)]
        while stack:
            item = stack.pop()
            if item[0] == _EMIT:
                yield item[1]
                continue
            if item[0] == _LEAVE:
                self.expanding.pop()
                continue
            _, node, ctm, inherited = item
            kind = node.kind
            if not _renderable(kind):
                continue
            ctm = ctm @ _local_transform(node)
            attributes = _compute(node, inherited)
            frozen = MappingProxyType(attributes)
            if kind in GRAPHICS:
                yield DrawOp(OpKind.DRAW, node, frozen, ctm)
                continue
            if kind in TEXT:
                yield DrawOp(OpKind.TEXT, node, frozen, ctm, _text_content(node))
                continue

            yield DrawOp(OpKind.PUSH, node, frozen, ctm)
            pending: list[tuple] = []
            if kind is K.USE:
                pending.extend(self.expand_use(node, ctm, attributes))
            elif kind is K.SWITCH:
                for child in node.children:
                    if _renderable(child.kind):
                        pending.append((_VISIT, child, ctm, attributes))
                        break
            else:
                pending.extend((_VISIT, child, ctm, attributes) for child in node.children)
            pending.append((_EMIT, DrawOp(OpKind.POP, node, frozen, ctm)))
            stack.extend(reversed(pending))

    def expand_use(self, use: Node, ctm: NDArray[np.float64], inherited: _Computed) -> list[tuple]:
        """Work items for the content a ``use`` instances; empty when unresolved or cyclic."""
        ref = use.get("href") or use.get("xlink:href")
        if ref is None:
            return []
        try:
            target = self.document.resolve_reference(ref)
        except UnresolvedReferenceError as exc:
            logger.info("use skipped: %s", exc)
            return []
        if target is use or target.is_ancestor_of(use) or any(t is target for t in self.expanding):
            logger.warning("use cycle through #%s skipped", target.id)
            return []
        self.expanding.append(target)
        if target.kind is K.SYMBOL:
            attributes = _compute(target, inherited)
            frozen = MappingProxyType(attributes)
            items: list[tuple] = [(_EMIT, DrawOp(OpKind.PUSH, target, frozen, ctm))]
            items.extend((_VISIT, child, ctm, attributes) for child in target.children)
            items.append((_EMIT, DrawOp(OpKind.POP, target, frozen, ctm)))
        else:
            items = [(_VISIT, target, ctm, inherited)]
        items.append((_LEAVE,))
        return items


def visit(document: Document, start: Node | None = None) -> Iterator[DrawOp]:
    """Yield draw operations for ``start`` (default: the root) in document order.

    Non-rendered content (definitions, paint servers, clip paths, masks,
    markers, filters, descriptive elements, style sheets, opaque content) is
    skipped; it is reachable through references only.
    """
    start = start or document.root
    if start.document is not document:
        raise ValueError(f"{start.element_name} does not belong to this document")
    ctm = np.identity(3)
    inherited: _Computed = {}
    parent = start.parent
    if parent is not None:
        for ancestor in reversed([parent, *parent.ancestors()]):
            ctm = ctm @ _local_transform(ancestor)
        for name, _ in get_registry().presentation_items():
            value = effective_value(parent, name)
            if value is not None:
                inherited[name] = value
    yield from _Visitor(document).ops(start, ctm, inherited)


class Device(abc.ABC):
    """A consumer of documents. Devices never mutate the document they render."""

    @abc.abstractmethod
    def render(self, document: Document, start: Node | None = None) -> Any:
        ...


class VisitingDevice(Device):
    """Dispatches each DrawOp to ``on_push``/``on_draw``/``on_text``/``on_pop``."""

    def render(self, document: Document, start: Node | None = None) -> Any:
        self.begin(document)
        handlers = {
            OpKind.PUSH: self.on_push,
            OpKind.DRAW: self.on_draw,
            OpKind.TEXT: self.on_text,
            OpKind.POP: self.on_pop,
        }
        for op in visit(document, start):
            handlers[op.kind](op)
        return self.finish()

    def begin(self, document: Document) -> None:
        pass

    def on_push(self, op: DrawOp) -> None:
        pass

    def on_draw(self, op: DrawOp) -> None:
        pass

    def on_text(self, op: DrawOp) -> None:
        pass

    def on_pop(self, op: DrawOp) -> None:
        pass

    @abc.abstractmethod
    def finish(self) -> Any:
        ...
