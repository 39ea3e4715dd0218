"""Apply add/delete/modify edit operations to a Document.

Every change goes through ``Document.insert``/``remove`` and ``Node.set`` so
schema and id checks hold. A failing operation is logged and reported in the
change log; it never aborts the batch.
"""

from __future__ import annotations

import logging

from svgir.document import Document, Node
from svgir.errors import DuplicateIdError, ParseError, SchemaViolation, SvgIrError
from svgir.models.edit_ops import EditOp
from svgir.svg.parser import DecodeLimits, parse_fragment, split_name

logger = logging.getLogger(__name__)


def apply_edits(document: Document, ops: list[EditOp], *, limits: DecodeLimits | None = None) -> list[str]:
    """Apply ``ops`` in order and return a human-readable change log.

    Elements are addressed by id. If the same target is both deleted and
    modified, delete wins. ``limits`` guard the markup of add operations.
    """
    changes: list[str] = []

    targets_to_delete: set[str] = set()
    for op in ops:
        if op.action == "delete" and op.target:
            targets_to_delete.add(op.target)

    for op in ops:
        if op.action == "delete":
            node = document.resolve(op.target) if op.target else None
            if node is None:
                logger.warning("Edit op delete: unknown target %r, skipping", op.target)
                changes.append(f"skipped delete: unknown target {op.target!r}")
                continue
            try:
                document.remove(node)
            except SchemaViolation as exc:
                logger.warning("Edit op delete on %s rejected: %s", op.target, exc)
                changes.append(f"skipped delete {op.target}: {exc}")
                continue
            changes.append(f"deleted {op.target}")

        elif op.action == "modify":
            node = document.resolve(op.target) if op.target else None
            if node is None:
                logger.warning("Edit op modify: unknown target %r, skipping", op.target)
                changes.append(f"skipped modify: unknown target {op.target!r}")
                continue
            if op.target in targets_to_delete:
                logger.info("Edit op modify on %s skipped, target is being deleted", op.target)
                changes.append(f"skipped modify {op.target}: target deleted")
                continue
            if not op.attributes:
                continue
            changes.extend(_modify(node, op.target, op.attributes))

        elif op.action == "add":
            changes.extend(_add(document, op, limits))

    return changes


def _modify(node: Node, target: str, attributes: dict[str, str]) -> list[str]:
    changes = []
    for name, text in attributes.items():
        try:
            if text == "":
                node.remove_attribute(name)
                changes.append(f"removed {name} from {target}")
            else:
                node.set(name, text)
                changes.append(f"set {name}={text!r} on {target}")
        except (ParseError, SchemaViolation, DuplicateIdError) as exc:
            logger.warning("Edit op modify %s.%s rejected: %s", target, name, exc)
            changes.append(f"skipped {name} on {target}: {exc}")
    return changes


def _resolve_add_position(document: Document, position: str | None) -> tuple[Node, int | None] | None:
    """Resolve an add position to (parent, index).

    Supported formats:
    - "after:<id>": right after the element, same parent
    - "before:<id>": right before the element, same parent
    - "into:<id>": last child of the element
    - "end" or None: last child of the root
    """
    if not position or position.strip().lower() == "end":
        return document.root, None

    if ":" not in position:
        return None
    directive, element_id = position.split(":", 1)
    directive = directive.strip().lower()
    node = document.resolve(element_id.strip())
    if node is None:
        return None

    if directive == "into":
        return node, None
    parent = node.parent
    if parent is None:
        return None
    index = node.index_in_parent()
    if directive == "after":
        return parent, index + 1
    if directive == "before":
        return parent, index
    return None


def _add(document: Document, op: EditOp, limits: DecodeLimits | None) -> list[str]:
    fragment = op.svg_fragment or ""
    if not fragment.strip():
        logger.warning("Edit op add: empty svg_fragment, skipping")
        return ["skipped add: empty fragment"]
    placement = _resolve_add_position(document, op.position)
    if placement is None:
        logger.warning("Edit op add: could not resolve position %r, skipping", op.position)
        return [f"skipped add: unresolved position {op.position!r}"]
    parent, index = placement
    try:
        nodes, report = parse_fragment(fragment, document.metadata.namespaces, parent=parent.kind, limits=limits)
    except SvgIrError as exc:
        logger.warning("Edit op add: fragment rejected: %s", exc)
        return [f"skipped add: {exc}"]
    for issue in report:
        logger.info("Edit op add: %s (%s)", issue.message, issue.code)

    changes = []
    for node in nodes:
        try:
            document.insert(parent, index, node)
        except (SchemaViolation, DuplicateIdError) as exc:
            logger.warning("Edit op add: %s rejected: %s", _label(node), exc)
            changes.append(f"skipped add {_label(node)}: {exc}")
            continue
        if index is not None:
            index += 1
        label = f"{_label(node)}#{node.id}" if node.id else _label(node)
        changes.append(f"added {label} to {parent.id or _label(parent)}")
    return changes


def _label(node: Node) -> str:
    return split_name(node.element_name)[1]
