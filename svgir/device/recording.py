"""Reference device that records the operation stream it is handed."""

from __future__ import annotations

from svgir.device.base import DrawOp, OpKind, VisitingDevice
from svgir.document import Document


class RecordingDevice(VisitingDevice):
    """Records ``(kind, element name, id)`` per operation; ``ops`` keeps the full DrawOps."""

    def __init__(self) -> None:
        self.ops: list[DrawOp] = []
        self.events: list[tuple[OpKind, str, str | None]] = []

    def begin(self, document: Document) -> None:
        self.ops = []
        self.events = []

    def _record(self, op: DrawOp) -> None:
        self.ops.append(op)
        self.events.append((op.kind, op.element_name, op.node.id))

    on_push = on_draw = on_text = on_pop = _record

    def finish(self) -> list[tuple[OpKind, str, str | None]]:
        return list(self.events)

    def drawn(self) -> list[DrawOp]:
        return [op for op in self.ops if op.kind in (OpKind.DRAW, OpKind.TEXT)]
