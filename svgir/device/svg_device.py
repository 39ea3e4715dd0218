"""The built-in textual device: the encode path plus formatting."""

from __future__ import annotations

from typing import TYPE_CHECKING

from svgir.device.base import Device
from svgir.document import Document, Node
from svgir.svg.serializer import serialize_node, serialize_svg
from svgir.values import DEFAULT_PRECISION

if TYPE_CHECKING:
    from svgir.config import Settings


class SvgDevice(Device):
    def __init__(self, precision: int = DEFAULT_PRECISION, indent: int | None = 2, xml_declaration: bool = True) -> None:
        self.precision = precision
        self.indent = indent
        self.xml_declaration = xml_declaration

    @classmethod
    def from_settings(cls, settings: Settings) -> SvgDevice:
        return cls(precision=settings.numeric_precision, indent=settings.indent)

    def render(self, document: Document, start: Node | None = None) -> str:
        if start is None or start is document.root:
            return serialize_svg(
                document, precision=self.precision, indent=self.indent, xml_declaration=self.xml_declaration
            )
        if start.document is not document:
            raise ValueError(f"{start.element_name} does not belong to this document")
        return serialize_node(start, document.metadata, precision=self.precision, indent=self.indent)
