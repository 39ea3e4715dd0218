"""Document / IR model: nodes, documents, the id index and the builder surface."""

from svgir.document.builder import E, ElementBuilder, build_document
from svgir.document.document import Document, effective_value
from svgir.document.issues import DecodeReport, Issue
from svgir.document.metadata import DEFAULT_NAMESPACES, SVG_NS, XLINK_NS, XML_NS, DocumentMetadata
from svgir.document.node import Node

__all__ = [
    "DEFAULT_NAMESPACES",
    "SVG_NS",
    "XLINK_NS",
    "XML_NS",
    "DecodeReport",
    "Document",
    "DocumentMetadata",
    "E",
    "ElementBuilder",
    "Issue",
    "Node",
    "build_document",
    "effective_value",
]
