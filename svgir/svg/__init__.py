"""XML bridge: SVG text to IR Document and back."""

from svgir.svg.parser import DecodeLimits, DecodeResult, parse_fragment, parse_svg
from svgir.svg.serializer import document_to_element, serialize_node, serialize_svg

__all__ = [
    "DecodeLimits",
    "DecodeResult",
    "document_to_element",
    "parse_fragment",
    "parse_svg",
    "serialize_node",
    "serialize_svg",
]
