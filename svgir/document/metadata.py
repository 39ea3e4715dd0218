"""Document-level metadata: namespace table and default units."""

from __future__ import annotations

from dataclasses import dataclass, field

from svgir.values import Unit

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"
XML_NS = "http://www.w3.org/XML/1998/namespace"

DEFAULT_NAMESPACES = {"": SVG_NS, "xlink": XLINK_NS}


@dataclass
class DocumentMetadata:
    """Prefix to URI table ("" is the default namespace) plus the unit for unitless lengths."""

    namespaces: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_NAMESPACES))
    default_unit: Unit | None = None

    def prefix_for(self, uri: str) -> str | None:
        for prefix, known in self.namespaces.items():
            if known == uri:
                return prefix
        return None
