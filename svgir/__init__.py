"""svgir: a typed, schema-checked document model for SVG."""

__version__ = "0.1.0"
