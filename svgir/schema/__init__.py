"""Schema registry: node kinds, attribute grammars and content models."""

from svgir.schema.registry import AttributeDefinition, NodeKind, Schema, SchemaRegistry, get_registry

__all__ = ["AttributeDefinition", "NodeKind", "Schema", "SchemaRegistry", "get_registry"]
