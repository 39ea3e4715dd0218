"""Exception taxonomy for the svgir document model.

Decode problems on external input are collected into a report instead of being
raised; everything here is for callers that misuse the programmatic API or for
inputs that cannot be decoded at all.
"""

from __future__ import annotations


class SvgIrError(Exception):
    """Base class for all svgir errors."""


class ParseError(SvgIrError, ValueError):
    """Malformed attribute text. Position is a zero-based offset into ``text``."""

    def __init__(self, message: str, text: str = "", position: int = 0, length: int = 1) -> None:
        self.message = message
        self.text = text
        self.position = position
        self.fragment = text[position:position + max(length, 1)] if text else ""
        super().__init__(f"{message} at position {position}" + (f" ({self.fragment!r})" if self.fragment else ""))


class SchemaViolation(SvgIrError):
    """Disallowed child placement, structural cycle or missing required attribute."""


class DuplicateIdError(SvgIrError):
    def __init__(self, element_id: str) -> None:
        self.element_id = element_id
        super().__init__(f"Duplicate id: {element_id!r}")


class UnresolvedReferenceError(SvgIrError):
    """A paint or href names an id that is not present in the document."""

    def __init__(self, reference: str) -> None:
        self.reference = reference
        super().__init__(f"Unresolved reference: {reference!r}")


class ResourceLimitExceeded(SvgIrError):
    def __init__(self, limit: str, value: int, maximum: int) -> None:
        self.limit = limit
        self.value = value
        self.maximum = maximum
        super().__init__(f"{limit} limit exceeded: {value} > {maximum}")


class MalformedDocumentError(SvgIrError):
    """The input text is not well-formed XML."""


class IntegrityError(RuntimeError):
    """Internal invariant broken. This is a bug, not a user error."""
