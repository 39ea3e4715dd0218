"""Edit operation models for structural document changes."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class EditOp(BaseModel):
    """A single edit operation on a document element."""

    action: Literal["add", "delete", "modify"]
    target: str | None = None  # Element id (required for delete/modify)
    position: str | None = None  # For add: "end", "after:<id>", "before:<id>", "into:<id>"
    svg_fragment: str | None = None  # For add: markup for one or more elements
    attributes: dict[str, str] | None = None  # For modify: attrs to set; "" removes the attribute


class EditPlan(BaseModel):
    """Ordered batch of edit operations."""

    reasoning: str = ""
    operations: list[EditOp]
