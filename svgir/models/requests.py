"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from svgir.models.edit_ops import EditOp


class DocumentRequest(BaseModel):
    svg: str = Field(..., description="Raw SVG code")


class NormalizeRequest(DocumentRequest):
    precision: int | None = Field(default=None, ge=0, le=15, description="Decimal places for numbers")
    indent: int | None = Field(default=None, ge=0, le=8, description="Spaces per nesting level, 0 for compact")


class EditRequest(DocumentRequest):
    operations: list[EditOp] = Field(..., description="Ordered edit operations")
