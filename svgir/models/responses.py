"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    node_kinds_registered: int = 0


class IssueModel(BaseModel):
    code: str
    message: str
    element: str | None = None
    attribute: str | None = None
    position: int | None = None


class NormalizeResponse(BaseModel):
    svg: str
    node_count: int = 0
    issues: list[IssueModel] = Field(default_factory=list)


class ValidateResponse(BaseModel):
    valid: bool
    issues: list[IssueModel] = Field(default_factory=list)


class EditResponse(BaseModel):
    svg: str
    changes: list[str] = Field(default_factory=list)
