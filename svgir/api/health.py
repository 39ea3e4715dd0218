"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from svgir import __version__
from svgir.models.responses import HealthResponse
from svgir.schema import get_registry

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=__version__,
        node_kinds_registered=get_registry().count,
    )
