"""FastAPI dependency injection."""

from __future__ import annotations

from svgir.config import Settings, settings
from svgir.svg.parser import DecodeLimits


def get_settings() -> Settings:
    return settings


def get_limits() -> DecodeLimits:
    return DecodeLimits.from_settings(settings)
