"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    svgir_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Decode guards
    max_depth: int = 256
    max_nodes: int = 100_000
    max_input_chars: int = 10_000_000

    # Encode formatting
    numeric_precision: int = 6
    indent: int = 2

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
