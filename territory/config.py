"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    territory_log_level: str = "info"

    # Defaults for TerritoryConfig.from_settings()
    territory_cell_size: float = 25.0
    territory_contour_threshold: float = 0.3
    territory_boundary_padding: float = 50.0
    territory_debug_mode: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
