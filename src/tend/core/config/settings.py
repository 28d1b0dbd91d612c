"""Application settings loaded from environment variables."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Relationship garden server configuration."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Server
    # Loopback by default; contact data is personal and there is no auth layer.
    tend_host: str = "127.0.0.1"
    tend_port: int = 8011
    tend_log_level: str = "info"
    tend_allow_insecure_bind: bool = False

    # Garden layout
    garden_layout_mode: Literal["frequency", "tier"] = "frequency"
    garden_layout_max_nodes: int = 300

    # Triage
    triage_max_size: int = 5

    # Social forecast
    forecast_horizon_days: int = 30
    forecast_storm_tolerance: float = 1.0

    # Memoization (entries per cache)
    memo_cache_size: int = 32

    # Contact source: YAML seed file; empty uses the mock garden
    contacts_path: str = ""


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
