"""Application configuration settings."""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the species recommendation service."""

    data_dir: Path = Path("data")

    # Catalog source. A URL takes precedence over the bundled JSON file.
    species_catalog_url: Optional[str] = None
    catalog_timeout_seconds: float = 10.0

    # Ranking knobs
    max_results: int = 6
    min_score: float = 15.0
    match_score_ceiling: float = 60.0

    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="FORESTWISE_", env_file=".env", env_file_encoding="utf-8")

    @property
    def species_catalog_path(self) -> Path:
        return self.data_dir / "species.json"


@lru_cache(1)
def get_settings() -> Settings:
    return Settings()
