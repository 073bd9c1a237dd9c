"""Application configuration managed via environment variables."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Compliance Scheduler Backend"
    debug: bool = False
    log_level: str = "INFO"
    seed_demo_data: bool = True
    grid_lead_days: int = 5
    grid_trail_days: int = 10
    default_viewport_width: int = 1200
    min_day_width_px: float = 24.0
    row_height_px: float = 40.0
    handle_width_px: float = 8.0
    connector_width_px: float = 12.0
    max_recurrence_instances: int = 2000


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
