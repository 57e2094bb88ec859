"""Application configuration managed via environment variables."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Brain Dump Backend"
    debug: bool = False
    log_level: str = "INFO"
    database_url: str = "postgresql+psycopg2://localhost:5432/braindump"
    openai_base_url: str = "https://api.openai.com/v1"
    openai_api_key: str | None = None
    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "braindump"
    scheduler_enabled: bool = True
    scheduler_timezone: str = "UTC"
    task_workers: int = 4
    # Unset keeps pending tasks in memory; point at a database to survive restarts.
    task_jobstore_url: str | None = None
    task_recover_on_startup: bool = True


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
