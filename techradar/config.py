from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized runtime configuration loaded from environment variables.
    """

    SUPABASE_URL: str
    SUPABASE_SERVICE_ROLE_KEY: str
    SUPABASE_ANON_KEY: str | None = None
    API_PREFIX: str = "/api"
    APP_NAME: str = "Techradar API"
    ALLOWED_ORIGINS: list[str] = ["*"]
    SITE_URL: str = "http://localhost:3000"
    SUPABASE_TIMEOUT_SECONDS: int = 10
    # PostgREST code for "single() matched zero rows"
    NOT_FOUND_ERROR_CODE: str = "PGRST116"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
