from functools import lru_cache

from pydantic import Field, AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    database_url: str = "postgresql://localhost:5432/wya"
    store_backend: str = "postgres"  # "postgres" or "memory"
    supabase_url: str = ""
    supabase_service_role_key: str = Field(
        default="", validation_alias=AliasChoices("supabase_service_role_key", "identity_admin_key")
    )
    expo_push_url: str = "https://exp.host/--/api/v2/push/send"
    expo_access_token: str = ""
    http_timeout_seconds: float = 10.0
    inactivity_days: int = 30
    inactivity_scan_interval_seconds: int = 86400  # 0 disables the background loop
    cors_origins: str = "*"
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
