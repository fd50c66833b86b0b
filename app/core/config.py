# app/core/config.py
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "Tutoring Marketplace API"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False

    database_url: str = "sqlite:///./tutoring.db"

    # auth
    secret_key: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    # logging
    log_level: str = "INFO"
    log_format: str = "text"  # text | json

    # listing sizes
    search_page_size: int = 12
    list_page_size: int = 10

    @field_validator("log_format")
    @classmethod
    def check_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("text", "json"):
            raise ValueError("log_format must be 'text' or 'json'")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
