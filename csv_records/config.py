"""
Configuration settings for the CSV records service.

Uses Pydantic Settings to load environment variables for the record store,
upload handling, the HTTP API, listing defaults, and logging.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Store
    store_backend: Literal["sqlite", "postgres"] = Field("sqlite", alias="STORE_BACKEND")
    sqlite_path: Path = Field(Path("db/database.sqlite"), alias="SQLITE_PATH")

    # Database (postgres backend)
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASSWORD")
    db_name: str = Field("csv_records", alias="DB_NAME")
    db_pool_min_size: int = Field(1, alias="DB_POOL_MIN_SIZE")
    db_pool_max_size: int = Field(10, alias="DB_POOL_MAX_SIZE")

    # Uploads
    upload_dir: Path = Field(Path("uploads"), alias="UPLOAD_DIR")

    # HTTP API
    api_host: str = Field("0.0.0.0", alias="API_HOST")
    api_port: int = Field(3001, alias="API_PORT")
    api_prefix: str = Field("/api/csv", alias="API_PREFIX")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"], alias="CORS_ORIGINS")

    # Listing defaults
    default_page: int = Field(1, alias="DEFAULT_PAGE")
    default_limit: int = Field(10, alias="DEFAULT_LIMIT")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
