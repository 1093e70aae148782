"""
Configuration settings for the Slow Query Lab.

Uses Pydantic Settings to load environment variables for the database
connection, logging, and seeding defaults.
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("slowuser", alias="DB_USER")
    db_password: str = Field("slowpass", alias="DB_PASSWORD")
    db_name: str = Field("slowlab", alias="DB_NAME")
    db_options: str = Field("application_name=slowlab", alias="DB_OPTIONS")
    db_statement_timeout_ms: int = Field(0, alias="DB_STATEMENT_TIMEOUT_MS")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Seeding defaults
    seed_orders: int = Field(1_000_000, alias="SEED_ORDERS")
    seed_batch_size: int = Field(1000, alias="SEED_BATCH_SIZE")
    seed_random: int = Field(2024, alias="SEED_RANDOM")

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
