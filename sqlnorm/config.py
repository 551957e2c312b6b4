"""
Configuration settings for sqlnorm.

Uses Pydantic Settings to load environment variables describing the default
database connection (dialect, data source, MySQL credentials) and logging.
ConnectionBuilder.from_settings() and the CLI read from here; library code that
is handed an explicit builder never touches the environment.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Dialect selection
    dialect: Literal["sqlite", "mysql"] = Field("sqlite", alias="NORM_DIALECT")

    # Embedded engine
    data_source: str = Field(":memory:", alias="NORM_DATA_SOURCE")

    # Networked engine
    db_host: str = Field("localhost", alias="NORM_DB_HOST")
    db_port: int = Field(3306, alias="NORM_DB_PORT")
    db_user: str = Field("root", alias="NORM_DB_USER")
    db_password: str = Field("", alias="NORM_DB_PASSWORD")
    db_name: str = Field("norm", alias="NORM_DB_NAME")
    connect_attempts: int = Field(3, alias="NORM_CONNECT_ATTEMPTS")

    # Application
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
