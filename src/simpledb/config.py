"""Configuration management for SimpleDB using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["debug", "info", "warning", "error", "critical"]
LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


class SimpleDBConfig(BaseSettings):
    """Root configuration for the command-line front end."""

    model_config = SettingsConfigDict(
        env_prefix="SIMPLEDB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: LogLevel = "warning"
    log_format: Literal["console", "json"] = "console"
    echo_commands: bool = Field(default=False, description="Echo each input line before its output")
    null_token: str = "NULL"
    no_transaction_token: str = "NO TRANSACTION"
    result_prefix: str = "> "

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        """Accept level names in any case."""
        return value.lower() if isinstance(value, str) else value


@lru_cache
def get_config() -> SimpleDBConfig:
    """Get cached configuration instance."""
    return SimpleDBConfig()
