from functools import lru_cache
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    level: str = Field(default="INFO", alias="LOG_LEVEL")

    # threshold for SQLAlchemy's own stdlib loggers once they are routed into loguru
    sql_level: str = Field(default="WARNING", alias="SQL_LOG_LEVEL")


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    env: str = Field(default="development", alias="APP_ENV")

    database_url: str = Field(default="sqlite:///./data/kanban.db", alias="DATABASE_URL")

    ticket_number_max_attempts: int = Field(default=5, ge=1, alias="TICKET_NUMBER_MAX_ATTEMPTS")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)


@lru_cache
def get_settings() -> AppConfig:
    return AppConfig()


def get_config_value(key: str, default: Any | None = None) -> Any:
    settings = get_settings()
    return getattr(settings, key, default)
