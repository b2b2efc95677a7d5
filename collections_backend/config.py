"""
Configuration and settings for the collections backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000)
    node_env: str = Field(default="development")
    cors_dev_origin: str = Field(default="http://localhost:5173")
    log_level: str = Field(default="INFO")

    # Database (MySQL expected)
    db_host: str = Field(default="localhost")
    db_port: int = Field(default=3306)
    db_user: str = Field(default="root")
    db_password: str = Field(default="")
    db_database: str = Field(default="collections")
    db_driver: str = Field(default="mysql+pymysql")
    # Overrides the DB_* parts when set (tests point this at SQLite).
    database_url: Optional[str] = Field(default=None)

    # Pool
    db_pool_size: int = Field(default=10, ge=1)
    # None waits for a free connection without a timeout.
    db_pool_timeout: Optional[float] = Field(default=None, gt=0)
    db_keepalive_interval: float = Field(default=600, gt=0)
    db_create_tables: bool = Field(default=False)

    @property
    def is_production(self) -> bool:
        return self.node_env.strip().lower() == "production"

    @property
    def cors_origins(self) -> list[str]:
        return ["*"] if self.is_production else [self.cors_dev_origin]

    def sqlalchemy_url(self) -> str | URL:
        if self.database_url:
            return self.database_url
        return URL.create(
            self.db_driver,
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_database,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
