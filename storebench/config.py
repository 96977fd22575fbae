"""
Configuration settings for storebench.

Uses Pydantic Settings to load environment variables for the engine under
test, logging, and benchmark defaults (seed, report format, failure policy).
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EngineKind = Literal["sqlite", "postgres"]
ReportFormat = Literal["line", "json", "table"]
FailurePolicy = Literal["tolerant", "strict"]


class Settings(BaseSettings):
    # Benchmark defaults
    seed: int = Field(42, alias="BENCH_SEED")
    engine: EngineKind = Field("sqlite", alias="BENCH_ENGINE")
    target: Optional[str] = Field(None, alias="BENCH_TARGET")
    report_format: ReportFormat = Field("line", alias="BENCH_REPORT_FORMAT")
    failure_policy: FailurePolicy = Field("tolerant", alias="BENCH_FAILURE_POLICY")

    # PostgreSQL engine
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASSWORD")
    db_name: str = Field("storebench", alias="DB_NAME")
    db_connect_retries: int = Field(3, alias="DB_CONNECT_RETRIES", ge=1)

    # Application
    log_level: str = Field("WARNING", alias="LOG_LEVEL")
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


__all__ = ["EngineKind", "FailurePolicy", "ReportFormat", "Settings", "get_settings"]
