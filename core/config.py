"""
Core configuration using Pydantic Settings.
Loads from environment variables.
"""

from typing import Literal
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # App
    app_name: str = Field(default="talentflow", alias="APP_NAME")
    app_env: Literal["development", "staging", "production"] = Field(
        default="development", alias="APP_ENV"
    )
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )

    # Database (embedded, in-memory unless a file path is given)
    database_url: str = Field(default="sqlite+aiosqlite://", alias="DATABASE_URL")

    # Logging
    log_request_body: bool = Field(default=False, alias="LOG_REQUEST_BODY")
    log_max_body_size: int = Field(default=1024, alias="LOG_MAX_BODY_SIZE")
    json_logs: bool = Field(default=True, alias="JSON_LOGS")

    # Simulated transport
    latency_min_ms: int = Field(default=200, ge=0, alias="LATENCY_MIN_MS")
    latency_max_ms: int = Field(default=1200, ge=0, alias="LATENCY_MAX_MS")
    write_failure_rate: float = Field(
        default=0.08, ge=0.0, le=1.0, alias="WRITE_FAILURE_RATE"
    )

    # Seed data
    seed_on_startup: bool = Field(default=False, alias="SEED_ON_STARTUP")
    seed_job_count: int = Field(default=25, ge=0, alias="SEED_JOB_COUNT")
    seed_candidate_count: int = Field(default=1000, ge=0, alias="SEED_CANDIDATE_COUNT")

    # Pagination defaults
    default_jobs_page_size: int = Field(default=10, ge=1, alias="DEFAULT_JOBS_PAGE_SIZE")
    default_candidates_page_size: int = Field(
        default=50, ge=1, alias="DEFAULT_CANDIDATES_PAGE_SIZE"
    )

    @model_validator(mode="after")
    def check_latency_window(self) -> "Settings":
        """Latency window must not be inverted."""
        if self.latency_min_ms > self.latency_max_ms:
            raise ValueError("LATENCY_MIN_MS must not exceed LATENCY_MAX_MS")
        return self


# Global settings instance
settings = Settings()
