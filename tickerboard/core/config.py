"""Application settings with Pydantic validation and environment loading."""

from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = "Tickerboard Relay"
    app_version: str = "1.0.0"
    debug: bool = Field(
        default=False, description="Enable debug mode (disable in production)"
    )
    root_path: str = Field(default="", description="Root path for reverse proxy")
    environment: str = Field(
        default="production",
        description="Environment: development, staging, production",
    )

    # Upstream
    upstream_base_url: str = Field(
        default="https://statusinvest.com.br",
        description="Base URL the endpoint templates are built on",
    )
    allowed_domain: str = Field(
        default="statusinvest.com.br",
        description="Registered domain the relay is allowed to reach",
    )

    # Relay
    relay_base_url: Optional[str] = Field(
        default=None,
        description="Deployed relay to go through; unset calls the upstream in-process",
    )
    relay_timeout: float = Field(
        default=15.0, ge=1, le=60, description="Outbound relay timeout in seconds"
    )
    relay_cache_max_age: int = Field(
        default=300, ge=0, description="Shared cache window for relayed JSON"
    )
    relay_stale_while_revalidate: int = Field(
        default=60, ge=0, description="Stale-while-revalidate grace in seconds"
    )
    preview_chars: int = Field(
        default=200, ge=0, description="Body preview length returned to callers"
    )
    log_preview_chars: int = Field(
        default=300, ge=0, description="Body preview length written to logs"
    )

    # CORS
    cors_origins: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed CORS origins",
    )

    # Logging
    log_level: str = Field(
        default="INFO", description="Log level: DEBUG, INFO, WARNING, ERROR"
    )
    log_format: str = Field(default="json", description="Log format: json or text")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("allowed_domain")
    @classmethod
    def normalize_domain(cls, v: str) -> str:
        domain = v.strip().lower().lstrip(".")
        if not domain:
            raise ValueError("allowed_domain must not be empty")
        return domain

    @field_validator("upstream_base_url")
    @classmethod
    def strip_upstream_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")

    @field_validator("relay_base_url")
    @classmethod
    def strip_relay_slash(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip().rstrip("/") or None

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            raise ValueError(f"log_level must be one of {valid}")
        return upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        lower = v.lower()
        if lower not in {"json", "text"}:
            raise ValueError("log_format must be 'json' or 'text'")
        return lower

    @property
    def uses_remote_relay(self) -> bool:
        return bool(self.relay_base_url)

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Cached settings factory."""
    return Settings()


settings = get_settings()
