"""Configuration models."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..ingestion.client import DEFAULT_BASE_URL


class ApiConfig(BaseModel):
    """Remote API configuration."""

    base_url: str = Field(DEFAULT_BASE_URL, description="Site root of the publication")
    page_size: int = Field(12, description="Articles per archive page", ge=1, le=50)
    timeout: Optional[float] = Field(None, description="Request timeout in seconds (none waits forever)")
    user_agent: str = Field("acxcrawl/0.1", description="User-Agent header")

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an absolute http(s) URL."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must start with http:// or https://, got {v!r}")
        return v.rstrip("/")


class ThrottleConfig(BaseModel):
    """Request spacing."""

    delay_seconds: float = Field(1.0, description="Minimum seconds between requests", ge=0.0)


class DatabaseConfig(BaseModel):
    """SQLite database location."""

    path: Optional[str] = Field(None, description="Database file (default: acx-comments_YYYY-MM-DD.db)")


class ConfigModel(BaseModel):
    """Main configuration model."""

    api: ApiConfig = Field(default_factory=ApiConfig)
    throttle: ThrottleConfig = Field(default_factory=ThrottleConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
