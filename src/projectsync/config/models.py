"""Pydantic models for CLI configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from projectsync.config.constants import DEFAULT_TIMEOUT, OUTPUT_FORMATS


class RemoteProfile(BaseModel):
    """A named remote endpoint connection profile."""

    name: str
    url: str = Field(description="Remote base URL, e.g. https://projects.example.com")
    token: str | None = Field(default=None, description="API token")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    timeout: float = Field(
        default=DEFAULT_TIMEOUT, gt=0, le=600, description="Request timeout in seconds",
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v.rstrip("/")


class CLIConfig(BaseModel):
    """Root configuration model."""

    default_profile: str | None = None
    default_format: str = "table"
    data_dir: str | None = None
    offline: bool = False
    profiles: dict[str, RemoteProfile] = Field(default_factory=dict)

    @field_validator("default_format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v not in OUTPUT_FORMATS:
            raise ValueError(f"Unknown format '{v}'. Choose one of: {', '.join(OUTPUT_FORMATS)}")
        return v
