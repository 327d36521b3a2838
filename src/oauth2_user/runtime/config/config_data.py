"""Pydantic models for parsing the config.yaml configuration file.

These models mirror the ``config:`` section of config.yaml and handle
validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class IdentityConfig(BaseModel):
    """Settings for presenting user identities."""

    guest_display_name: str = Field(
        default="Guest User", description="Display name shown for guest users"
    )


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="plain", description="Log format")
    file: str | None = Field(default=None, description="Log file path; no file sink if unset")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    identity: IdentityConfig = Field(
        default_factory=IdentityConfig, description="Identity presentation configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
