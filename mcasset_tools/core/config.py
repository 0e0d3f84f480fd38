"""Configuration management for mcasset-tools."""

from __future__ import annotations

import json
from pathlib import Path

import structlog
from pydantic import BaseModel, Field, field_validator

logger = structlog.get_logger()

DEFAULT_CONFIG_FILE = Path.home() / ".config" / "mcasset-tools" / "config.json"


class HTTPConfig(BaseModel):
    """HTTP client configuration."""

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    user_agent: str = Field(
        default="mcasset-tools/0.1.0",
        description="User-Agent header sent with every request"
    )

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate timeout value."""
        if v <= 0:
            raise ValueError("Timeout must be positive")
        return v


class AppConfig(BaseModel):
    """Application configuration."""

    http: HTTPConfig = Field(default_factory=HTTPConfig, description="HTTP settings")

    verify_hashes: bool = Field(
        default=False,
        description="Check downloaded assets against their SHA-1 index hash"
    )
    compression: str = Field(
        default="deflated",
        description="Output archive compression (deflated, stored)"
    )
    log_level: str = Field(
        default="WARNING",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    @classmethod
    def load(cls, config_file: Path | None = None) -> AppConfig:
        """Load configuration from file.

        Args:
            config_file: Path to config file, uses default if None

        Returns:
            Application configuration
        """
        if config_file is None:
            config_file = DEFAULT_CONFIG_FILE

        if config_file.exists():
            with open(config_file) as f:
                data = json.load(f)
                return cls(**data)

        return cls()

    def save(self, config_file: Path | None = None) -> None:
        """Save configuration to file.

        Args:
            config_file: Path to config file, uses default if None
        """
        if config_file is None:
            config_file = DEFAULT_CONFIG_FILE

        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, "w") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2, default=str)

        logger.info("config_saved", path=str(config_file))

    @field_validator("compression")
    @classmethod
    def validate_compression(cls, v: str) -> str:
        """Validate compression method."""
        valid_methods = {"deflated", "stored"}
        if v not in valid_methods:
            raise ValueError(f"Invalid compression: {v}. Valid methods: {valid_methods}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Valid levels: {valid_levels}")
        return v
