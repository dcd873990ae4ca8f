"""Pydantic settings loaded from YAML configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel

_settings: Settings | None = None

_DEFAULT_CONFIG_PATH = Path("config/settings.yaml")


class DatabaseConfig(BaseModel):
    """Connection and statement limits for the probe's single query.

    A value of 0 disables the corresponding timeout.
    """

    connect_timeout_secs: int = 10
    statement_timeout_ms: int = 30000
    sslmode: str = "prefer"
    application_name: str = "check_postgresql"


class ThresholdConfig(BaseModel):
    """Default threshold vectors, used when not given on the command line."""

    warning: str = "1"
    critical: str = "2"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "WARNING"
    format: str = "json"


class Settings(BaseModel):
    """Root settings container."""

    database: DatabaseConfig = DatabaseConfig()
    thresholds: ThresholdConfig = ThresholdConfig()
    logging: LoggingConfig = LoggingConfig()


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from a YAML file and cache globally.

    Args:
        path: Path to YAML config. Defaults to config/settings.yaml.

    Returns:
        Parsed Settings instance.
    """
    global _settings  # noqa: PLW0603

    config_path = Path(path) if path else _DEFAULT_CONFIG_PATH

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f)
            if isinstance(raw, dict):
                data = raw

    _settings = Settings(**data)
    return _settings


def get_settings() -> Settings:
    """Return the cached settings, loading defaults if not yet loaded."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Reset the cached settings (useful for testing)."""
    global _settings  # noqa: PLW0603
    _settings = None
