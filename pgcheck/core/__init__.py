"""Core module — config, types, logging."""

from pgcheck.core.config import Settings, get_settings, load_settings, reset_settings
from pgcheck.core.logging import bind_run_context, setup_logging
from pgcheck.core.types import (
    Column,
    ConnectionDescriptor,
    PgType,
    Report,
    Severity,
)

__all__ = [
    "Column",
    "ConnectionDescriptor",
    "PgType",
    "Report",
    "Settings",
    "Severity",
    "bind_run_context",
    "get_settings",
    "load_settings",
    "reset_settings",
    "setup_logging",
]
