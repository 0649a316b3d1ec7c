"""Observability helpers: logging configuration for the CLI and embedding callers."""

from canvas_compiler.observability.logging import (
    DEFAULT_LOGGER_NAME,
    LOG_FORMATS,
    setup_logging,
    shutdown_logging,
)

__all__ = ["DEFAULT_LOGGER_NAME", "LOG_FORMATS", "setup_logging", "shutdown_logging"]
