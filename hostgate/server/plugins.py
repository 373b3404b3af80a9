"""Shared framework configuration.

This module provides:
- Logging configuration
- Response compression configuration
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from litestar.config.compression import CompressionConfig
from litestar.logging import LoggingConfig

if TYPE_CHECKING:
    from hostgate.config.settings import Settings


def create_logging_config(settings: "Settings") -> LoggingConfig:
    """Logging configuration for the app and its loggers."""
    return LoggingConfig(
        root={"level": settings.api.log_level, "handlers": ["queue_listener"]},
        formatters={
            "standard": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"}
        },
        log_exceptions="always",
    )


def create_compression_config(settings: "Settings") -> CompressionConfig:
    """Brotli compression for pages and API responses, never for file downloads."""
    return CompressionConfig(
        backend="brotli",
        minimum_size=1000,  # Only compress responses >= 1KB
        brotli_quality=4,
        exclude=[
            rf"^{settings.files.url_path.rstrip('/')}/.*",
        ],
    )
