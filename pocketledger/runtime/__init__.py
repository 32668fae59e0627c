"""Runtime infrastructure for pocketledger.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Path resolution via get_paths(), ProjectPaths
- Settings via load_settings()

Usage:
    from pocketledger.runtime import get_logger, get_paths, load_settings

    logger = get_logger(__name__)
    settings = load_settings()
"""

from pocketledger.runtime.config import OCRSettings, Settings, build_settings, load_settings
from pocketledger.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    set_log_level,
)
from pocketledger.runtime.paths import ProjectPaths, get_paths, reset_paths

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Settings
    "OCRSettings",
    "Settings",
    "build_settings",
    "load_settings",
    # Paths
    "get_paths",
    "reset_paths",
    "ProjectPaths",
]
