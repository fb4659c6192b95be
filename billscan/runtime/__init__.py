"""Runtime infrastructure for billscan.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Path resolution via get_paths(), ProjectPaths
- Extraction settings via load_extraction_config()

Usage:
    from billscan.runtime import get_logger, load_extraction_config

    logger = get_logger(__name__)
    config = load_extraction_config()
"""

from billscan.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    parse_log_level,
    set_log_level,
)
from billscan.runtime.parser_config import build_extraction_config, load_extraction_config
from billscan.runtime.paths import ProjectPaths, get_paths, reset_paths

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "parse_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Settings
    "build_extraction_config",
    "load_extraction_config",
    # Paths
    "get_paths",
    "reset_paths",
    "ProjectPaths",
]
