"""Runtime infrastructure for receiptdraft.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Config path resolution via get_paths(), ProjectPaths
- Parser rule loading via load_parser_rules()

Usage:
    from receiptdraft.runtime import get_logger, load_parser_rules

    logger = get_logger(__name__)
    rules = load_parser_rules()
"""

from receiptdraft.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    set_log_level,
)
from receiptdraft.runtime.parser_rules import load_parser_rules
from receiptdraft.runtime.paths import (
    ProjectPaths,
    get_paths,
    reset_paths,
)

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Rules
    "load_parser_rules",
    # Paths
    "get_paths",
    "reset_paths",
    "ProjectPaths",
]
