"""Centralized path management for receiptdraft configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_DIR_ENV = "RECEIPTDRAFT_CONFIG_DIR"


def _get_config_root() -> Path:
    """Config directory from RECEIPTDRAFT_CONFIG_DIR, else ./config."""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.cwd() / "config"


@dataclass
class ProjectPaths:
    """Container for configuration paths."""

    config: Path = field(default_factory=_get_config_root)

    def __post_init__(self) -> None:
        self.config = self.config.resolve()

    @property
    def parser_rules(self) -> Path:
        """Parser keyword and threshold overrides TOML file."""
        return self.config / "parser_rules.toml"


_paths: ProjectPaths | None = None


def get_paths() -> ProjectPaths:
    """Get the singleton ProjectPaths instance.

    Returns:
        The global ProjectPaths instance.
    """
    global _paths
    if _paths is None:
        _paths = ProjectPaths()
    return _paths


def reset_paths() -> None:
    """Forget the cached paths so the environment is read again."""
    global _paths
    _paths = None
