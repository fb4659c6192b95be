"""Centralized path management for billscan.

Paths are resolved relative to a project root so the CLI and the server read
the same configuration regardless of the current working directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _get_project_root() -> Path:
    """Determine the project root directory.

    ``BILLSCAN_HOME`` wins; otherwise the current working directory is used.
    """
    env_root = os.environ.get("BILLSCAN_HOME")
    if env_root:
        return Path(env_root)
    return Path.cwd()


@dataclass
class ProjectPaths:
    """Container for project-related paths."""

    root: Path = field(default_factory=_get_project_root)

    def __post_init__(self) -> None:
        self.root = self.root.resolve()

    # --- Configuration paths ---
    @property
    def config(self) -> Path:
        """Configuration directory (config/)."""
        return self.root / "config"

    @property
    def extraction_config(self) -> Path:
        """Project-level extraction settings TOML file.

        ``BILLSCAN_CONFIG`` overrides the location.
        """
        env_path = os.environ.get("BILLSCAN_CONFIG")
        if env_path:
            return Path(env_path)
        return self.config / "billscan.toml"


_paths: ProjectPaths | None = None


def get_paths() -> ProjectPaths:
    """Return the process-wide ProjectPaths instance."""
    global _paths
    if _paths is None:
        _paths = ProjectPaths()
    return _paths


def reset_paths() -> None:
    """Forget the cached ProjectPaths (tests change BILLSCAN_HOME)."""
    global _paths
    _paths = None
