"""Centralized path management for pocketledger.

All on-disk state lives under a single home directory, ``~/.pocketledger`` by
default, overridable with the ``POCKETLEDGER_HOME`` environment variable.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _get_home() -> Path:
    """Determine the pocketledger home directory."""
    override = os.environ.get("POCKETLEDGER_HOME")
    if override:
        return Path(override).expanduser()
    return Path("~/.pocketledger").expanduser()


@dataclass
class ProjectPaths:
    """Container for all pocketledger paths, computed relative to ``root``."""

    root: Path = field(default_factory=_get_home)

    def __post_init__(self) -> None:
        self.root = self.root.resolve()

    @property
    def config_file(self) -> Path:
        """TOML settings file."""
        return self.root / "config.toml"

    @property
    def ledger_file(self) -> Path:
        """Default JSON ledger document."""
        return self.root / "ledger.json"

    @property
    def receipts(self) -> Path:
        """Root receipts directory."""
        return self.root / "receipts"

    @property
    def receipts_ocr_json(self) -> Path:
        """Raw OCR results (JSON) kept for debugging."""
        return self.receipts / "ocr_json"


_paths: ProjectPaths | None = None


def get_paths() -> ProjectPaths:
    """Get the singleton ProjectPaths instance."""
    global _paths
    if _paths is None:
        _paths = ProjectPaths()
    return _paths


def reset_paths() -> None:
    """Forget the cached paths so the next ``get_paths`` re-reads the environment."""
    global _paths
    _paths = None
