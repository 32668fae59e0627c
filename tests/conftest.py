"""Shared pytest fixtures for pocketledger tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from pocketledger.runtime import load_settings, reset_paths


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point the pocketledger home at a temp dir so no test touches ~/.pocketledger."""
    home = tmp_path / "pocketledger-home"
    monkeypatch.setenv("POCKETLEDGER_HOME", str(home))
    monkeypatch.delenv("POCKETLEDGER_OCR_API_KEY", raising=False)
    monkeypatch.delenv("POCKETLEDGER_OCR_URL", raising=False)
    reset_paths()
    load_settings.cache_clear()
    yield home
    reset_paths()
    load_settings.cache_clear()
