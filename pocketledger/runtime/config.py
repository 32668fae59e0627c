"""Runtime loader for pocketledger settings.

Settings are read from ``config.toml`` in the pocketledger home directory::

    [ocr]
    url = "https://api.ocr.space/parse/image"
    api_key = "..."
    language = "eng"
    engine = 2
    max_dimension = 2000

    [ledger]
    path = "~/finance/ledger.json"
    currency = "USD"

    [logging]
    level = "INFO"

``POCKETLEDGER_OCR_API_KEY`` and ``POCKETLEDGER_OCR_URL`` override the file.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

from pocketledger.runtime.logging import parse_log_level
from pocketledger.runtime.paths import get_paths

DEFAULT_OCR_URL = "https://api.ocr.space/parse/image"
# OCR.space public demo key, only good for light personal use.
DEFAULT_OCR_API_KEY = "helloworld"
DEFAULT_CURRENCY = "USD"


@dataclass(frozen=True)
class OCRSettings:
    url: str = DEFAULT_OCR_URL
    api_key: str = DEFAULT_OCR_API_KEY
    language: str = "eng"
    engine: int = 2
    max_dimension: int = 2000
    timeout: float = 60.0


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""

    ledger_path: Path
    currency: str = DEFAULT_CURRENCY
    log_level: int | None = None
    ocr: OCRSettings = field(default_factory=OCRSettings)


def _load_toml(path: Path) -> dict[str, Any]:
    """Load TOML file and return parsed dict; missing files map to empty dict."""
    if not path.exists():
        return {}

    with open(path, "rb") as f:
        data = tomllib.load(f)
    return data if isinstance(data, dict) else {}


def build_settings(config: dict[str, Any], environ: dict[str, str] | None = None) -> Settings:
    """Build settings from a parsed TOML mapping plus environment overrides."""
    environ = dict(os.environ) if environ is None else environ

    ocr_section = config.get("ocr", {})
    ledger_section = config.get("ledger", {})
    logging_section = config.get("logging", {})

    ocr = OCRSettings(
        url=environ.get("POCKETLEDGER_OCR_URL") or ocr_section.get("url", DEFAULT_OCR_URL),
        api_key=environ.get("POCKETLEDGER_OCR_API_KEY") or ocr_section.get("api_key", DEFAULT_OCR_API_KEY),
        language=ocr_section.get("language", "eng"),
        engine=int(ocr_section.get("engine", 2)),
        max_dimension=int(ocr_section.get("max_dimension", 2000)),
        timeout=float(ocr_section.get("timeout", 60.0)),
    )

    raw_ledger_path = ledger_section.get("path")
    ledger_path = Path(raw_ledger_path).expanduser() if raw_ledger_path else get_paths().ledger_file

    level_name = logging_section.get("level")
    return Settings(
        ledger_path=ledger_path,
        currency=ledger_section.get("currency", DEFAULT_CURRENCY),
        log_level=parse_log_level(level_name) if level_name else None,
        ocr=ocr,
    )


@lru_cache(maxsize=4)
def load_settings(config_path: str | None = None) -> Settings:
    """
    Load settings from config.toml.

    Args:
        config_path: Optional TOML path override. If None, uses the home directory file.
    """
    path = Path(config_path) if config_path is not None else get_paths().config_file
    return build_settings(_load_toml(path))
