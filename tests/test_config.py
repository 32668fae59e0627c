from __future__ import annotations

import logging
from pathlib import Path

from pocketledger.runtime.config import DEFAULT_OCR_URL, build_settings, load_settings
from pocketledger.runtime.logging import parse_log_level
from pocketledger.runtime.paths import get_paths


def test_defaults_without_config(isolated_home: Path) -> None:
    settings = build_settings({}, environ={})

    assert settings.ledger_path == isolated_home.resolve() / "ledger.json"
    assert settings.currency == "USD"
    assert settings.log_level is None
    assert settings.ocr.url == DEFAULT_OCR_URL
    assert settings.ocr.engine == 2
    assert settings.ocr.max_dimension == 2000


def test_environment_overrides_file_values() -> None:
    config = {"ocr": {"url": "https://from-file", "api_key": "file-key", "language": "ind"}}

    settings = build_settings(
        config,
        environ={"POCKETLEDGER_OCR_URL": "http://localhost:9000/parse", "POCKETLEDGER_OCR_API_KEY": "env-key"},
    )

    assert settings.ocr.url == "http://localhost:9000/parse"
    assert settings.ocr.api_key == "env-key"
    assert settings.ocr.language == "ind"


def test_load_settings_from_explicit_file(tmp_path: Path) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text(
        "\n".join(
            [
                "[ocr]",
                'api_key = "abc"',
                "engine = 1",
                "",
                "[ledger]",
                f'path = "{(tmp_path / "books.json").as_posix()}"',
                'currency = "EUR"',
                "",
                "[logging]",
                'level = "debug"',
            ]
        ),
        encoding="utf-8",
    )

    settings = load_settings(str(config_file))

    assert settings.ocr.api_key == "abc"
    assert settings.ocr.engine == 1
    assert settings.ledger_path == tmp_path / "books.json"
    assert settings.currency == "EUR"
    assert settings.log_level == logging.DEBUG


def test_load_settings_reads_home_config(isolated_home: Path) -> None:
    isolated_home.mkdir(parents=True)
    (isolated_home / "config.toml").write_text('[ledger]\ncurrency = "IDR"\n', encoding="utf-8")

    assert get_paths().config_file == isolated_home.resolve() / "config.toml"
    assert load_settings().currency == "IDR"


def test_parse_log_level() -> None:
    assert parse_log_level("warn") == logging.WARNING
    assert parse_log_level(" Error ") == logging.ERROR
    assert parse_log_level("chatty") == logging.INFO
    assert parse_log_level(None, default=logging.ERROR) == logging.ERROR
