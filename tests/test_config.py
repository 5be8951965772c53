from __future__ import annotations

import logging
from pathlib import Path

import pytest

from pdfconverter.config import Settings, load_settings
from pdfconverter.utils import HANDLER_NAME, LOG_FORMAT, configure_logging, format_file_size, is_truthy


def test_defaults_without_environment() -> None:
    settings = load_settings({})

    assert settings.log_level == "INFO"
    assert settings.download_ttl_seconds == 3600
    assert settings.strict_ranges is False
    assert settings.split_response_mode == "returnInline"
    assert settings.merge_workers == 1
    assert settings.storage_dir.name == "pdfconverter"


def test_environment_overrides(tmp_path: Path) -> None:
    settings = load_settings(
        {
            "PDFCONVERTER_LOG_LEVEL": "debug",
            "PDFCONVERTER_STORAGE_DIR": str(tmp_path),
            "PDFCONVERTER_DOWNLOAD_TTL": "120",
            "PDFCONVERTER_STRICT_RANGES": "yes",
            "PDFCONVERTER_SPLIT_RESPONSE": "returnDownloadLinks",
            "PDFCONVERTER_MERGE_WORKERS": "4",
        }
    )

    assert settings.log_level == "debug"
    assert settings.storage_dir == tmp_path
    assert settings.download_ttl_seconds == 120
    assert settings.strict_ranges is True
    assert settings.split_response_mode == "returnDownloadLinks"
    assert settings.merge_workers == 4


def test_blank_integers_fall_back_to_defaults() -> None:
    assert load_settings({"PDFCONVERTER_MERGE_WORKERS": "  "}).merge_workers == 1


@pytest.mark.parametrize(
    "environ",
    [
        {"PDFCONVERTER_DOWNLOAD_TTL": "soon"},
        {"PDFCONVERTER_DOWNLOAD_TTL": "0"},
        {"PDFCONVERTER_MERGE_WORKERS": "0"},
        {"PDFCONVERTER_SPLIT_RESPONSE": "zip"},
        {"PDFCONVERTER_LOG_LEVEL": "chatty"},
    ],
)
def test_invalid_environment_values(environ: dict[str, str]) -> None:
    with pytest.raises(ValueError):
        load_settings(environ)


def test_settings_are_frozen() -> None:
    settings = Settings()
    with pytest.raises(Exception):
        settings.merge_workers = 2  # type: ignore[misc]


@pytest.mark.parametrize("value", ["1", "true", "TRUE", " on ", "yes"])
def test_is_truthy_accepts(value: str) -> None:
    assert is_truthy(value)


@pytest.mark.parametrize("value", [None, "", "0", "false", "off", "nope"])
def test_is_truthy_rejects(value) -> None:
    assert not is_truthy(value)


def _owned_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [handler for handler in logger.handlers if handler.get_name() == HANDLER_NAME]


def test_configure_logging_attaches_single_handler() -> None:
    logger = configure_logging("WARNING")
    configure_logging("DEBUG")

    assert logger.name == "pdfconverter"
    assert logger.level == logging.DEBUG
    owned = _owned_handlers(logger)
    assert len(owned) == 1
    assert owned[0].formatter._fmt == LOG_FORMAT


def test_configure_logging_keeps_foreign_handlers() -> None:
    logger = logging.getLogger("pdfconverter")
    foreign = logging.NullHandler()
    logger.addHandler(foreign)

    configure_logging("INFO")
    configure_logging("INFO")

    assert foreign in logger.handlers
    assert len(_owned_handlers(logger)) == 1


def test_format_file_size() -> None:
    assert format_file_size(500) == "500.0 B"
    assert format_file_size(1536) == "1.5 KB"
    assert format_file_size(5 * 1024 * 1024) == "5.0 MB"
