"""Environment driven configuration for pdfconverter."""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Mapping

from .utils import is_truthy

SplitResponseMode = Literal["returnInline", "returnDownloadLinks"]
SPLIT_RESPONSE_MODES: tuple[str, ...] = ("returnInline", "returnDownloadLinks")

ENV_PREFIX = "PDFCONVERTER_"


def _default_storage_dir() -> Path:
    return Path(tempfile.gettempdir()) / "pdfconverter"


@dataclass(frozen=True)
class Settings:
    """Runtime settings shared by the service, the HTTP app and the CLI."""

    log_level: str = "INFO"
    storage_dir: Path = field(default_factory=_default_storage_dir)
    download_ttl_seconds: int = 3600
    strict_ranges: bool = False
    split_response_mode: SplitResponseMode = "returnInline"
    merge_workers: int = 1

    def __post_init__(self) -> None:
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log level: {self.log_level}")
        if self.split_response_mode not in SPLIT_RESPONSE_MODES:
            raise ValueError(
                f"Split response mode must be one of {', '.join(SPLIT_RESPONSE_MODES)}; "
                f"got {self.split_response_mode!r}"
            )
        if self.download_ttl_seconds < 1:
            raise ValueError("Download TTL must be at least one second")
        if self.merge_workers < 1:
            raise ValueError("Merge workers must be at least 1")


def _read_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw_value = environ.get(ENV_PREFIX + name)
    if raw_value is None or not raw_value.strip():
        return default
    try:
        return int(raw_value)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX + name} must be an integer, got {raw_value!r}") from exc


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from ``PDFCONVERTER_*`` environment variables."""

    env = os.environ if environ is None else environ

    storage_dir = env.get(ENV_PREFIX + "STORAGE_DIR")
    return Settings(
        log_level=env.get(ENV_PREFIX + "LOG_LEVEL", "INFO"),
        storage_dir=Path(storage_dir).expanduser() if storage_dir else _default_storage_dir(),
        download_ttl_seconds=_read_int(env, "DOWNLOAD_TTL", 3600),
        strict_ranges=is_truthy(env.get(ENV_PREFIX + "STRICT_RANGES")),
        split_response_mode=env.get(ENV_PREFIX + "SPLIT_RESPONSE", "returnInline"),  # type: ignore[arg-type]
        merge_workers=_read_int(env, "MERGE_WORKERS", 1),
    )


__all__ = ["ENV_PREFIX", "SPLIT_RESPONSE_MODES", "Settings", "SplitResponseMode", "load_settings"]
