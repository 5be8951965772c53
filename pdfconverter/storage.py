"""Transient storage for files handed off through download links.

Every stored file lives in its own directory named by a random token, so
concurrent requests never share a path even when they produce outputs with
the same filename.

Downloads are served in two steps. :meth:`DownloadStore.claim` renames the
entry directory, which only one caller can do, and reads the file. The
caller then discards the entry once the response went out, or releases it
back to the store.
"""

from __future__ import annotations

import re
import shutil
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path

from .exceptions import ResourceNotFoundError
from .utils import get_logger, safe_filename

LOGGER = get_logger(__name__)
_TOKEN_PATTERN = re.compile(r"^[0-9a-f]{32}$")
_ENTRY_PATTERN = re.compile(r"^[0-9a-f]{32}(\.claimed)?$")
CLAIMED_SUFFIX = ".claimed"


@dataclass(frozen=True)
class StoredFile:
    token: str
    filename: str
    path: Path
    data: bytes | None = field(default=None, repr=False)


class DownloadStore:
    """Token-keyed, read-once file store with a time-to-live."""

    def __init__(self, root: str | Path, ttl_seconds: int = 3600) -> None:
        self.root = Path(root).expanduser()
        self.ttl_seconds = ttl_seconds

    def _entry_dir(self, token: str) -> Path:
        if not _TOKEN_PATTERN.match(token or ""):
            raise ResourceNotFoundError(f"File not found: {token}")
        return self.root / token

    def save(self, data: bytes, filename: str) -> StoredFile:
        self.purge_expired()

        token = uuid.uuid4().hex
        name = safe_filename(filename, "document.pdf")
        entry_dir = self.root / token
        entry_dir.mkdir(parents=True, exist_ok=False)
        path = entry_dir / name
        path.write_bytes(data)
        LOGGER.info("Stored %s (%d bytes) under token %s", name, len(data), token)
        return StoredFile(token=token, filename=name, path=path)

    def _files_in(self, entry_dir: Path) -> list[Path]:
        if not entry_dir.is_dir():
            return []
        return [path for path in entry_dir.iterdir() if path.is_file()]

    def _is_expired(self, entry_dir: Path, now: float) -> bool:
        return now - entry_dir.stat().st_mtime > self.ttl_seconds

    def claim(self, token: str) -> StoredFile:
        """Take exclusive hold of the entry for ``token`` and read its file.

        A claimed entry is invisible to other callers until it is released.
        """

        entry_dir = self._entry_dir(token)
        claimed_dir = entry_dir.with_suffix(CLAIMED_SUFFIX)
        try:
            if self._is_expired(entry_dir, time.time()):
                shutil.rmtree(entry_dir, ignore_errors=True)
                raise ResourceNotFoundError(f"File not found: {token}")
            entry_dir.rename(claimed_dir)
        except FileNotFoundError as exc:
            raise ResourceNotFoundError(f"File not found: {token}") from exc

        files = self._files_in(claimed_dir)
        if not files:
            shutil.rmtree(claimed_dir, ignore_errors=True)
            raise ResourceNotFoundError(f"File not found: {token}")

        path = files[0]
        try:
            data = path.read_bytes()
        except OSError:
            claimed_dir.rename(entry_dir)
            raise
        LOGGER.debug("Claimed %s for token %s", path.name, token)
        return StoredFile(token=token, filename=path.name, path=path, data=data)

    def release(self, stored: StoredFile) -> None:
        """Return a claimed entry to the store so it can be downloaded again."""

        claimed_dir = stored.path.parent
        if claimed_dir.is_dir():
            claimed_dir.rename(self.root / stored.token)
            LOGGER.info("Released %s for token %s", stored.filename, stored.token)

    def discard(self, stored: StoredFile) -> None:
        """Delete a claimed entry after it has been served."""

        shutil.rmtree(stored.path.parent, ignore_errors=True)
        LOGGER.info("Served and removed %s for token %s", stored.filename, stored.token)

    def pop(self, token: str) -> StoredFile:
        """Return the stored file for ``token`` and delete it."""

        stored = self.claim(token)
        self.discard(stored)
        return stored

    def purge_expired(self) -> int:
        """Remove entries older than the TTL and return how many were removed."""

        if not self.root.is_dir():
            return 0

        now = time.time()
        removed = 0
        for entry_dir in self.root.iterdir():
            if not entry_dir.is_dir() or not _ENTRY_PATTERN.match(entry_dir.name):
                continue
            try:
                expired = self._is_expired(entry_dir, now)
            except FileNotFoundError:
                continue
            if expired:
                shutil.rmtree(entry_dir, ignore_errors=True)
                removed += 1
        if removed:
            LOGGER.debug("Purged %d expired download(s)", removed)
        return removed


__all__ = ["DownloadStore", "StoredFile"]
