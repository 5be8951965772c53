"""Backend protocol for PDF codec operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Protocol


@dataclass
class BackendDocument:
    """Represents a decoded PDF document owned by a single operation."""

    document_id: str
    num_pages: int
    metadata: Dict[str, str] = field(default_factory=dict)

    def get_page(self, index: int) -> object:
        """Return the page at 1-based ``index``."""
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError


class PDFBackend(Protocol):
    """Protocol defining the narrow codec surface used by the orchestrator."""

    def initialize(self) -> None:
        """Prepare the codec library for use. Must be safe to call repeatedly."""

    def open(self, data: bytes, document_id: str) -> BackendDocument:
        """Decode ``data`` and return a backend document wrapper."""

    def new_writer(self) -> object:
        """Return an empty backend writer."""

    def append_page(self, writer: object, page: object) -> None:
        """Copy ``page`` into ``writer`` as its last page."""

    def serialize(self, writer: object, metadata: Mapping[str, str] | None = None) -> bytes:
        """Return the PDF bytes for ``writer``."""
