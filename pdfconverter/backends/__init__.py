"""Backend abstractions for pdfconverter."""

from __future__ import annotations

from threading import Lock

from .base import BackendDocument, PDFBackend
from .pypdf_backend import PypdfBackend, PypdfDocument

_backend: PypdfBackend | None = None
_backend_lock = Lock()


def initialize_backend() -> PypdfBackend:
    """Initialise the process-wide codec backend once and return it."""

    global _backend
    with _backend_lock:
        if _backend is None:
            backend = PypdfBackend()
            backend.initialize()
            _backend = backend
    return _backend


__all__ = [
    "BackendDocument",
    "PDFBackend",
    "PypdfBackend",
    "PypdfDocument",
    "initialize_backend",
]
