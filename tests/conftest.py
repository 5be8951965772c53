from __future__ import annotations

import io
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator

import pytest
from pypdf import PdfReader, PdfWriter

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pdfconverter.backends import PypdfBackend  # noqa: E402
from pdfconverter.config import Settings  # noqa: E402
from pdfconverter.service import PdfManipulationService  # noqa: E402

# Pages are told apart by width: page N of a generated document is BASE_WIDTH + N points wide.
BASE_WIDTH = 100


def build_pdf(num_pages: int, *, width_offset: int = 0, title: str | None = None) -> bytes:
    writer = PdfWriter()
    for page in range(1, num_pages + 1):
        writer.add_blank_page(width=BASE_WIDTH + width_offset + page, height=200)
    writer.add_metadata({"/Producer": "pdfconverter-tests", **({"/Title": title} if title else {})})
    output = io.BytesIO()
    writer.write(output)
    return output.getvalue()


def page_widths(data: bytes) -> list[int]:
    reader = PdfReader(io.BytesIO(data))
    return [int(float(page.mediabox.width)) for page in reader.pages]


@dataclass
class FakeDocument:
    """Page-counted stand-in used by pure planning tests."""

    document_id: str
    num_pages: int


@pytest.fixture(autouse=True)
def restore_package_logger() -> Iterator[None]:
    """Undo handler and level changes made to the ``pdfconverter`` logger."""

    logger = logging.getLogger("pdfconverter")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture()
def pdf_factory() -> Callable[..., bytes]:
    return build_pdf


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    return build_pdf(5, title="Sample")


@pytest.fixture()
def sample_pdf(tmp_path: Path, sample_pdf_bytes: bytes) -> Path:
    pdf_path = tmp_path / "sample.pdf"
    pdf_path.write_bytes(sample_pdf_bytes)
    return pdf_path


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    return build_pdf(0)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(storage_dir=tmp_path / "downloads", log_level="DEBUG")


@pytest.fixture()
def backend() -> PypdfBackend:
    pdf_backend = PypdfBackend()
    pdf_backend.initialize()
    return pdf_backend


@pytest.fixture()
def service(backend: PypdfBackend, settings: Settings) -> PdfManipulationService:
    return PdfManipulationService(backend, settings=settings)
