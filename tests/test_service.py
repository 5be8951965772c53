from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest
from pypdf import PdfReader

from conftest import build_pdf, page_widths
from pdfconverter.backends import PypdfBackend, initialize_backend
from pdfconverter.backends.pypdf_backend import PypdfDocument
from pdfconverter.config import Settings
from pdfconverter.exceptions import (
    DocumentReadError,
    EmptyUploadError,
    EndBeforeStartError,
    InvalidStartError,
    PageOutOfBoundsError,
    ResourceNotFoundError,
    UnsupportedCompressionLevelError,
)
from pdfconverter.service import PdfManipulationService


class TrackingBackend(PypdfBackend):
    """pypdf backend that remembers every document it opened."""

    def __init__(self) -> None:
        super().__init__()
        self.opened: list[PypdfDocument] = []

    def open(self, data: bytes, document_id: str) -> PypdfDocument:
        document = super().open(data, document_id)
        self.opened.append(document)
        return document


def test_initialize_backend_is_idempotent() -> None:
    first = initialize_backend()
    second = initialize_backend()
    assert first is second
    assert first.initialized is True


def test_backend_open_rejects_garbage(backend: PypdfBackend) -> None:
    with pytest.raises(DocumentReadError):
        backend.open(b"not a pdf", "broken")


def test_backend_reads_page_count_and_metadata(backend: PypdfBackend, sample_pdf_bytes: bytes) -> None:
    document = backend.open(sample_pdf_bytes, "sample")
    try:
        assert document.num_pages == 5
        assert document.metadata["/Title"] == "Sample"
    finally:
        document.close()
    assert document.closed


def test_merge_preserves_input_order(service: PdfManipulationService) -> None:
    first = build_pdf(2)
    second = build_pdf(3, width_offset=50)

    merged = service.merge_pdfs([first, second])

    assert page_widths(merged) == [101, 102, 151, 152, 153]


def test_merge_copies_first_document_metadata(service: PdfManipulationService) -> None:
    merged = service.merge_pdfs([build_pdf(1, title="Document One"), build_pdf(1)])
    assert PdfReader(io.BytesIO(merged)).metadata.get("/Title") == "Document One"


def test_merge_with_worker_pool_keeps_order(backend: PypdfBackend, tmp_path: Path) -> None:
    service = PdfManipulationService(
        backend,
        settings=Settings(storage_dir=tmp_path, merge_workers=4),
    )
    payloads = [build_pdf(1, width_offset=offset) for offset in (0, 10, 20, 30, 40)]

    merged = service.merge_pdfs(payloads)

    assert page_widths(merged) == [101, 111, 121, 131, 141]


def test_merge_closes_documents_when_one_input_is_invalid(tmp_path: Path) -> None:
    backend = TrackingBackend()
    service = PdfManipulationService(backend, settings=Settings(storage_dir=tmp_path, merge_workers=3))

    with pytest.raises(DocumentReadError):
        service.merge_pdfs([build_pdf(1), b"%PDF-garbage", build_pdf(2)])

    assert backend.opened
    assert all(document.closed for document in backend.opened)


def test_merge_rejects_empty_payload(service: PdfManipulationService) -> None:
    with pytest.raises(EmptyUploadError):
        service.merge_pdfs([build_pdf(1), b""])


def test_split_produces_two_parts(service: PdfManipulationService, sample_pdf_bytes: bytes) -> None:
    first, second = service.split_pdf(sample_pdf_bytes, 2)

    assert page_widths(first) == [101, 102]
    assert page_widths(second) == [103, 104, 105]
    assert PdfReader(io.BytesIO(first)).metadata.get("/Title") == "Sample"


def test_split_after_last_page_gives_empty_second_part(
    service: PdfManipulationService, sample_pdf_bytes: bytes
) -> None:
    first, second = service.split_pdf(sample_pdf_bytes, 5)
    assert len(page_widths(first)) == 5
    assert page_widths(second) == []


def test_split_strict_mode_rejects_out_of_bounds(
    backend: PypdfBackend, tmp_path: Path, sample_pdf_bytes: bytes
) -> None:
    service = PdfManipulationService(backend, settings=Settings(storage_dir=tmp_path, strict_ranges=True))
    with pytest.raises(PageOutOfBoundsError):
        service.split_pdf(sample_pdf_bytes, 5)


def test_extract_clamps_end_page(service: PdfManipulationService, sample_pdf_bytes: bytes) -> None:
    extracted = service.extract_pages(sample_pdf_bytes, 3, 1000)
    assert page_widths(extracted) == [103, 104, 105]


def test_extract_full_range_reproduces_source(service: PdfManipulationService, sample_pdf_bytes: bytes) -> None:
    extracted = service.extract_pages(sample_pdf_bytes, 1, 5)
    assert page_widths(extracted) == page_widths(sample_pdf_bytes)


def test_extract_start_past_end_yields_empty_document(
    service: PdfManipulationService, sample_pdf_bytes: bytes
) -> None:
    assert page_widths(service.extract_pages(sample_pdf_bytes, 8, 9)) == []


def test_extract_validation_failure_closes_document(tmp_path: Path, sample_pdf_bytes: bytes) -> None:
    backend = TrackingBackend()
    service = PdfManipulationService(backend, settings=Settings(storage_dir=tmp_path))

    with pytest.raises(InvalidStartError):
        service.extract_pages(sample_pdf_bytes, 0, 2)
    with pytest.raises(EndBeforeStartError):
        service.extract_pages(sample_pdf_bytes, 4, 2)

    assert len(backend.opened) == 2
    assert all(document.closed for document in backend.opened)


def test_codec_failures_are_logged_and_reraised(
    service: PdfManipulationService, caplog: pytest.LogCaptureFixture
) -> None:
    logger = logging.getLogger("pdfconverter.service")
    logger.addHandler(caplog.handler)
    try:
        with pytest.raises(DocumentReadError):
            service.extract_pages(b"garbage", 1, 2)
    finally:
        logger.removeHandler(caplog.handler)

    assert "Error while trying to extract pages" in caplog.text


def test_compress_rejects_unknown_level(service: PdfManipulationService, sample_pdf_bytes: bytes) -> None:
    with pytest.raises(UnsupportedCompressionLevelError):
        service.compress_pdf(sample_pdf_bytes, 4)


def test_store_split_parts_round_trip(service: PdfManipulationService, sample_pdf_bytes: bytes) -> None:
    parts = service.split_pdf(sample_pdf_bytes, 1)

    stored = service.store_split_parts(parts, "report")

    assert [item.filename for item in stored] == ["report_part1.pdf", "report_part2.pdf"]
    assert stored[0].token != stored[1].token

    fetched = service.store.pop(stored[1].token)
    assert page_widths(fetched.data or b"") == [102, 103, 104, 105]
    with pytest.raises(ResourceNotFoundError):
        service.store.pop(stored[1].token)


def test_get_info(service: PdfManipulationService, sample_pdf_bytes: bytes) -> None:
    info = service.get_info(sample_pdf_bytes)
    assert info.num_pages == 5
    assert info.file_size == len(sample_pdf_bytes)
    assert info.metadata["/Producer"] == "pdfconverter-tests"
