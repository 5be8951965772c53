"""Service layer combining the codec backend with page-range orchestration."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import ExitStack
from dataclasses import dataclass, field
from typing import Dict, Iterator, Sequence

from .backends import initialize_backend
from .backends.base import BackendDocument, PDFBackend
from .compress import CompressionResult, compress_pdf
from .config import Settings
from .exceptions import CodecError, EmptyUploadError, InvalidArgumentError
from .orchestrator import PageRangeOrchestrator
from .storage import DownloadStore, StoredFile
from .utils import get_logger
from .watermark import add_text_watermark

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class PDFInfo:
    """Summary information describing a PDF document."""

    num_pages: int
    file_size: int
    metadata: Dict[str, str] = field(default_factory=dict)


class PdfManipulationService:
    """Merge, split, extract, watermark and compress PDFs held in memory."""

    def __init__(
        self,
        backend: PDFBackend | None = None,
        *,
        settings: Settings | None = None,
        store: DownloadStore | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.backend: PDFBackend = backend or initialize_backend()
        self.orchestrator = PageRangeOrchestrator(self.backend, strict=self.settings.strict_ranges)
        self.store = store or DownloadStore(
            self.settings.storage_dir,
            ttl_seconds=self.settings.download_ttl_seconds,
        )

    # ------------------------------------------------------------------
    # Document lifetime helpers
    # ------------------------------------------------------------------
    def _open(self, stack: ExitStack, payload: bytes, document_id: str) -> BackendDocument:
        if not payload:
            raise EmptyUploadError()
        document = self.backend.open(payload, document_id)
        stack.callback(document.close)
        return document

    def _open_all(self, stack: ExitStack, payloads: Sequence[bytes]) -> list[BackendDocument]:
        for payload in payloads:
            if not payload:
                raise EmptyUploadError()

        ids = [f"document-{index}" for index in range(1, len(payloads) + 1)]
        workers = min(self.settings.merge_workers, len(payloads))
        if workers <= 1:
            return [self._open(stack, payload, document_id) for payload, document_id in zip(payloads, ids)]

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pdf-open") as pool:
            futures: list[Future[BackendDocument]] = [
                pool.submit(self.backend.open, payload, document_id)
                for payload, document_id in zip(payloads, ids)
            ]

        # Futures are consumed in submission order so the merge keeps input order.
        documents: list[BackendDocument] = []
        first_error: BaseException | None = None
        for future in futures:
            exc = future.exception()
            if exc is not None:
                first_error = first_error or exc
                continue
            document = future.result()
            stack.callback(document.close)
            documents.append(document)
        if first_error is not None:
            raise first_error
        return documents

    @staticmethod
    def _log_codec_failure(operation: str, exc: CodecError) -> None:
        LOGGER.error("Error while trying to %s: %s", operation, exc)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def get_info(self, payload: bytes) -> PDFInfo:
        with ExitStack() as stack:
            document = self._open(stack, payload, "document-1")
            return PDFInfo(
                num_pages=document.num_pages,
                file_size=len(payload),
                metadata=dict(document.metadata),
            )

    def merge_pdfs(self, payloads: Sequence[bytes]) -> bytes:
        """Merge ``payloads`` into one PDF, preserving input and page order."""

        try:
            with ExitStack() as stack:
                documents = self._open_all(stack, payloads)
                plan = self.orchestrator.plan_merge(documents)
                metadata = documents[0].metadata if documents else None
                merged = self.orchestrator.materialize(plan, documents, metadata=metadata)
        except CodecError as exc:
            self._log_codec_failure("merge PDFs", exc)
            raise

        LOGGER.info("Merged %d PDF(s) into %d page(s)", len(payloads), len(plan))
        return merged

    def split_pdf(self, payload: bytes, split_after_page: int) -> list[bytes]:
        """Split ``payload`` after ``split_after_page`` into exactly two PDFs."""

        try:
            with ExitStack() as stack:
                document = self._open(stack, payload, "document-1")
                first, second = self.orchestrator.plan_split(document, split_after_page)
                parts = [
                    self.orchestrator.materialize(plan, [document], metadata=document.metadata)
                    for plan in (first, second)
                ]
        except CodecError as exc:
            self._log_codec_failure("split PDF", exc)
            raise

        LOGGER.info(
            "Split PDF after page %s into %d and %d page(s)", split_after_page, len(first), len(second)
        )
        return parts

    def extract_pages(self, payload: bytes, start_page: int, end_page: int) -> bytes:
        """Extract pages ``start_page..end_page`` (clamped to the document)."""

        try:
            with ExitStack() as stack:
                document = self._open(stack, payload, "document-1")
                plan = self.orchestrator.plan_extract(document, start_page, end_page)
                extracted = self.orchestrator.materialize(plan, [document], metadata=document.metadata)
        except CodecError as exc:
            self._log_codec_failure("extract pages", exc)
            raise

        LOGGER.info("Extracted pages %s", plan.page_indices())
        return extracted

    def add_watermark(self, payload: bytes, text: str) -> bytes:
        if not payload:
            raise EmptyUploadError()
        try:
            return add_text_watermark(payload, text)
        except CodecError as exc:
            self._log_codec_failure("add watermark", exc)
            raise

    def compress_pdf(self, payload: bytes, level: int) -> CompressionResult:
        if not payload:
            raise EmptyUploadError()
        try:
            return compress_pdf(payload, level)
        except CodecError as exc:
            self._log_codec_failure("compress PDF", exc)
            raise

    def store_split_parts(self, parts: Sequence[bytes], base_name: str) -> list[StoredFile]:
        """Persist split outputs for later download and return their handles."""

        if not base_name:
            raise InvalidArgumentError("A base name is required to store split parts.")
        return [
            self.store.save(part, name)
            for part, name in zip(parts, iter_part_names(base_name, len(parts)))
        ]


def iter_part_names(base_name: str, count: int) -> Iterator[str]:
    for index in range(1, count + 1):
        yield f"{base_name}_part{index}.pdf"


__all__ = ["PDFInfo", "PdfManipulationService", "iter_part_names"]
