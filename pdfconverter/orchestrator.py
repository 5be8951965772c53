"""Page-range orchestration for merge, split and extract operations.

The orchestrator never touches PDF bytes. It turns an operation into one or
more :class:`OutputPlan` objects, each an ordered list of
:class:`PageRef` values, and hands plans to a backend writer through
:func:`materialize`.

Range handling is lenient by default: an ``end_page`` past the document is
clamped, and a ``start_page`` past the document yields an empty plan. Pass
``strict=True`` to reject out-of-bounds requests with
:class:`~pdfconverter.exceptions.PageOutOfBoundsError` instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping, Sequence, Tuple

from .backends.base import BackendDocument, PDFBackend
from .exceptions import (
    EndBeforeStartError,
    InvalidStartError,
    PageOutOfBoundsError,
    PdfConverterError,
)
from .utils import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class PageRef:
    """A single source page, addressed by document id and 1-based index."""

    document_id: str
    page_index: int


@dataclass(frozen=True)
class OutputPlan:
    """Ordered pages that make up one output document."""

    refs: Tuple[PageRef, ...] = ()

    def __len__(self) -> int:
        return len(self.refs)

    def __iter__(self) -> Iterator[PageRef]:
        return iter(self.refs)

    def __add__(self, other: "OutputPlan") -> "OutputPlan":
        return OutputPlan(self.refs + other.refs)

    def page_indices(self) -> list[int]:
        return [ref.page_index for ref in self.refs]

    @classmethod
    def for_range(cls, document_id: str, start: int, end: int) -> "OutputPlan":
        """Return the pages ``start..end`` inclusive; empty when ``end < start``."""

        return cls(tuple(PageRef(document_id, page) for page in range(start, end + 1)))


@dataclass(frozen=True)
class ValidatedRange:
    """Inclusive page range after validation and clamping."""

    start: int
    end: int

    @property
    def is_empty(self) -> bool:
        return self.end < self.start

    def __len__(self) -> int:
        return max(self.end - self.start + 1, 0)


def validate_range(
    start_page: int,
    end_page: int,
    page_count: int,
    *,
    strict: bool = False,
) -> ValidatedRange:
    """Validate a 1-based inclusive range against ``page_count``.

    Raises:
        InvalidStartError: ``start_page`` is below 1.
        EndBeforeStartError: ``end_page`` is below ``start_page``.
        PageOutOfBoundsError: ``strict`` is set and ``start_page`` is past
            the last page.
    """

    if start_page < 1:
        raise InvalidStartError(f"Invalid page parameters: start page {start_page} must be at least 1.")
    if end_page < start_page:
        raise EndBeforeStartError(
            f"Invalid page parameters: end page {end_page} is before start page {start_page}."
        )
    if strict and start_page > page_count:
        raise PageOutOfBoundsError(
            f"Start page {start_page} is out of bounds for a document with {page_count} page(s)."
        )

    end = min(end_page, page_count)
    if end != end_page:
        LOGGER.debug("Clamped end page %s to %s", end_page, end)
    return ValidatedRange(start_page, end)


def plan_merge(documents: Iterable[BackendDocument]) -> OutputPlan:
    """Concatenate every page of ``documents`` in list order."""

    refs: list[PageRef] = []
    for document in documents:
        refs.extend(PageRef(document.document_id, page) for page in range(1, document.num_pages + 1))
    return OutputPlan(tuple(refs))


def plan_split(
    document: BackendDocument,
    split_after_page: int,
    *,
    strict: bool = False,
) -> tuple[OutputPlan, OutputPlan]:
    """Split ``document`` into pages ``1..k`` and ``k+1..n``.

    Out-of-range split points produce an empty half rather than an error
    unless ``strict`` is set.
    """

    total = document.num_pages
    if strict and not 1 <= split_after_page < total:
        raise PageOutOfBoundsError(
            f"Split point {split_after_page} must be between 1 and {total - 1} "
            f"for a document with {total} page(s)."
        )

    first = OutputPlan.for_range(document.document_id, 1, min(split_after_page, total))
    second = OutputPlan.for_range(document.document_id, max(split_after_page + 1, 1), total)
    return first, second


def plan_extract(
    document: BackendDocument,
    start_page: int,
    end_page: int,
    *,
    strict: bool = False,
) -> OutputPlan:
    validated = validate_range(start_page, end_page, document.num_pages, strict=strict)
    return OutputPlan.for_range(document.document_id, validated.start, validated.end)


def materialize(
    plan: OutputPlan,
    documents: Mapping[str, BackendDocument],
    backend: PDFBackend,
    *,
    metadata: Mapping[str, str] | None = None,
) -> bytes:
    """Copy the pages of ``plan`` into a fresh writer and serialise it."""

    writer = backend.new_writer()
    for ref in plan:
        try:
            source = documents[ref.document_id]
        except KeyError as exc:
            raise PdfConverterError(f"Unknown source document: {ref.document_id}") from exc
        LOGGER.debug("Adding page %s from %s", ref.page_index, ref.document_id)
        backend.append_page(writer, source.get_page(ref.page_index))
    return backend.serialize(writer, metadata)


class PageRangeOrchestrator:
    """Bundles the planning functions with a backend and a range policy."""

    def __init__(self, backend: PDFBackend, *, strict: bool = False) -> None:
        self.backend = backend
        self.strict = strict

    def validate_range(self, start_page: int, end_page: int, page_count: int) -> ValidatedRange:
        return validate_range(start_page, end_page, page_count, strict=self.strict)

    def plan_merge(self, documents: Sequence[BackendDocument]) -> OutputPlan:
        return plan_merge(documents)

    def plan_split(self, document: BackendDocument, split_after_page: int) -> tuple[OutputPlan, OutputPlan]:
        return plan_split(document, split_after_page, strict=self.strict)

    def plan_extract(self, document: BackendDocument, start_page: int, end_page: int) -> OutputPlan:
        return plan_extract(document, start_page, end_page, strict=self.strict)

    def materialize(
        self,
        plan: OutputPlan,
        documents: Mapping[str, BackendDocument] | Sequence[BackendDocument],
        *,
        metadata: Mapping[str, str] | None = None,
    ) -> bytes:
        if not isinstance(documents, Mapping):
            documents = {document.document_id: document for document in documents}
        return materialize(plan, documents, self.backend, metadata=metadata)


__all__ = [
    "OutputPlan",
    "PageRangeOrchestrator",
    "PageRef",
    "ValidatedRange",
    "materialize",
    "plan_extract",
    "plan_merge",
    "plan_split",
    "validate_range",
]
