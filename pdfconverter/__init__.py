"""In-memory PDF merge, split, extract, watermark and compression toolkit."""

from __future__ import annotations

from .backends import BackendDocument, PDFBackend, PypdfBackend, initialize_backend
from .compress import LEVELS as COMPRESSION_LEVELS
from .compress import CompressionLevel, CompressionResult, compress_pdf
from .config import Settings, load_settings
from .exceptions import (
    CodecError,
    DocumentReadError,
    EmptyUploadError,
    EndBeforeStartError,
    InvalidArgumentError,
    InvalidStartError,
    PageOutOfBoundsError,
    PdfConverterError,
    RangeError,
    RangeErrorKind,
    ResourceNotFoundError,
    UnsupportedCompressionLevelError,
)
from .orchestrator import (
    OutputPlan,
    PageRangeOrchestrator,
    PageRef,
    ValidatedRange,
    materialize,
    plan_extract,
    plan_merge,
    plan_split,
    validate_range,
)
from .service import PDFInfo, PdfManipulationService
from .storage import DownloadStore, StoredFile
from .watermark import WatermarkStyle, add_text_watermark

__version__ = "1.0.0"

__all__ = [
    "BackendDocument",
    "CodecError",
    "COMPRESSION_LEVELS",
    "CompressionLevel",
    "CompressionResult",
    "DocumentReadError",
    "DownloadStore",
    "EmptyUploadError",
    "EndBeforeStartError",
    "InvalidArgumentError",
    "InvalidStartError",
    "OutputPlan",
    "PDFBackend",
    "PDFInfo",
    "PageOutOfBoundsError",
    "PageRangeOrchestrator",
    "PageRef",
    "PdfConverterError",
    "PdfManipulationService",
    "PypdfBackend",
    "RangeError",
    "RangeErrorKind",
    "ResourceNotFoundError",
    "Settings",
    "StoredFile",
    "UnsupportedCompressionLevelError",
    "ValidatedRange",
    "WatermarkStyle",
    "add_text_watermark",
    "compress_pdf",
    "initialize_backend",
    "load_settings",
    "materialize",
    "plan_extract",
    "plan_merge",
    "plan_split",
    "validate_range",
    "__version__",
]
