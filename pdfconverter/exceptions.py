"""
Custom exceptions for pdfconverter.

Errors fall into three families: bad input supplied by the caller
(:class:`InvalidArgumentError`), failures raised by the PDF codec
(:class:`CodecError`) and missing transient downloads
(:class:`ResourceNotFoundError`).
"""

from __future__ import annotations

from enum import Enum


class PdfConverterError(Exception):
    """Base exception for all pdfconverter errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown PDF processing error occurred."


class InvalidArgumentError(PdfConverterError):
    """Raised when a request carries invalid parameters."""

    @property
    def default_message(self) -> str:
        return "Invalid argument."


class RangeErrorKind(str, Enum):
    """Reasons a page range can be rejected."""

    INVALID_START = "invalid_start"
    END_BEFORE_START = "end_before_start"
    PAGE_OUT_OF_BOUNDS = "page_out_of_bounds"


class RangeError(InvalidArgumentError):
    """Raised when a page range cannot be satisfied."""

    kind: RangeErrorKind

    @property
    def default_message(self) -> str:
        return "Invalid page parameters."


class InvalidStartError(RangeError):
    """Raised when the first requested page is below 1."""

    kind = RangeErrorKind.INVALID_START

    @property
    def default_message(self) -> str:
        return "Invalid page parameters: start page must be at least 1."


class EndBeforeStartError(RangeError):
    """Raised when the last requested page precedes the first."""

    kind = RangeErrorKind.END_BEFORE_START

    @property
    def default_message(self) -> str:
        return "Invalid page parameters: end page must not precede start page."


class PageOutOfBoundsError(RangeError):
    """Raised in strict mode when a page number exceeds the document."""

    kind = RangeErrorKind.PAGE_OUT_OF_BOUNDS

    @property
    def default_message(self) -> str:
        return "Requested page number is out of bounds."


class EmptyUploadError(InvalidArgumentError):
    """Raised when an uploaded document has no content."""

    @property
    def default_message(self) -> str:
        return "Empty file."


class UnsupportedCompressionLevelError(InvalidArgumentError):
    """Raised when a compression level outside 1-3 is requested."""

    @property
    def default_message(self) -> str:
        return "Invalid compression level"


class CodecError(PdfConverterError):
    """Raised when the PDF library fails to parse or serialize a document."""

    @property
    def default_message(self) -> str:
        return "PDF processing failed."


class DocumentReadError(CodecError):
    """Raised when input bytes cannot be decoded as a PDF document."""

    @property
    def default_message(self) -> str:
        return "Invalid or corrupted PDF file."


class ResourceNotFoundError(PdfConverterError):
    """Raised when a stored download does not exist."""

    @property
    def default_message(self) -> str:
        return "Requested file was not found."
