"""pypdf backend implementation for pdfconverter."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import Mapping

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PdfReadError

from ..exceptions import CodecError, DocumentReadError
from .base import BackendDocument, PDFBackend

LOGGER = logging.getLogger("pdfconverter.backends.pypdf")


def _string_metadata(reader: PdfReader) -> dict[str, str]:
    metadata = reader.metadata or {}
    return {
        str(key): str(value)
        for key, value in metadata.items()
        if isinstance(key, str) and value is not None
    }


@dataclass
class PypdfDocument(BackendDocument):
    reader: PdfReader | None = field(default=None, repr=False)
    stream: io.BytesIO | None = field(default=None, repr=False)

    def get_page(self, index: int) -> object:
        if self.reader is None:
            raise CodecError(f"Document {self.document_id} is closed")
        return self.reader.pages[index - 1]

    def close(self) -> None:
        if self.stream is not None:
            self.stream.close()
        self.reader = None
        self.stream = None

    @property
    def closed(self) -> bool:
        return self.reader is None


class PypdfBackend(PDFBackend):
    """Backend implementation that uses `pypdf` under the hood."""

    def __init__(self) -> None:
        self.initialized = False

    def initialize(self) -> None:
        if self.initialized:
            return
        # pypdf reports recoverable structure problems as warnings on every read.
        logging.getLogger("pypdf").setLevel(logging.ERROR)
        self.initialized = True
        LOGGER.debug("pypdf backend initialised")

    def open(self, data: bytes, document_id: str) -> PypdfDocument:
        stream = io.BytesIO(data)
        try:
            reader = PdfReader(stream)
            if reader.is_encrypted and not reader.decrypt(""):
                raise DocumentReadError(
                    f"PDF {document_id} is encrypted and cannot be processed without a password."
                )
            num_pages = len(reader.pages)
            metadata = _string_metadata(reader)
        except DocumentReadError:
            stream.close()
            raise
        except PdfReadError as exc:
            stream.close()
            raise DocumentReadError(f"Corrupted or invalid PDF file: {document_id}. Error: {exc}") from exc
        except Exception as exc:
            stream.close()
            raise DocumentReadError(f"Unexpected error reading PDF: {document_id}. Error: {exc}") from exc

        LOGGER.debug("Opened %s with %d page(s)", document_id, num_pages)
        return PypdfDocument(
            document_id=document_id,
            num_pages=num_pages,
            metadata=metadata,
            reader=reader,
            stream=stream,
        )

    def new_writer(self) -> PdfWriter:
        return PdfWriter()

    def append_page(self, writer: PdfWriter, page: object) -> None:
        writer.add_page(page)  # type: ignore[arg-type]

    def serialize(self, writer: PdfWriter, metadata: Mapping[str, str] | None = None) -> bytes:
        if metadata:
            writer.add_metadata(dict(metadata))
        output = io.BytesIO()
        try:
            writer.write(output)
        except Exception as exc:
            raise CodecError(f"Failed to serialize PDF: {exc}") from exc
        return output.getvalue()
