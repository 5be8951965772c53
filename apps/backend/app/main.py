"""FastAPI application exposing PDF manipulation endpoints."""

from __future__ import annotations

import base64
import logging
from pathlib import Path
from typing import Any, Callable, List, Literal, TypeVar
from urllib.parse import quote

from fastapi import APIRouter, FastAPI, File, HTTPException, Query, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.background import BackgroundTask
from starlette.exceptions import HTTPException as StarletteHTTPException

from pdfconverter import __version__
from pdfconverter.backends import initialize_backend
from pdfconverter.config import Settings, load_settings
from pdfconverter.exceptions import (
    DocumentReadError,
    InvalidArgumentError,
    PdfConverterError,
    ResourceNotFoundError,
)
from pdfconverter.service import PdfManipulationService
from pdfconverter.utils import configure_logging, safe_filename

from .models import DownloadLink, InlinePart, SplitResponse

LOGGER = logging.getLogger("pdfconverter.api")
PDF_MEDIA_TYPE = "application/pdf"

T = TypeVar("T")

router = APIRouter(prefix="/api/pdf", tags=["PDF Operations"])


def _service(request: Request) -> PdfManipulationService:
    return request.app.state.service


def _content_disposition(filename: str) -> str:
    """Build an attachment header that survives non-ASCII names.

    Header values are latin-1 on the wire, so names outside ASCII get an
    ASCII ``filename`` fallback and the full name as ``filename*`` (RFC 5987).
    """

    quoted = quote(filename)
    if quoted == filename:
        return f'attachment; filename="{filename}"'

    fallback = filename.encode("ascii", "ignore").decode("ascii").replace('"', "")
    if not Path(fallback).stem.strip("._- "):
        fallback = "download" + Path(filename).suffix.encode("ascii", "ignore").decode("ascii")
    return f"attachment; filename=\"{fallback}\"; filename*=utf-8''{quoted}"


def _pdf_response(content: bytes, filename: str, headers: dict[str, str] | None = None) -> Response:
    response_headers = {"Content-Disposition": _content_disposition(filename)}
    if headers:
        response_headers.update(headers)
    return Response(content=content, media_type=PDF_MEDIA_TYPE, headers=response_headers)


async def _read_upload(upload: UploadFile | None) -> bytes:
    """Return the bytes of ``upload`` or fail with ``400 Empty file.``."""

    if upload is None:
        raise HTTPException(status_code=400, detail="Empty file.")
    contents = await upload.read()
    if not contents:
        raise HTTPException(status_code=400, detail="Empty file.")
    return contents


async def _run(func: Callable[..., T], *args: Any) -> T:
    """Run a blocking service call in the threadpool.

    Library errors keep their type so the registered handlers can map them;
    anything else becomes a 500.
    """

    try:
        return await run_in_threadpool(func, *args)
    except PdfConverterError:
        raise
    except Exception as exc:  # pragma: no cover
        LOGGER.exception("Unexpected failure in %s", getattr(func, "__name__", func))
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@router.post("/merge", summary="Merge PDFs", response_class=Response)
async def merge_pdfs(
    request: Request,
    pdf_files: List[UploadFile] = File(..., alias="pdfFiles", description="PDF files to merge, in order."),
) -> Response:
    """Merge uploaded PDFs into a single document in upload order."""

    if not pdf_files:
        raise HTTPException(status_code=400, detail="At least one PDF must be provided.")

    payloads = [await _read_upload(upload) for upload in pdf_files]
    merged = await _run(_service(request).merge_pdfs, payloads)
    return _pdf_response(merged, "merged.pdf")


@router.post("/split", summary="Split a PDF after a page", response_model=SplitResponse)
async def split_pdf(
    request: Request,
    pdf_file: UploadFile = File(..., alias="pdfFile", description="Source PDF to split."),
    split_after_page: int = Query(..., alias="splitAfterPage", description="Last page of the first part."),
    mode: Literal["returnInline", "returnDownloadLinks"] | None = Query(
        None,
        description="returnInline embeds both parts as base64; returnDownloadLinks stores them for download.",
    ),
) -> SplitResponse:
    """Split a PDF into two documents: pages ``1..N`` and ``N+1..end``."""

    service = _service(request)
    settings: Settings = request.app.state.settings
    response_mode = mode or settings.split_response_mode

    payload = await _read_upload(pdf_file)
    parts = await _run(service.split_pdf, payload, split_after_page)
    base_name = Path(safe_filename(pdf_file.filename, "document.pdf")).stem or "document"

    if response_mode == "returnDownloadLinks":
        stored = await _run(service.store_split_parts, parts, base_name)
        links: list[InlinePart | DownloadLink] = [
            DownloadLink(
                file_name=item.filename,
                token=item.token,
                url=str(request.url_for("download_file").include_query_params(fileName=item.token)),
            )
            for item in stored
        ]
        return SplitResponse(mode=response_mode, parts=links)

    inline: list[InlinePart | DownloadLink] = []
    for index, part in enumerate(parts, start=1):
        info = await _run(service.get_info, part)
        inline.append(
            InlinePart(
                file_name=f"{base_name}_part{index}.pdf",
                page_count=info.num_pages,
                content=base64.b64encode(part).decode("ascii"),
            )
        )
    return SplitResponse(mode=response_mode, parts=inline)


@router.post("/addWatermark", summary="Add a text watermark", response_class=Response)
async def add_watermark(
    request: Request,
    pdf_file: UploadFile = File(..., alias="pdfFile", description="Source PDF to watermark."),
    watermark_text: str = Query(..., alias="watermarkText", description="Text stamped on every page."),
) -> Response:
    payload = await _read_upload(pdf_file)
    watermarked = await _run(_service(request).add_watermark, payload, watermark_text)
    return _pdf_response(watermarked, "watermarked.pdf")


@router.post("/compress", summary="Compress a PDF", response_class=Response)
async def compress_pdf(
    request: Request,
    pdf_file: UploadFile = File(..., alias="pdfFile", description="Source PDF to compress."),
    compression_level: int = Query(
        ...,
        alias="compressionLevel",
        description="1 (light), 2 (strong) or 3 (ultra).",
    ),
) -> Response:
    payload = await _read_upload(pdf_file)
    result = await _run(_service(request).compress_pdf, payload, compression_level)
    return _pdf_response(
        result.data,
        "compressed.pdf",
        headers={
            "X-Original-Size": str(result.original_size),
            "X-Compressed-Size": str(result.compressed_size),
            "X-Reduction-Percent": f"{result.reduction_percent:.2f}",
        },
    )


@router.post("/extract", summary="Extract a page range", response_class=Response)
async def extract_pages(
    request: Request,
    pdf_file: UploadFile = File(..., alias="pdfFile", description="Source PDF to extract pages from."),
    start_page: int = Query(..., alias="startPage", description="First page to extract (1-based)."),
    end_page: int = Query(..., alias="endPage", description="Last page to extract; clamped to the document."),
) -> Response:
    payload = await _read_upload(pdf_file)
    extracted = await _run(_service(request).extract_pages, payload, start_page, end_page)
    return _pdf_response(extracted, "extracted.pdf")


@router.get("/Download", name="download_file", summary="Download a stored split part", response_class=Response)
async def download_file(
    request: Request,
    file_name: str = Query(..., alias="fileName", description="Token returned by the split endpoint."),
) -> Response:
    """Return a stored file once; the entry is removed after it is served."""

    store = _service(request).store
    stored = await _run(store.claim, file_name)
    try:
        response = _pdf_response(stored.data or b"", stored.filename)
    except Exception:
        store.release(stored)
        raise
    response.background = BackgroundTask(store.discard, stored)
    return response


def _plain_text(status_code: int) -> Callable[[Request, Exception], Any]:
    async def handler(request: Request, exc: Exception) -> PlainTextResponse:
        return PlainTextResponse(str(exc), status_code=status_code)

    return handler


async def _plain_http_error(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=getattr(exc, "headers", None))


async def _codec_failure(request: Request, exc: PdfConverterError) -> PlainTextResponse:
    LOGGER.error("Request to %s failed: %s", request.url.path, exc)
    return PlainTextResponse(str(exc), status_code=500)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application with a fully initialised service."""

    settings = settings or load_settings()
    configure_logging(settings.log_level)
    backend = initialize_backend()

    application = FastAPI(
        title="PDF Converter API",
        description="Merge, split, watermark, compress and extract PDF pages.",
        version=__version__,
    )
    application.state.settings = settings
    application.state.service = PdfManipulationService(backend, settings=settings)

    application.add_exception_handler(StarletteHTTPException, _plain_http_error)
    application.add_exception_handler(PdfConverterError, _codec_failure)
    application.add_exception_handler(InvalidArgumentError, _plain_text(400))
    application.add_exception_handler(DocumentReadError, _plain_text(400))
    application.add_exception_handler(ResourceNotFoundError, _plain_text(404))

    @application.get("/health", response_class=JSONResponse)
    async def health() -> dict[str, str]:
        """Lightweight health endpoint for uptime checks."""
        return {"status": "ok"}

    application.include_router(router)
    return application


app = create_app()

__all__ = ["app", "create_app"]
