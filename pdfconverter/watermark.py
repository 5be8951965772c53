"""Text watermark stamping."""

from __future__ import annotations

import io
import math
from dataclasses import dataclass, field

from pypdf import PdfReader, PdfWriter
from reportlab.lib import colors
from reportlab.pdfgen import canvas

from .exceptions import CodecError, DocumentReadError, InvalidArgumentError
from .utils import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class WatermarkStyle:
    """Placement and appearance of the watermark text."""

    font_name: str = "Helvetica"
    font_size: float = 20
    color: colors.Color = field(default_factory=lambda: colors.red)
    rotation: float = math.pi / 4
    x: float = 140
    y: float = 100
    width: float = 500

    @property
    def rotation_degrees(self) -> float:
        return math.degrees(self.rotation)


DEFAULT_STYLE = WatermarkStyle()


def _build_overlay(text: str, page_width: float, page_height: float, style: WatermarkStyle) -> bytes:
    buffer = io.BytesIO()
    overlay = canvas.Canvas(buffer, pagesize=(page_width, page_height))
    overlay.setFont(style.font_name, style.font_size)
    overlay.setFillColor(style.color)
    overlay.saveState()
    overlay.translate(style.x, style.y)
    overlay.rotate(style.rotation_degrees)
    # Left aligned at the box origin.
    overlay.drawString(0, 0, text)
    overlay.restoreState()
    overlay.showPage()
    overlay.save()
    return buffer.getvalue()


def add_text_watermark(data: bytes, text: str, style: WatermarkStyle = DEFAULT_STYLE) -> bytes:
    """Return ``data`` with ``text`` stamped on every page."""

    if not text or not text.strip():
        raise InvalidArgumentError("Watermark text must not be empty.")

    source = io.BytesIO(data)
    try:
        try:
            reader = PdfReader(source)
        except Exception as exc:
            raise DocumentReadError(f"Corrupted or invalid PDF file. Error: {exc}") from exc

        writer = PdfWriter(clone_from=reader)
        if reader.metadata:
            writer.add_metadata(reader.metadata)
        for index, page in enumerate(writer.pages, start=1):
            width = float(page.mediabox.width)
            height = float(page.mediabox.height)
            overlay_page = PdfReader(io.BytesIO(_build_overlay(text, width, height, style))).pages[0]
            page.merge_page(overlay_page)
            LOGGER.debug("Watermarked page %s (%sx%s)", index, width, height)

        output = io.BytesIO()
        writer.write(output)
    except (DocumentReadError, InvalidArgumentError):
        raise
    except Exception as exc:
        raise CodecError(f"Failed to add watermark: {exc}") from exc
    finally:
        source.close()

    return output.getvalue()


__all__ = ["DEFAULT_STYLE", "WatermarkStyle", "add_text_watermark"]
