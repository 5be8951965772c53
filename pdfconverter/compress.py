"""Compression engine for :mod:`pdfconverter`."""

from __future__ import annotations

import dataclasses
import io

from PIL import Image
from pypdf import PdfReader, PdfWriter

from .exceptions import CodecError, DocumentReadError, UnsupportedCompressionLevelError
from .utils import get_logger

_LOGGER = get_logger(__name__)

STREAM_COMPRESSION_LEVEL = 9


@dataclasses.dataclass(frozen=True)
class CompressionLevel:
    """Defines behavioural toggles for compression levels."""

    level: int
    name: str
    image_quality: int
    downsample_ratio: float


@dataclasses.dataclass(frozen=True)
class CompressionResult:
    """Represents the outcome of a compression run."""

    data: bytes = dataclasses.field(repr=False)
    level: int
    original_size: int
    compressed_size: int

    @property
    def bytes_saved(self) -> int:
        return max(self.original_size - self.compressed_size, 0)

    @property
    def compression_ratio(self) -> float:
        if self.original_size == 0:
            return 1.0
        return self.compressed_size / self.original_size

    @property
    def reduction_percent(self) -> float:
        if self.original_size == 0:
            return 0.0
        return (self.original_size - self.compressed_size) / self.original_size * 100


LEVELS: dict[int, CompressionLevel] = {
    1: CompressionLevel(1, "light", image_quality=60, downsample_ratio=1.0),
    2: CompressionLevel(2, "strong", image_quality=90, downsample_ratio=0.75),
    3: CompressionLevel(3, "ultra", image_quality=50, downsample_ratio=1.0),
}


def get_level(level: int) -> CompressionLevel:
    try:
        return LEVELS[level]
    except (KeyError, TypeError) as exc:
        raise UnsupportedCompressionLevelError(
            f"Invalid compression level: {level}. Expected one of 1, 2, 3."
        ) from exc


def _recompress_page_images(page, config: CompressionLevel) -> int:
    replaced = 0
    try:
        images = list(page.images)
    except Exception as exc:  # pragma: no cover - best effort
        _LOGGER.debug("Unable to enumerate page images: %s", exc)
        return 0

    for image_file in images:
        try:
            image = image_file.image
            if image is None:
                continue
            if config.downsample_ratio < 0.999:
                new_size = (
                    max(1, int(image.width * config.downsample_ratio)),
                    max(1, int(image.height * config.downsample_ratio)),
                )
                image = image.resize(new_size, Image.LANCZOS)
            if image.mode not in {"RGB", "L"}:
                image = image.convert("RGB")
            image_file.replace(image, quality=config.image_quality)
            replaced += 1
        except Exception as exc:
            _LOGGER.debug("Skipping image %s: %s", getattr(image_file, "name", "?"), exc)
    return replaced


def compress_pdf(data: bytes, level: int) -> CompressionResult:
    """Compress ``data`` using the settings of compression ``level`` (1-3)."""

    config = get_level(level)

    source = io.BytesIO(data)
    try:
        try:
            reader = PdfReader(source)
        except Exception as exc:
            raise DocumentReadError(f"Corrupted or invalid PDF file. Error: {exc}") from exc

        writer = PdfWriter(clone_from=reader)
        if reader.metadata:
            writer.add_metadata(reader.metadata)
        images = 0
        for page in writer.pages:
            images += _recompress_page_images(page, config)
            page.compress_content_streams(level=STREAM_COMPRESSION_LEVEL)
        writer.compress_identical_objects(remove_identicals=True, remove_orphans=True)

        output = io.BytesIO()
        writer.write(output)
    except DocumentReadError:
        raise
    except Exception as exc:
        raise CodecError(f"Compression failed: {exc}") from exc
    finally:
        source.close()

    compressed = output.getvalue()
    _LOGGER.info(
        "Compressed %d bytes to %d bytes at level %s (%d image(s) recompressed)",
        len(data),
        len(compressed),
        config.name,
        images,
    )
    return CompressionResult(
        data=compressed,
        level=config.level,
        original_size=len(data),
        compressed_size=len(compressed),
    )


__all__ = ["LEVELS", "CompressionLevel", "CompressionResult", "compress_pdf", "get_level"]
