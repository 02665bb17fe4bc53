"""Compression pipeline for files queued for upload.

Images are really re-encoded. Documents, spreadsheets, PDFs and large
files of other types get a simulated reduction: the replacement payload
is a zero-filled placeholder of the reduced size.
"""

import logging
import math
from dataclasses import dataclass, replace
from decimal import Decimal

from dropshare.core.exceptions import CompressionError, ValidationError
from dropshare.core.runtime import Clock, SystemClock
from dropshare.files.classifier import FileCategory, classify_mime_type, format_file_size
from dropshare.files.payload import RawFile
from dropshare.upload.handlers.image_handler import ImageEncoder

logger = logging.getLogger(__name__)

LARGE_FILE_THRESHOLD = 100 * 1024
DOCUMENT_MAX_REDUCTION = 0.3
OTHER_MAX_REDUCTION = 0.2

DOCUMENT_CATEGORIES = {FileCategory.DOCUMENT, FileCategory.SPREADSHEET, FileCategory.PDF}


@dataclass(frozen=True)
class CompressionSavings:
    """Size comparison between an original and a compressed file."""

    original_size: int
    compressed_size: int
    savings_bytes: int
    savings_percent: float
    original_display: str
    compressed_display: str
    savings_display: str


def describe_savings(original_size: int, compressed_size: int) -> CompressionSavings:
    """Describe how much a compression saved.

    The percentage is rounded to one decimal and is 0.0 when the
    original size is zero.
    """
    savings = original_size - compressed_size
    percent = round(savings / original_size * 100, 1) if original_size > 0 else 0.0
    return CompressionSavings(
        original_size=original_size,
        compressed_size=compressed_size,
        savings_bytes=savings,
        savings_percent=percent,
        original_display=format_file_size(original_size),
        compressed_display=format_file_size(compressed_size),
        savings_display=format_file_size(max(savings, 0)),
    )


def simulated_size(size: int, quality: float, max_reduction: float) -> int:
    """Size after a simulated reduction of up to ``max_reduction`` at quality 1.

    Computed in Decimal so that ``1000`` at quality 1.0 and 30% gives 700.
    """
    factor = 1 - Decimal(str(quality)) * Decimal(str(max_reduction))
    return math.floor(Decimal(size) * factor)


class CompressionPipeline:
    """Produces a same-name, same-type replacement for a file."""

    def __init__(self, image_encoder: ImageEncoder, clock: Clock | None = None):
        self.image_encoder = image_encoder
        self.clock = clock or SystemClock()

    def is_compressible(self, file: RawFile) -> bool:
        category = classify_mime_type(file.mime_type)
        return (
            category is FileCategory.IMAGE
            or category in DOCUMENT_CATEGORIES
            or file.size > LARGE_FILE_THRESHOLD
        )

    def compress(self, file: RawFile, quality: float) -> RawFile:
        """Compress a file.

        Args:
            file: File to compress
            quality: Quality factor in (0, 1]; 1 keeps the most quality

        Returns:
            A replacement RawFile, or ``file`` itself when nothing is gained

        Raises:
            ValidationError: If quality is out of range
            CompressionError: If an image cannot be re-encoded
        """
        if not 0 < quality <= 1:
            raise ValidationError(f"Compression quality must be in (0, 1], got {quality}")

        category = classify_mime_type(file.mime_type)

        if category is FileCategory.IMAGE:
            return self._compress_image(file, quality)

        if category in DOCUMENT_CATEGORIES:
            return self._placeholder(file, simulated_size(file.size, quality, DOCUMENT_MAX_REDUCTION))

        if file.size > LARGE_FILE_THRESHOLD:
            return self._placeholder(file, simulated_size(file.size, quality, OTHER_MAX_REDUCTION))

        return file

    def _compress_image(self, file: RawFile, quality: float) -> RawFile:
        if not file.data:
            raise CompressionError(f"No image data to compress for {file.name}")

        result = self.image_encoder.reencode(file.data, file.mime_type, quality)
        if len(result.data) >= file.size:
            logger.debug(
                "Re-encoded image is not smaller, keeping original",
                extra={"file_name": file.name, "original_size": file.size, "encoded_size": len(result.data)},
            )
            return file

        logger.info(
            f"Compressed image {file.name}: {file.size} -> {len(result.data)} bytes",
            extra={"width": result.width, "height": result.height, "encoder_quality": result.encoder_quality},
        )
        return replace(file, data=result.data, size=len(result.data), last_modified=self.clock.now())

    def _placeholder(self, file: RawFile, new_size: int) -> RawFile:
        logger.info(f"Simulated compression of {file.name}: {file.size} -> {new_size} bytes")
        return replace(file, data=bytes(new_size), size=new_size, last_modified=self.clock.now())
