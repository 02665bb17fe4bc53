"""Image re-encoding handler."""

import io
import logging
from typing import NamedTuple

from PIL import Image, UnidentifiedImageError

from dropshare.core.exceptions import CompressionError

logger = logging.getLogger(__name__)

# Pillow format names for MIME types we can write back in the same format
MIME_FORMAT_MAP = {
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
    "image/pjpeg": "JPEG",
    "image/png": "PNG",
    "image/webp": "WEBP",
    "image/gif": "GIF",
    "image/bmp": "BMP",
    "image/tiff": "TIFF",
}

LOSSY_FORMATS = {"JPEG", "WEBP"}
MIN_ENCODER_QUALITY = 10
QUALITY_STEP = 10


class ReencodeResult(NamedTuple):
    """Outcome of an image re-encode."""
    data: bytes
    width: int
    height: int
    encoder_quality: int | None


def encoder_quality_for(quality: float) -> int:
    """Map a 0-1 quality factor onto the 1-95 encoder scale."""
    return max(1, min(95, round(quality * 95)))


class ImageEncoder:
    """Re-encodes images within a pixel bound and a target size ceiling."""

    def __init__(self, max_dimension: int, max_size_bytes: int):
        self.max_dimension = max_dimension
        self.max_size_bytes = max_size_bytes

    def reencode(self, data: bytes, mime_type: str, quality: float) -> ReencodeResult:
        """Re-encode an image in its own format.

        The image is first scaled down so neither side exceeds
        ``max_dimension``. Lossy formats are then encoded starting at the
        quality mapped from ``quality`` and stepped down until the output
        fits ``max_size_bytes`` or the quality floor is reached.

        Args:
            data: Encoded image bytes
            mime_type: Declared MIME type, also used as the output format
            quality: Quality factor in (0, 1]

        Returns:
            ReencodeResult with the new bytes

        Raises:
            CompressionError: If the image cannot be decoded or encoded
        """
        try:
            with Image.open(io.BytesIO(data)) as image:
                image.load()
                output_format = MIME_FORMAT_MAP.get(mime_type.lower(), image.format or "PNG")

                if max(image.size) > self.max_dimension:
                    image.thumbnail((self.max_dimension, self.max_dimension))

                if output_format == "JPEG" and image.mode not in ("RGB", "L"):
                    image = image.convert("RGB")

                if output_format not in LOSSY_FORMATS:
                    encoded = self._save(image, output_format, None)
                    return ReencodeResult(encoded, image.width, image.height, None)

                encoder_quality = encoder_quality_for(quality)
                encoded = self._save(image, output_format, encoder_quality)
                while len(encoded) > self.max_size_bytes and encoder_quality > MIN_ENCODER_QUALITY:
                    encoder_quality = max(MIN_ENCODER_QUALITY, encoder_quality - QUALITY_STEP)
                    encoded = self._save(image, output_format, encoder_quality)

                if len(encoded) > self.max_size_bytes:
                    logger.debug(
                        "Image still above size ceiling at minimum quality",
                        extra={"size_bytes": len(encoded), "max_size_bytes": self.max_size_bytes},
                    )

                return ReencodeResult(encoded, image.width, image.height, encoder_quality)

        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            raise CompressionError(f"Image re-encode failed: {e}") from e

    @staticmethod
    def _save(image: Image.Image, output_format: str, quality: int | None) -> bytes:
        buffer = io.BytesIO()
        options: dict = {"optimize": True} if output_format in {"JPEG", "PNG", "WEBP"} else {}
        if quality is not None:
            options["quality"] = quality
        image.save(buffer, format=output_format, **options)
        return buffer.getvalue()
