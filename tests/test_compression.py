"""Tests for the compression pipeline."""

import io
from unittest.mock import MagicMock

import pytest
from PIL import Image

from dropshare.core.exceptions import CompressionError, ValidationError
from dropshare.files.payload import RawFile
from dropshare.upload.compression import CompressionPipeline, describe_savings
from dropshare.upload.handlers.image_handler import ImageEncoder, ReencodeResult

from conftest import T0


def make_jpeg(width: int = 800, height: int = 600) -> bytes:
    image = Image.effect_noise((width, height), 64).convert("RGB")
    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=100)
    return buffer.getvalue()


class TestDocumentCompression:
    """Simulated reduction for documents, spreadsheets and PDFs."""

    def test_pdf_reduced_by_up_to_30_percent(self, compressor):
        file = RawFile(name="report.pdf", size=1000, mime_type="application/pdf", data=b"x" * 1000)

        result = compressor.compress(file, 1.0)

        assert result.size == 700
        assert len(result.data) == 700
        assert result.name == "report.pdf"
        assert result.mime_type == "application/pdf"
        assert result.last_modified == T0

    def test_spreadsheet_reduction_scales_with_quality(self, compressor):
        file = RawFile(
            name="budget.xlsx",
            size=1000,
            mime_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )

        assert compressor.compress(file, 0.5).size == 850
        assert compressor.compress(file, 0.1).size == 970

    def test_size_is_floored(self, compressor):
        file = RawFile(name="notes.doc", size=999, mime_type="application/msword")

        # 999 * 0.7 = 699.3
        assert compressor.compress(file, 1.0).size == 699


class TestOtherCompression:
    def test_large_other_file_reduced_by_up_to_20_percent(self, compressor):
        file = RawFile(name="archive.zip", size=200 * 1024, mime_type="application/zip")

        result = compressor.compress(file, 1.0)

        assert result.size == int(200 * 1024 * 0.8)

    def test_small_other_file_unchanged(self, compressor):
        file = RawFile(name="notes.txt", size=100 * 1024, mime_type="text/plain", data=b"a")

        assert compressor.compress(file, 1.0) is file


class TestImageCompression:
    def test_image_reencoded_smaller(self, compressor):
        data = make_jpeg()
        file = RawFile.from_bytes("photo.jpg", "image/jpeg", data)

        result = compressor.compress(file, 0.5)

        assert result.size < file.size
        assert result.size == len(result.data)
        assert result.name == "photo.jpg"
        assert result.mime_type == "image/jpeg"
        with Image.open(io.BytesIO(result.data)) as image:
            assert image.format == "JPEG"

    def test_corrupt_image_raises_compression_error(self, compressor):
        file = RawFile.from_bytes("broken.png", "image/png", b"definitely not a png")

        with pytest.raises(CompressionError):
            compressor.compress(file, 0.8)

    def test_image_without_data_raises_compression_error(self, compressor):
        file = RawFile(name="ghost.png", size=2048, mime_type="image/png")

        with pytest.raises(CompressionError):
            compressor.compress(file, 0.8)

    def test_original_kept_when_not_smaller(self, clock):
        encoder = MagicMock(spec=ImageEncoder)
        encoder.reencode.return_value = ReencodeResult(b"y" * 50, 10, 10, 76)
        pipeline = CompressionPipeline(encoder, clock=clock)
        file = RawFile.from_bytes("tiny.jpg", "image/jpeg", b"x" * 40)

        assert pipeline.compress(file, 0.8) is file
        encoder.reencode.assert_called_once_with(file.data, "image/jpeg", 0.8)


class TestQualityValidation:
    @pytest.mark.parametrize("quality", [0, -0.5, 1.01])
    def test_out_of_range_quality(self, compressor, quality):
        file = RawFile(name="report.pdf", size=1000, mime_type="application/pdf")

        with pytest.raises(ValidationError):
            compressor.compress(file, quality)


class TestIsCompressible:
    def test_compressible_types(self, compressor):
        assert compressor.is_compressible(RawFile(name="a.png", size=10, mime_type="image/png"))
        assert compressor.is_compressible(RawFile(name="a.pdf", size=10, mime_type="application/pdf"))
        assert compressor.is_compressible(RawFile(name="a.doc", size=10, mime_type="application/msword"))
        assert compressor.is_compressible(RawFile(name="a.bin", size=200 * 1024, mime_type="application/octet-stream"))

    def test_small_other_not_compressible(self, compressor):
        assert not compressor.is_compressible(RawFile(name="a.txt", size=10, mime_type="text/plain"))


class TestDescribeSavings:
    def test_savings(self):
        savings = describe_savings(2048, 1024)

        assert savings.savings_bytes == 1024
        assert savings.savings_percent == 50.0
        assert savings.original_display == "2 KB"
        assert savings.compressed_display == "1 KB"
        assert savings.savings_display == "1 KB"

    def test_percent_rounded_to_one_decimal(self):
        assert describe_savings(3, 2).savings_percent == 33.3

    def test_zero_original_size(self):
        savings = describe_savings(0, 0)

        assert savings.savings_percent == 0.0
        assert savings.savings_bytes == 0
