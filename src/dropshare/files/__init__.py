"""File payloads, type classification and size formatting."""

from dropshare.files.classifier import (
    FileCategory,
    category_from_filter,
    classify_mime_type,
    format_file_size,
    matches_accepted_type,
)
from dropshare.files.payload import RawFile

__all__ = [
    "FileCategory",
    "RawFile",
    "category_from_filter",
    "classify_mime_type",
    "format_file_size",
    "matches_accepted_type",
]
