"""
MIME type classifier and size formatting.

Maps MIME types into the coarse categories used for compression routing
and catalog filtering:
- image: anything under image/
- pdf: PDF documents
- spreadsheet: Excel and OpenDocument / OOXML spreadsheets
- document: Word and other office documents
- other: everything else
"""

import math
from enum import Enum
from typing import Dict, List, Optional

from dropshare.core.exceptions import ValidationError


class FileCategory(str, Enum):
    """Coarse file categories."""

    IMAGE = "image"
    DOCUMENT = "document"
    SPREADSHEET = "spreadsheet"
    PDF = "pdf"
    OTHER = "other"


# Catalog filter names to categories; "all" means no category filter
FILTER_CATEGORY_MAP: Dict[str, Optional[FileCategory]] = {
    "all": None,
    "images": FileCategory.IMAGE,
    "documents": FileCategory.DOCUMENT,
    "spreadsheets": FileCategory.SPREADSHEET,
    "pdfs": FileCategory.PDF,
}

# Substring rules, checked in order. Spreadsheets come before documents
# because OOXML spreadsheet types contain "officedocument".
MIME_SUBSTRING_RULES: List[tuple[tuple[str, ...], FileCategory]] = [
    (("pdf",), FileCategory.PDF),
    (("spreadsheet", "excel"), FileCategory.SPREADSHEET),
    (("document", "word"), FileCategory.DOCUMENT),
]

SIZE_UNITS = ["Bytes", "KB", "MB", "GB", "TB"]


def _normalize(mime_type: str) -> str:
    return mime_type.lower().split(";")[0].strip()


def classify_mime_type(mime_type: str) -> FileCategory:
    """
    Classify a MIME type into a coarse file category.

    Args:
        mime_type: The MIME type string (e.g., "application/pdf")

    Returns:
        FileCategory enum value

    Examples:
        >>> classify_mime_type("image/png")
        <FileCategory.IMAGE: 'image'>
        >>> classify_mime_type("application/vnd.ms-excel")
        <FileCategory.SPREADSHEET: 'spreadsheet'>
        >>> classify_mime_type("application/zip")
        <FileCategory.OTHER: 'other'>
    """
    normalized = _normalize(mime_type)

    if normalized.startswith("image/"):
        return FileCategory.IMAGE

    for needles, category in MIME_SUBSTRING_RULES:
        if any(needle in normalized for needle in needles):
            return category

    return FileCategory.OTHER


def is_image(mime_type: str) -> bool:
    return classify_mime_type(mime_type) is FileCategory.IMAGE


def matches_accepted_type(mime_type: str, accepted_types: List[str]) -> bool:
    """
    Check a MIME type against a list of accepted patterns.

    A pattern containing ``*`` matches by prefix (``image/*`` accepts any
    ``image/...``); other patterns must match exactly. An empty list
    accepts everything.
    """
    if not accepted_types:
        return True

    for pattern in accepted_types:
        if "*" in pattern:
            if mime_type.startswith(pattern.replace("*", "")):
                return True
        elif mime_type == pattern:
            return True
    return False


def category_from_filter(name: str) -> Optional[FileCategory]:
    """
    Resolve a catalog filter name (``images``, ``pdfs``, ``all``...).

    Returns:
        The matching category, or None for ``all``

    Raises:
        ValidationError: If the filter name is unknown
    """
    key = name.strip().lower()
    if key not in FILTER_CATEGORY_MAP:
        raise ValidationError(
            f"Unknown category filter {name!r}. Expected one of: {', '.join(FILTER_CATEGORY_MAP)}"
        )
    return FILTER_CATEGORY_MAP[key]


def format_file_size(size_bytes: int) -> str:
    """
    Format a byte count using binary units.

    Examples:
        >>> format_file_size(0)
        '0 Bytes'
        >>> format_file_size(1536)
        '1.5 KB'
        >>> format_file_size(2 * 1024 * 1024)
        '2 MB'
    """
    if size_bytes < 0:
        raise ValueError(f"Size cannot be negative: {size_bytes}")
    if size_bytes == 0:
        return "0 Bytes"

    exponent = min(int(math.floor(math.log(size_bytes, 1024))), len(SIZE_UNITS) - 1)
    value = round(size_bytes / 1024**exponent, 2)
    # Guard against float log landing just below an exact power of 1024
    if value >= 1024 and exponent < len(SIZE_UNITS) - 1:
        exponent += 1
        value = round(size_bytes / 1024**exponent, 2)
    return f"{value:g} {SIZE_UNITS[exponent]}"
