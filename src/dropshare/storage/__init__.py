"""
Record storage

Backends for record collections, the catalog of uploaded files and the
share link registry built on top of them.
"""

from dropshare.storage.base import RecordBackend
from dropshare.storage.file_store import FileRecord, FileRecordStore, RecordStatus
from dropshare.storage.json_file import JsonFileBackend
from dropshare.storage.memory import MemoryBackend
from dropshare.storage.share_registry import LinkValidation, ShareLink, ShareLinkRegistry

__all__ = [
    "RecordBackend",
    "MemoryBackend",
    "JsonFileBackend",
    "FileRecord",
    "FileRecordStore",
    "RecordStatus",
    "LinkValidation",
    "ShareLink",
    "ShareLinkRegistry",
]
