"""Record backend selection."""

from pathlib import Path

from dropshare.core.config import Settings, settings
from dropshare.storage.base import RecordBackend
from dropshare.storage.json_file import JsonFileBackend
from dropshare.storage.memory import MemoryBackend


def create_backend(collection: str, config: Settings | None = None) -> RecordBackend:
    """Create the configured backend for a record collection.

    Args:
        collection: Collection name, e.g. ``files`` or ``share_links``
        config: Settings to read; defaults to the module settings

    Raises:
        ValueError: If STORAGE_BACKEND is not recognised
    """
    config = config or settings
    if config.STORAGE_BACKEND == "memory":
        return MemoryBackend()
    if config.STORAGE_BACKEND == "json":
        return JsonFileBackend(Path(config.DATA_DIR) / f"{collection}.json")
    raise ValueError(f"Unknown STORAGE_BACKEND: {config.STORAGE_BACKEND!r}")
