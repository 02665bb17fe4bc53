"""JSON file record backend."""

import json
import logging
import os
import tempfile
from pathlib import Path

from dropshare.storage.memory import MemoryBackend

logger = logging.getLogger(__name__)


class JsonFileBackend(MemoryBackend):
    """Record collection persisted to a single JSON document.

    The document has the shape ``{"next_id": n, "rows": [...]}`` and is
    rewritten atomically after every mutation.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        super().__init__()

        if self.path.exists():
            with open(self.path, "r", encoding="utf-8") as f:
                document = json.load(f)
            self._rows = list(document.get("rows", []))
            highest = max((row["id"] for row in self._rows), default=0)
            self._next_id = max(int(document.get("next_id", 1)), highest + 1)
            logger.info(f"Loaded {len(self._rows)} rows from {self.path}")

    def get_backend_name(self) -> str:
        return "json"

    def _changed(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        document = {"next_id": self._next_id, "rows": self._rows}

        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
