"""In-memory record backend."""

import copy
from typing import Iterable, List, Optional

from dropshare.storage.base import RecordBackend, Row


class MemoryBackend(RecordBackend):
    """Record collection kept in a Python list."""

    def __init__(self, rows: Iterable[Row] = ()):
        self._rows: List[Row] = [copy.deepcopy(row) for row in rows]
        self._next_id = max((row["id"] for row in self._rows), default=0) + 1

    def list_rows(self) -> List[Row]:
        return copy.deepcopy(self._rows)

    def get_row(self, row_id: int) -> Optional[Row]:
        index = self._index_of(row_id)
        return None if index is None else copy.deepcopy(self._rows[index])

    def insert_row(self, row: Row) -> Row:
        stored = copy.deepcopy(row)
        stored["id"] = self._next_id
        self._next_id += 1
        self._rows.append(stored)
        self._changed()
        return copy.deepcopy(stored)

    def update_row(self, row_id: int, row: Row) -> Optional[Row]:
        index = self._index_of(row_id)
        if index is None:
            return None
        stored = copy.deepcopy(row)
        stored["id"] = row_id
        self._rows[index] = stored
        self._changed()
        return copy.deepcopy(stored)

    def delete_row(self, row_id: int) -> bool:
        index = self._index_of(row_id)
        if index is None:
            return False
        del self._rows[index]
        self._changed()
        return True

    def clear(self) -> None:
        self._rows = []
        self._changed()

    def get_backend_name(self) -> str:
        return "memory"

    def _index_of(self, row_id: int) -> Optional[int]:
        for index, row in enumerate(self._rows):
            if row["id"] == row_id:
                return index
        return None

    def _changed(self) -> None:
        """Hook called after every mutation."""
        pass
