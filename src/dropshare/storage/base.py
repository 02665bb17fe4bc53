"""Abstract record backend interface."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

Row = Dict[str, Any]


class RecordBackend(ABC):
    """Abstract base class for record collections.

    Rows are plain JSON-compatible dicts keyed by an integer ``"id"``
    that the backend assigns. Listing preserves insertion order and ids
    are strictly increasing, never reused after deletion.
    """

    @abstractmethod
    def list_rows(self) -> List[Row]:
        """Return copies of all rows in insertion order."""
        pass

    @abstractmethod
    def get_row(self, row_id: int) -> Optional[Row]:
        """Return a copy of the row with ``row_id``, or None."""
        pass

    @abstractmethod
    def insert_row(self, row: Row) -> Row:
        """Append a row, assigning the next id.

        Args:
            row: Row fields; any ``"id"`` key is overwritten

        Returns:
            Copy of the stored row
        """
        pass

    @abstractmethod
    def update_row(self, row_id: int, row: Row) -> Optional[Row]:
        """Replace the row with ``row_id``, keeping its id and position.

        Returns:
            Copy of the stored row, or None if absent
        """
        pass

    @abstractmethod
    def delete_row(self, row_id: int) -> bool:
        """Remove a row. Returns True if it existed."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove all rows. The id counter is not reset."""
        pass

    @abstractmethod
    def get_backend_name(self) -> str:
        """Return backend identifier."""
        pass
