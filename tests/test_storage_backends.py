"""Tests for record storage backends."""

import json

import pytest

from dropshare.core.config import Settings
from dropshare.storage.factory import create_backend
from dropshare.storage.json_file import JsonFileBackend
from dropshare.storage.memory import MemoryBackend


class TestMemoryBackend:
    """Tests for the in-memory backend."""

    def test_insert_assigns_increasing_ids(self):
        backend = MemoryBackend()

        first = backend.insert_row({"name": "a"})
        second = backend.insert_row({"name": "b"})

        assert first["id"] == 1
        assert second["id"] == 2
        assert [row["name"] for row in backend.list_rows()] == ["a", "b"]

    def test_seeded_rows_continue_numbering(self):
        backend = MemoryBackend([{"id": 4, "name": "seed"}])

        assert backend.insert_row({"name": "new"})["id"] == 5

    def test_returned_rows_are_copies(self):
        backend = MemoryBackend()
        row = backend.insert_row({"name": "a", "tags": []})

        row["tags"].append("x")
        backend.list_rows()[0]["name"] = "changed"

        assert backend.get_row(1) == {"id": 1, "name": "a", "tags": []}

    def test_update_and_delete(self):
        backend = MemoryBackend()
        backend.insert_row({"name": "a"})

        assert backend.update_row(1, {"id": 9, "name": "b"}) == {"id": 1, "name": "b"}
        assert backend.update_row(2, {"name": "c"}) is None
        assert backend.delete_row(1) is True
        assert backend.delete_row(1) is False
        assert backend.get_row(1) is None

    def test_clear_keeps_id_high_water_mark(self):
        backend = MemoryBackend()
        backend.insert_row({"name": "a"})
        backend.clear()

        assert backend.list_rows() == []
        assert backend.insert_row({"name": "b"})["id"] == 2

    def test_get_backend_name(self):
        assert MemoryBackend().get_backend_name() == "memory"


class TestJsonFileBackend:
    """Tests for the JSON file backend."""

    def test_writes_document_after_insert(self, tmp_path):
        path = tmp_path / "files.json"
        backend = JsonFileBackend(path)

        backend.insert_row({"name": "a"})

        document = json.loads(path.read_text(encoding="utf-8"))
        assert document == {"next_id": 2, "rows": [{"name": "a", "id": 1}]}

    def test_reload_preserves_rows_and_next_id(self, tmp_path):
        path = tmp_path / "files.json"
        backend = JsonFileBackend(path)
        backend.insert_row({"name": "a"})
        backend.insert_row({"name": "b"})
        backend.delete_row(2)

        reopened = JsonFileBackend(path)

        assert [row["name"] for row in reopened.list_rows()] == ["a"]
        assert reopened.insert_row({"name": "c"})["id"] == 3

    def test_creates_missing_directory(self, tmp_path):
        path = tmp_path / "nested" / "links.json"
        JsonFileBackend(path).insert_row({"name": "a"})

        assert path.exists()
        assert list(path.parent.glob("*.tmp")) == []

    def test_get_backend_name(self, tmp_path):
        assert JsonFileBackend(tmp_path / "x.json").get_backend_name() == "json"


class TestCreateBackend:
    def test_memory(self):
        backend = create_backend("files", Settings(STORAGE_BACKEND="memory"))
        assert isinstance(backend, MemoryBackend)
        assert backend.get_backend_name() == "memory"

    def test_json(self, tmp_path):
        backend = create_backend("share_links", Settings(STORAGE_BACKEND="json", DATA_DIR=str(tmp_path)))

        assert isinstance(backend, JsonFileBackend)
        assert backend.path == tmp_path / "share_links.json"

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="STORAGE_BACKEND"):
            create_backend("files", Settings(STORAGE_BACKEND="s3"))
