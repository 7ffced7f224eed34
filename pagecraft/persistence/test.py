"""Unit tests for document stores and JSON files."""

import json

import pytest

from pagecraft.model import CorruptDocumentError

from .lib import (
    DocumentStore,
    MemoryDocumentStore,
    SQLiteDocumentStore,
    read_document,
    write_document,
)


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    if request.param == "memory":
        yield MemoryDocumentStore()
    else:
        with SQLiteDocumentStore(tmp_path / "docs.db") as sqlite_store:
            yield sqlite_store


class TestDocumentStore:
    """Behaviour shared by every store."""

    @pytest.mark.unit
    def test_protocol(self, store):
        assert isinstance(store, DocumentStore)

    @pytest.mark.unit
    def test_save_load(self, store, nested_document):
        """A loaded document equals the saved one."""
        doc_id = store.save(nested_document)
        assert doc_id == nested_document.id
        assert store.load(doc_id).to_dict() == nested_document.to_dict()

    @pytest.mark.unit
    def test_load_returns_copy(self, store, row_document):
        """Edits after saving do not reach the stored copy."""
        store.save(row_document)
        row_document.require("a").position.x = 999
        assert store.load(row_document.id).require("a").position.x == 0

    @pytest.mark.unit
    def test_save_replaces(self, store, row_document):
        store.save(row_document)
        row_document.name = "Renamed"
        store.save(row_document)
        assert store.list_ids() == [row_document.id]
        assert store.load(row_document.id).name == "Renamed"

    @pytest.mark.unit
    def test_missing_id(self, store):
        with pytest.raises(KeyError, match="Document not found: nope"):
            store.load("nope")

    @pytest.mark.unit
    def test_list_and_delete(self, store, row_document, nested_document):
        store.save(row_document)
        store.save(nested_document)
        assert set(store.list_ids()) == {row_document.id, nested_document.id}
        assert store.delete(row_document.id) is True
        assert store.delete(row_document.id) is False
        assert store.list_ids() == [nested_document.id]


class TestCorruptData:
    """Stored data is validated on the way out."""

    @pytest.mark.unit
    def test_memory(self, row_document):
        store = MemoryDocumentStore()
        store.save(row_document)
        store._documents[row_document.id]["roots"].append("ghost")
        with pytest.raises(CorruptDocumentError):
            store.load(row_document.id)

    @pytest.mark.unit
    def test_sqlite(self, row_document, tmp_path):
        data = row_document.to_dict()
        data["roots"].append("ghost")
        with SQLiteDocumentStore(tmp_path / "docs.db") as store:
            store.save(row_document)
            store._get_conn().execute(
                "UPDATE documents SET data = ? WHERE id = ?",
                (json.dumps(data), row_document.id),
            )
            with pytest.raises(CorruptDocumentError):
                store.load(row_document.id)


class TestSQLiteDocumentStore:
    """Tests for the SQLite backend."""

    @pytest.mark.unit
    def test_persists_across_connections(self, row_document, tmp_path):
        path = tmp_path / "docs.db"
        with SQLiteDocumentStore(path) as store:
            store.save(row_document)
        with SQLiteDocumentStore(path) as store:
            assert store.load(row_document.id).to_dict() == row_document.to_dict()

    @pytest.mark.unit
    def test_default_path_from_environment(self, tmp_path, monkeypatch):
        """The database lives under PAGECRAFT_DATA_DIR by default."""
        monkeypatch.setenv("PAGECRAFT_DATA_DIR", str(tmp_path / "data"))
        store = SQLiteDocumentStore()
        assert store.db_path == tmp_path / "data" / "documents.db"

    @pytest.mark.unit
    def test_lazy_initialize(self, row_document, tmp_path):
        """Operations open the database on first use."""
        store = SQLiteDocumentStore(tmp_path / "nested" / "docs.db")
        try:
            store.save(row_document)
            assert (tmp_path / "nested" / "docs.db").exists()
        finally:
            store.close()

    @pytest.mark.unit
    def test_reopens_after_close(self, row_document, tmp_path):
        """A closed store reconnects on the next operation."""
        store = SQLiteDocumentStore(tmp_path / "docs.db")
        store.initialize()
        store.save(row_document)
        store.close()
        try:
            assert store.list_ids() == [row_document.id]
        finally:
            store.close()


class TestJsonFiles:
    """Tests for read_document / write_document."""

    @pytest.mark.unit
    def test_round_trip(self, nested_document, tmp_path):
        path = write_document(nested_document, tmp_path / "out" / "page.json")
        assert path.exists()
        assert read_document(path).to_dict() == nested_document.to_dict()

    @pytest.mark.unit
    def test_corrupt_file(self, row_document, tmp_path):
        data = row_document.to_dict()
        data["components"]["a"]["children"] = ["b"]
        path = tmp_path / "bad.json"
        path.write_text(json.dumps(data))
        with pytest.raises(CorruptDocumentError):
            read_document(path)

    @pytest.mark.unit
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_document(tmp_path / "missing.json")
