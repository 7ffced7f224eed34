"""Document stores and JSON file helpers.

Stores keep whole documents keyed by document id. Every load goes through
integrity validation, so a store never hands out a corrupt tree.
"""

import json
import logging
import sqlite3
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol, runtime_checkable

from pagecraft.config import get_data_dir
from pagecraft.model import Document, load_document

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS documents (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    data TEXT NOT NULL,  -- JSON
    component_count INTEGER DEFAULT 0,
    saved_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_documents_saved ON documents(saved_at);
"""

DEFAULT_DB_NAME = "documents.db"


@runtime_checkable
class DocumentStore(Protocol):
    """Protocol for document storage backends.

    Implementations must provide whole-document save/load keyed by the
    document id. Saving an id that already exists replaces the stored copy.
    """

    def save(self, document: Document) -> str:
        """Persist a document.

        Args:
            document: Document to store.

        Returns:
            The document id.
        """
        ...

    def load(self, document_id: str) -> Document:
        """Load a document by id.

        Args:
            document_id: Id returned by `save`.

        Returns:
            A fresh, validated Document.

        Raises:
            KeyError: If no document has that id.
            CorruptDocumentError: If the stored data fails validation.
        """
        ...

    def list_ids(self) -> list[str]:
        """List stored document ids, most recently saved first."""
        ...

    def delete(self, document_id: str) -> bool:
        """Delete a document.

        Returns:
            True if a document was removed.
        """
        ...


class MemoryDocumentStore:
    """In-process store holding serialized copies."""

    def __init__(self):
        self._documents: dict[str, dict] = {}

    def save(self, document: Document) -> str:
        # Re-inserting moves the id to the end so list_ids stays recency-ordered
        self._documents.pop(document.id, None)
        self._documents[document.id] = document.to_dict()
        logger.debug(f"Saved document {document.id} in memory")
        return document.id

    def load(self, document_id: str) -> Document:
        try:
            data = self._documents[document_id]
        except KeyError:
            raise KeyError(f"Document not found: {document_id}") from None
        return load_document(data)

    def list_ids(self) -> list[str]:
        return list(reversed(self._documents))

    def delete(self, document_id: str) -> bool:
        return self._documents.pop(document_id, None) is not None


class SQLiteDocumentStore:
    """SQLite-backed store with one JSON row per document.

    Args:
        db_path: Database file. Defaults to documents.db in the data directory
            (PAGECRAFT_DATA_DIR).

    Example:
        >>> with SQLiteDocumentStore(tmp_path / "docs.db") as store:
        ...     doc_id = store.save(document)
        ...     copy = store.load(doc_id)
    """

    def __init__(self, db_path: Path | str | None = None):
        self.db_path = Path(db_path) if db_path else get_data_dir() / DEFAULT_DB_NAME
        self._conn: sqlite3.Connection | None = None

    def __enter__(self) -> "SQLiteDocumentStore":
        self.initialize()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _get_conn(self) -> sqlite3.Connection:
        """Get database connection, creating if needed."""
        if self._conn is None:
            return self._connect()
        return self._conn

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def initialize(self) -> None:
        """Create the database file and schema."""
        if self._conn is None:
            self._connect()

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.executescript(SCHEMA_SQL)
        conn.commit()
        self._conn = conn
        logger.info(f"Initialized document store at {self.db_path}")
        return conn

    def close(self) -> None:
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    # =========================================================================
    # Documents
    # =========================================================================

    def save(self, document: Document) -> str:
        conn = self._get_conn()
        conn.execute(
            """
            INSERT INTO documents (id, name, data, component_count, saved_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                name = excluded.name,
                data = excluded.data,
                component_count = excluded.component_count,
                saved_at = excluded.saved_at
            """,
            (
                document.id,
                document.name,
                json.dumps(document.to_dict()),
                len(document),
                datetime.now(UTC).isoformat(),
            ),
        )
        conn.commit()
        logger.debug(f"Saved document {document.id} ({len(document)} components)")
        return document.id

    def load(self, document_id: str) -> Document:
        conn = self._get_conn()
        row = conn.execute(
            "SELECT data FROM documents WHERE id = ?", (document_id,)
        ).fetchone()
        if row is None:
            raise KeyError(f"Document not found: {document_id}")
        return load_document(json.loads(row["data"]))

    def list_ids(self) -> list[str]:
        conn = self._get_conn()
        rows = conn.execute(
            "SELECT id FROM documents ORDER BY saved_at DESC, rowid DESC"
        ).fetchall()
        return [row["id"] for row in rows]

    def delete(self, document_id: str) -> bool:
        conn = self._get_conn()
        cursor = conn.execute("DELETE FROM documents WHERE id = ?", (document_id,))
        conn.commit()
        return cursor.rowcount > 0


# =============================================================================
# JSON files
# =============================================================================


def read_document(path: Path | str) -> Document:
    """Load and validate a document from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
        CorruptDocumentError: If the document fails validation.
    """
    path = Path(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    return load_document(data)


def write_document(document: Document, path: Path | str, indent: int = 2) -> Path:
    """Write a document as JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document.to_dict(), indent=indent) + "\n", encoding="utf-8")
    logger.info(f"Wrote document {document.id} to {path}")
    return path


__all__ = [
    "DocumentStore",
    "MemoryDocumentStore",
    "SQLiteDocumentStore",
    "read_document",
    "write_document",
]
