"""Persistence module - document stores and JSON files.

Example usage:
    >>> from pagecraft.persistence import SQLiteDocumentStore
    >>> store = SQLiteDocumentStore()  # PAGECRAFT_DATA_DIR/documents.db
    >>> doc_id = store.save(document)
    >>> store.load(doc_id).name
    'Landing'
"""

from .lib import (
    DocumentStore,
    MemoryDocumentStore,
    SQLiteDocumentStore,
    read_document,
    write_document,
)

__all__ = [
    "DocumentStore",
    "MemoryDocumentStore",
    "SQLiteDocumentStore",
    "read_document",
    "write_document",
]
