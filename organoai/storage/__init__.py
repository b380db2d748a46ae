"""Storage layers - document store backends, scan history and disease reference."""

from .disease_db import DiseaseLookup
from .documents import DocumentStore, SQLiteDocumentStore, SupabaseDocumentStore
from .scan_store import ScanRecordStore

__all__ = [
    "DiseaseLookup",
    "DocumentStore",
    "SQLiteDocumentStore",
    "SupabaseDocumentStore",
    "ScanRecordStore",
]
