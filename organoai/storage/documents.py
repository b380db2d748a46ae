"""Document store backends.

Documents are JSON-like dicts grouped in collections addressed by path, e.g.
"enfermedad" or "users/<uid>/escaneos". Two backends are provided: a local
SQLite file and a Supabase (PostgREST) project.
"""

import json
import logging
import sqlite3
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from supabase import create_client

from ..errors import StorageError

logger = logging.getLogger(__name__)


class _ServerTimestamp:
    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


# Placeholder value the store replaces with its own write time
SERVER_TIMESTAMP = _ServerTimestamp()


class DocumentStore(ABC):
    """Minimal append-and-query document database."""

    @abstractmethod
    def add(self, collection: str, data: dict) -> str:
        """Append a document and return its id."""

    @abstractmethod
    def query(
        self,
        collection: str,
        where: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[dict]:
        """Return documents whose fields equal every `where` value.

        Documents with equal `order_by` values keep insertion order, reversed
        when `descending` is set.
        """


class SQLiteDocumentStore(DocumentStore):
    """Stores documents as JSON rows in a single SQLite table."""

    def __init__(self, db_path: str | Path = "data/organoai.db"):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self):
        """Create the documents table if it doesn't exist."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS documents (
                    id TEXT PRIMARY KEY,
                    collection TEXT NOT NULL,
                    data TEXT NOT NULL
                )
            """)
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_documents_collection ON documents (collection)"
            )
            conn.commit()

    def add(self, collection: str, data: dict) -> str:
        doc_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc).isoformat()
        doc = {k: (now if v is SERVER_TIMESTAMP else v) for k, v in data.items()}

        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute(
                    "INSERT INTO documents (id, collection, data) VALUES (?, ?, ?)",
                    (doc_id, collection, json.dumps(doc)),
                )
                conn.commit()
        except (sqlite3.Error, TypeError) as e:
            raise StorageError(f"Could not write to {collection}: {e}")

        logger.debug("Added document %s to %s", doc_id, collection)
        return doc_id

    def query(
        self,
        collection: str,
        where: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[dict]:
        direction = "DESC" if descending else "ASC"
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.execute(
                    f"SELECT data FROM documents WHERE collection = ? ORDER BY rowid {direction}",
                    (collection,),
                )
                docs = [json.loads(row[0]) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise StorageError(f"Could not read {collection}: {e}")

        if where:
            docs = [d for d in docs if all(d.get(k) == v for k, v in where.items())]

        if order_by:
            # sorted() is stable, so ties keep the rowid order fetched above
            docs = sorted(
                docs,
                key=lambda d: (d.get(order_by) is not None, d.get(order_by) or ""),
                reverse=descending,
            )

        if limit is not None:
            docs = docs[:limit]
        return docs

    def count(self, collection: Optional[str] = None) -> int:
        """Return the number of documents, optionally in one collection."""
        with sqlite3.connect(self.db_path) as conn:
            if collection is None:
                cursor = conn.execute("SELECT COUNT(*) FROM documents")
            else:
                cursor = conn.execute(
                    "SELECT COUNT(*) FROM documents WHERE collection = ?", (collection,)
                )
            return cursor.fetchone()[0]


class SupabaseDocumentStore(DocumentStore):
    """Maps collections onto Supabase tables.

    "users/<uid>/<name>" becomes table <name> filtered on user_id = <uid>;
    a plain "<name>" is table <name>. SERVER_TIMESTAMP fields are left out so
    the column default (now()) applies.
    """

    def __init__(self, client=None, url: Optional[str] = None, key: Optional[str] = None):
        if client is None:
            if not url or not key:
                raise StorageError("SUPABASE_URL and SUPABASE_KEY are required")
            client = create_client(url, key)
        self.client = client

    @staticmethod
    def _resolve(collection: str) -> tuple[str, dict[str, str]]:
        parts = collection.strip("/").split("/")
        if len(parts) == 1:
            return parts[0], {}
        if len(parts) == 3 and parts[0] == "users":
            return parts[2], {"user_id": parts[1]}
        raise StorageError(f"Unsupported collection path: {collection}")

    def add(self, collection: str, data: dict) -> str:
        table, scope = self._resolve(collection)
        row = {k: v for k, v in data.items() if v is not SERVER_TIMESTAMP}
        row.update(scope)

        try:
            resp = self.client.table(table).insert(row).execute()
        except Exception as e:
            raise StorageError(f"Could not write to {collection}: {e}") from e

        return str(resp.data[0].get("id", "")) if resp.data else ""

    def query(
        self,
        collection: str,
        where: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[dict]:
        table, scope = self._resolve(collection)

        q = self.client.table(table).select("*")
        for column, value in {**scope, **(where or {})}.items():
            q = q.eq(column, value)
        if order_by:
            q = q.order(order_by, desc=descending)
        if limit is not None:
            q = q.limit(limit)

        try:
            resp = q.execute()
        except Exception as e:
            raise StorageError(f"Could not read {collection}: {e}") from e

        return [
            {k: v for k, v in row.items() if k not in scope}
            for row in (resp.data or [])
        ]
