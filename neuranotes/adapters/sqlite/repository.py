"""
SQLite Repository - Document and passage storage with FTS5 search.

Features:
- Async operations via aiosqlite
- Full-text passage search with FTS5 (porter stemming, bm25 ranking)
- Document listing for the direct-document fallback
"""

from __future__ import annotations

import json
import logging
import re
import uuid
from pathlib import Path
from typing import Any

import aiosqlite

from neuranotes.config.errors import ErrorCode, StorageError

logger = logging.getLogger(__name__)

__all__ = ["SQLiteRepository", "to_fts_query"]

_TOKEN_RE = re.compile(r"\w+", re.UNICODE)


def to_fts_query(text: str) -> str:
    """
    Convert free text into an FTS5 query requiring every term.

    Tokens are quoted so FTS5 operators in user input are matched literally.
    """
    tokens = _TOKEN_RE.findall(text)
    return " ".join(f'"{token}"' for token in tokens)


class SQLiteRepository:
    """
    SQLite repository acting as Text Store and Document Directory.

    Example:
        >>> repo = SQLiteRepository("data/neuranotes.db")
        >>> await repo.initialize()
        >>> doc_id = await repo.insert_document("AI notes", body="...")
        >>> await repo.insert_passage(doc_id, "AI is the study of agents")
        >>> rows = await repo.lexical_search("agents")
    """

    def __init__(self, db_path: str | Path) -> None:
        """
        Initialize repository.

        Args:
            db_path: Path to SQLite database file (":memory:" for tests)
        """
        self.db_path = Path(db_path) if str(db_path) != ":memory:" else None
        if self.db_path is not None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._connection: aiosqlite.Connection | None = None

    async def _get_connection(self) -> aiosqlite.Connection:
        """Get or create database connection."""
        if self._connection is None:
            target = str(self.db_path) if self.db_path is not None else ":memory:"
            try:
                self._connection = await aiosqlite.connect(target)
            except aiosqlite.Error as e:
                raise StorageError(f"Cannot open database: {e}", {"db_path": target}) from e
            self._connection.row_factory = aiosqlite.Row
        return self._connection

    async def initialize(self) -> None:
        """Initialize database schema."""
        conn = await self._get_connection()

        await conn.executescript("""
            -- Documents table
            CREATE TABLE IF NOT EXISTS documents (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                body TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );

            -- Indexed passages (chunks of document text)
            CREATE TABLE IF NOT EXISTS passages (
                pk INTEGER PRIMARY KEY AUTOINCREMENT,
                id TEXT NOT NULL UNIQUE,
                document_id TEXT NOT NULL,
                text TEXT NOT NULL,
                FOREIGN KEY (document_id) REFERENCES documents(id)
            );

            -- FTS5 virtual table for full-text search
            CREATE VIRTUAL TABLE IF NOT EXISTS passages_fts USING fts5(
                text,
                content='passages',
                content_rowid='pk',
                tokenize='porter'
            );

            -- Triggers to keep FTS in sync
            CREATE TRIGGER IF NOT EXISTS passages_ai AFTER INSERT ON passages BEGIN
                INSERT INTO passages_fts(rowid, text) VALUES (new.pk, new.text);
            END;

            CREATE TRIGGER IF NOT EXISTS passages_ad AFTER DELETE ON passages BEGIN
                INSERT INTO passages_fts(passages_fts, rowid, text)
                VALUES ('delete', old.pk, old.text);
            END;

            CREATE TRIGGER IF NOT EXISTS passages_au AFTER UPDATE ON passages BEGIN
                INSERT INTO passages_fts(passages_fts, rowid, text)
                VALUES ('delete', old.pk, old.text);
                INSERT INTO passages_fts(rowid, text) VALUES (new.pk, new.text);
            END;

            -- Indexes
            CREATE INDEX IF NOT EXISTS idx_passages_document ON passages(document_id);
        """)

        await conn.commit()
        logger.info("Database initialized: %s", self.db_path or ":memory:")

    async def insert_document(
        self,
        title: str,
        body: Any = None,
        doc_id: str | None = None,
    ) -> str:
        """
        Insert a document.

        Args:
            title: Document title
            body: Plain text or structured (JSON-serializable) body
            doc_id: Optional explicit identifier

        Returns:
            Document ID
        """
        conn = await self._get_connection()
        doc_id = doc_id or str(uuid.uuid4())

        await conn.execute(
            "INSERT INTO documents (id, title, body) VALUES (?, ?, ?)",
            (doc_id, title, json.dumps(body) if body is not None else None),
        )

        await conn.commit()
        return doc_id

    async def insert_passage(
        self,
        document_id: str,
        text: str,
        passage_id: str | None = None,
    ) -> str:
        """Insert a passage of a document; returns the passage ID."""
        conn = await self._get_connection()
        passage_id = passage_id or str(uuid.uuid4())

        await conn.execute(
            "INSERT INTO passages (id, document_id, text) VALUES (?, ?, ?)",
            (passage_id, document_id, text),
        )

        await conn.commit()
        return passage_id

    async def get_document(self, doc_id: str) -> dict[str, Any] | None:
        """Get document by ID."""
        conn = await self._get_connection()

        cursor = await conn.execute(
            "SELECT id, title, body FROM documents WHERE id = ?", (doc_id,)
        )
        row = await cursor.fetchone()

        if row:
            return self._document_row(row)
        return None

    async def list_documents(self, scope_id: str | None = None) -> list[dict[str, Any]]:
        """
        List documents, optionally only the one with ID `scope_id`.

        Returns:
            Dicts with id, title and decoded body
        """
        conn = await self._get_connection()

        if scope_id:
            cursor = await conn.execute(
                "SELECT id, title, body FROM documents WHERE id = ?", (scope_id,)
            )
        else:
            cursor = await conn.execute(
                "SELECT id, title, body FROM documents ORDER BY rowid"
            )
        rows = await cursor.fetchall()

        return [self._document_row(row) for row in rows]

    async def lexical_search(
        self,
        text: str,
        scope_id: str | None = None,
        limit: int = 20,
    ) -> list[dict[str, Any]]:
        """
        Full-text passage search using FTS5.

        Args:
            text: Free-text query; every term must match
            scope_id: Optional document ID filter
            limit: Maximum results

        Returns:
            Passages (id, document_id, text) best match first

        Raises:
            StorageError: the query could not be executed
        """
        fts_query = to_fts_query(text)
        if not fts_query:
            return []

        conn = await self._get_connection()

        # Build query with optional document filter
        if scope_id:
            sql = """
                SELECT p.id, p.document_id, p.text, bm25(passages_fts) as score
                FROM passages_fts
                JOIN passages p ON passages_fts.rowid = p.pk
                WHERE passages_fts MATCH ? AND p.document_id = ?
                ORDER BY score
                LIMIT ?
            """
            params: tuple[Any, ...] = (fts_query, scope_id, limit)
        else:
            sql = """
                SELECT p.id, p.document_id, p.text, bm25(passages_fts) as score
                FROM passages_fts
                JOIN passages p ON passages_fts.rowid = p.pk
                WHERE passages_fts MATCH ?
                ORDER BY score
                LIMIT ?
            """
            params = (fts_query, limit)

        try:
            cursor = await conn.execute(sql, params)
            rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise StorageError(
                f"Full-text search failed: {e}",
                {"query": fts_query},
                code=ErrorCode.STORAGE_READ_FAILED,
            ) from e

        return [dict(row) for row in rows]

    async def get_passage_count(self) -> int:
        """Get total passage count."""
        conn = await self._get_connection()
        cursor = await conn.execute("SELECT COUNT(*) FROM passages")
        row = await cursor.fetchone()
        return row[0] if row else 0

    @staticmethod
    def _document_row(row: aiosqlite.Row) -> dict[str, Any]:
        body = row["body"]
        if body is not None:
            try:
                body = json.loads(body)
            except ValueError:
                pass
        return {"id": row["id"], "title": row["title"], "body": body}

    async def close(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None
