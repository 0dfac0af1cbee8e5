from datetime import datetime
from typing import Any

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from app.database.connection import get_connection
from app.database.exceptions import DocumentNotFoundError, RepositoryError
from app.database.models import Document, Extraction
from app.database.repositories.extraction_repository import insert_extraction

_COLUMNS = """
    id, owner_id, title, authors, published_at, original_file_name,
    local_path, remote_key, summary, insights, created_at
"""

_UNSET: Any = object()


class DocumentRepository:
    """Database operations for the documents table."""

    def create(
        self,
        *,
        document_id: str,
        owner_id: str,
        original_file_name: str,
        local_path: str | None,
        title: str | None = None,
        authors: str | None = None,
        published_at: datetime | None = None,
    ) -> Document:
        """Insert a new document row. ``remote_key``, ``summary`` and
        ``insights`` always start out null.

        The owner is registered in ``users`` in the same transaction when
        the authentication service has not created the row yet.
        """
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    "INSERT INTO users (id) VALUES (%s) ON CONFLICT (id) DO NOTHING",
                    (owner_id,),
                )
                cur.execute(
                    f"""
                    INSERT INTO documents
                        (id, owner_id, title, authors, published_at,
                         original_file_name, local_path)
                    VALUES (%s, %s, %s, %s, %s, %s, %s)
                    RETURNING {_COLUMNS}
                    """,
                    (
                        document_id,
                        owner_id,
                        title,
                        authors,
                        published_at,
                        original_file_name,
                        local_path,
                    ),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise RepositoryError(f"Insert of document {document_id} returned no row")
        return _row_to_document(row)

    def find_by_id(self, document_id: str) -> Document | None:
        """Return the document, or None when no row has this id."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM documents WHERE id = %s",
                    (document_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None
        return _row_to_document(row)

    def list_by_owner(self, owner_id: str) -> list[Document]:
        """Return all documents of an owner, newest first."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM documents
                    WHERE owner_id = %s
                    ORDER BY created_at DESC, id
                    """,
                    (owner_id,),
                )
                rows = cur.fetchall()

        return [_row_to_document(row) for row in rows]

    def update_storage(
        self,
        document_id: str,
        *,
        local_path: str | None = _UNSET,
        remote_key: str | None = _UNSET,
    ) -> Document:
        """Update one or both storage location columns.

        Columns not passed are left untouched, so promotion can record the
        remote key before the local copy is released.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """
        assignments: list[str] = []
        params: list[Any] = []
        if local_path is not _UNSET:
            assignments.append("local_path = %s")
            params.append(local_path)
        if remote_key is not _UNSET:
            assignments.append("remote_key = %s")
            params.append(remote_key)
        if not assignments:
            raise ValueError("update_storage needs local_path and/or remote_key")

        params.append(document_id)
        return self._update_returning(
            f"UPDATE documents SET {', '.join(assignments)} WHERE id = %s "
            f"RETURNING {_COLUMNS}",
            tuple(params),
            document_id,
        )

    def record_analysis(
        self,
        document_id: str,
        *,
        extraction_id: str,
        title: str | None,
        authors: str | None,
        published_at: datetime | None,
        summary: str,
        insights: list[str],
    ) -> tuple[Document, Extraction]:
        """Overwrite the latest analysis output and append its Extraction.

        Both writes share one transaction, so the document never shows a
        summary that no Extraction holds.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    UPDATE documents
                    SET title = %s,
                        authors = %s,
                        published_at = %s,
                        summary = %s,
                        insights = %s
                    WHERE id = %s
                    RETURNING {_COLUMNS}
                    """,
                    (title, authors, published_at, summary, Jsonb(insights), document_id),
                )
                row = cur.fetchone()
                if row is None:
                    raise DocumentNotFoundError(f"Document {document_id} not found")
                extraction = insert_extraction(
                    cur,
                    extraction_id=extraction_id,
                    document_id=document_id,
                    summary=summary,
                    insights=insights,
                )
            conn.commit()
        return _row_to_document(row), extraction

    def delete(self, document_id: str) -> bool:
        """Delete a document row; extractions go with it by cascade.

        Returns:
            True if a row was deleted.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM documents WHERE id = %s", (document_id,))
                deleted = cur.rowcount > 0
            conn.commit()
        return deleted

    def _update_returning(
        self,
        sql: str,
        params: tuple[Any, ...],
        document_id: str,
    ) -> Document:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(sql, params)
                row = cur.fetchone()
                if row is None:
                    raise DocumentNotFoundError(f"Document {document_id} not found")
            conn.commit()
        return _row_to_document(row)


def _row_to_document(row: dict[str, Any]) -> Document:
    insights = row["insights"]
    return Document(
        id=str(row["id"]),
        owner_id=str(row["owner_id"]),
        original_file_name=row["original_file_name"],
        title=row["title"],
        authors=row["authors"],
        published_at=row["published_at"],
        local_path=row["local_path"],
        remote_key=row["remote_key"],
        summary=row["summary"],
        insights=list(insights) if insights is not None else None,
        created_at=row["created_at"],
    )
