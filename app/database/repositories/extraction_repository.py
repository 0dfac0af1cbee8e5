from typing import Any

from psycopg import Cursor
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from app.database.connection import get_connection
from app.database.exceptions import RepositoryError
from app.database.models import Extraction


def insert_extraction(
    cur: Cursor[dict[str, Any]],
    *,
    extraction_id: str,
    document_id: str,
    summary: str,
    insights: list[str],
) -> Extraction:
    """Insert one extraction row on *cur*; the caller owns the transaction."""
    cur.execute(
        """
        INSERT INTO extractions (id, document_id, summary, insights)
        VALUES (%s, %s, %s, %s)
        RETURNING id, document_id, summary, insights, created_at
        """,
        (extraction_id, document_id, summary, Jsonb(insights)),
    )
    row = cur.fetchone()
    if row is None:
        raise RepositoryError(f"Insert of extraction {extraction_id} returned no row")
    return _row_to_extraction(row)


class ExtractionRepository:
    """Append-only access to the extractions table."""

    def create(
        self,
        *,
        extraction_id: str,
        document_id: str,
        summary: str,
        insights: list[str],
    ) -> Extraction:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                extraction = insert_extraction(
                    cur,
                    extraction_id=extraction_id,
                    document_id=document_id,
                    summary=summary,
                    insights=insights,
                )
            conn.commit()
        return extraction

    def list_by_document(self, document_id: str) -> list[Extraction]:
        """Return the analysis history of a document, oldest first."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, document_id, summary, insights, created_at
                    FROM extractions
                    WHERE document_id = %s
                    ORDER BY created_at, id
                    """,
                    (document_id,),
                )
                rows = cur.fetchall()

        return [_row_to_extraction(row) for row in rows]


def _row_to_extraction(row: dict[str, Any]) -> Extraction:
    return Extraction(
        id=str(row["id"]),
        document_id=str(row["document_id"]),
        summary=row["summary"],
        insights=list(row["insights"] or []),
        created_at=row["created_at"],
    )
