"""Idempotent DDL for the tables the service owns.

``users`` is owned by the authentication collaborator; the minimal shape
here only exists so the ownership foreign key can cascade.
"""

from app.database.connection import get_connection

SCHEMA_STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        email TEXT UNIQUE,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS documents (
        id TEXT PRIMARY KEY,
        owner_id TEXT NOT NULL REFERENCES users (id) ON DELETE CASCADE,
        title TEXT,
        authors TEXT,
        published_at TIMESTAMPTZ,
        original_file_name TEXT NOT NULL,
        local_path TEXT,
        remote_key TEXT,
        summary TEXT,
        insights JSONB,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS documents_owner_created_idx
        ON documents (owner_id, created_at DESC)
    """,
    """
    CREATE TABLE IF NOT EXISTS extractions (
        id TEXT PRIMARY KEY,
        document_id TEXT NOT NULL REFERENCES documents (id) ON DELETE CASCADE,
        summary TEXT NOT NULL,
        insights JSONB NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS extractions_document_created_idx
        ON extractions (document_id, created_at)
    """,
)


def ensure_schema() -> None:
    """Create missing tables and indexes in a single transaction."""
    with get_connection() as conn:
        with conn.cursor() as cur:
            for statement in SCHEMA_STATEMENTS:
                cur.execute(statement)
        conn.commit()
