import os
import uuid
from collections.abc import Generator
from typing import Any

import psycopg
import pytest

from app.config.settings import Settings
from app.database.connection import close_pool, get_connection, init_pool
from app.database.schema import ensure_schema


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "docinsight_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        ensure_schema()
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to point at one.")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def owner_id(integration_pool: None) -> Generator[str, None, None]:
    """A fresh owner; deleting it cascades to its documents and extractions."""
    owner = f"it-{uuid.uuid4()}"
    yield owner
    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute("DELETE FROM users WHERE id = %s", (owner,))
        conn.commit()
