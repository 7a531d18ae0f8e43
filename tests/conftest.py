"""
Pytest configuration for comment-sync.

Provides fixtures for:
- Fake upstream API pages served through httpx.MockTransport
- A fake psycopg connection recording transactions and statements
- Database connection management for integration tests
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Generator

import psycopg
import pytest

from comment_sync.config import Settings, build_dsn
from tests.fakes import FakeConnection, FakeUpstream


@pytest.fixture
def fake_connection() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def make_upstream() -> Callable[..., FakeUpstream]:
    """Factory for fake upstream APIs with a given number of comments."""
    return FakeUpstream


@pytest.fixture
def unit_settings() -> Settings:
    """Settings that never touch the real environment or a .env file."""
    return Settings(
        _env_file=None,
        pg_port="5432",
        pg_database_name="comments_db",
        pg_user="postgres",
        pg_password="secret",
    )


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture for integration tests.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        _env_file=None,
        pg_port=os.getenv("PG_PORT", "5432"),
        pg_database_name=os.getenv("PG_DATABASE_NAME", "comments_test"),
        pg_user=os.getenv("PG_USER", "postgres"),
        pg_password=os.getenv("PG_PASSWORD", "postgres"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return build_dsn(test_settings)


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped autocommit connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn, autocommit=True)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="session")
def db_schema_initialized(db_connection: psycopg.Connection) -> bool:
    """
    Ensure the comments table exists, creating it from db/init.sql.
    """
    init_sql_path = Path(__file__).parent.parent / "db" / "init.sql"
    with db_connection.cursor() as cur:
        cur.execute(init_sql_path.read_text(encoding="utf-8"))
    return True


@pytest.fixture(scope="function")
def clean_comments_table(db_connection: psycopg.Connection, db_schema_initialized: bool):
    """
    Empty the comments table before and after each test function.
    """
    with db_connection.cursor() as cur:
        cur.execute("TRUNCATE TABLE public.comments;")
    yield
    with db_connection.cursor() as cur:
        cur.execute("TRUNCATE TABLE public.comments;")
