"""
Database connection factory for comment-sync.

Opens the single psycopg connection held for the lifetime of a sync run,
verifies it with a ping, and guarantees it is closed on every exit path.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Generator, Optional

import psycopg
from psycopg import Connection

from comment_sync.config import Settings, build_dsn
from comment_sync.errors import DatabaseConnectionError
from comment_sync.utils.logging import get_logger

log = get_logger(__name__)

PING_SQL = "SELECT 1;"


def ping(conn: Connection) -> None:
    """
    Issue a liveness check on an open connection.

    Raises
    ------
    psycopg.Error
        If the server does not answer.
    """
    with conn.cursor() as cur:
        cur.execute(PING_SQL)
        cur.fetchone()


@contextmanager
def connect(
    settings: Settings,
    dsn_override: Optional[str] = None,
    connect_fn: Callable[[str], Connection] = psycopg.connect,
) -> Generator[Connection, None, None]:
    """
    Context manager yielding a live, pinged connection.

    Example
    -------
        with connect(settings) as conn:
            BatchLoader(conn).load(records, offset=0)

    Raises
    ------
    DatabaseConnectionError
        If the connection cannot be opened or does not answer the ping.
    """
    dsn = dsn_override or build_dsn(settings)
    try:
        conn = connect_fn(dsn)
        # Each batch opens its own transaction block.
        conn.autocommit = True
    except psycopg.Error as exc:
        raise DatabaseConnectionError(
            "Error opening database connection", original_exception=exc
        ) from exc

    try:
        try:
            ping(conn)
        except psycopg.Error as exc:
            raise DatabaseConnectionError(
                "Error pinging database", original_exception=exc
            ) from exc
        log.debug("Database connection verified")
        yield conn
    finally:
        conn.close()
        log.debug("Database connection closed")


__all__ = ["PING_SQL", "connect", "ping"]
