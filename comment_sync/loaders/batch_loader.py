"""
Transactional batch loader: one page of comments -> one multi-row INSERT.

Each call opens a transaction block, executes a single INSERT with one value
tuple per comment and commits. If anything fails the block rolls back, so no
row from the page is visible, and a LoadError is raised to the caller.
"""

from __future__ import annotations

from typing import Any, List, Sequence, Tuple

import psycopg
from psycopg import Connection

from comment_sync.config import DESTINATION_TABLE
from comment_sync.domain.models import COMMENT_COLUMNS, Comment
from comment_sync.errors import LoadError, SqlBuildError
from comment_sync.utils.logging import get_logger

log = get_logger(__name__)


def build_insert(
    records: Sequence[Comment], table: str = DESTINATION_TABLE
) -> Tuple[str, List[Any]]:
    """
    Build one INSERT statement covering all records.

    Returns the SQL text with one positional placeholder per value and the
    flattened parameters in column order.
    """
    if not records:
        raise SqlBuildError(
            "Insert statement needs at least one set of values", context={"table": table}
        )

    row_placeholder = "(" + ", ".join(["%s"] * len(COMMENT_COLUMNS)) + ")"
    values_sql = ", ".join([row_placeholder] * len(records))
    sql = f"INSERT INTO {table} ({', '.join(COMMENT_COLUMNS)}) VALUES {values_sql}"

    params: List[Any] = []
    for record in records:
        params.extend(record.as_row())
    return sql, params


class BatchLoader:
    """
    Write pages of comments through a single open connection.
    """

    def __init__(self, conn: Connection, table: str = DESTINATION_TABLE) -> None:
        self._conn = conn
        self.table = table

    def load(self, records: Sequence[Comment], offset: int) -> int:
        """
        Insert one page inside its own transaction and return the rows written.

        Raises
        ------
        SqlBuildError
            If the statement cannot be built (e.g. an empty page).
        LoadError
            If executing or committing fails; the transaction is rolled back.
        """
        context = {"offset": offset, "batch_size": len(records), "table": self.table}
        sql, params = build_insert(records, table=self.table)

        try:
            with self._conn.transaction():
                with self._conn.cursor() as cur:
                    cur.execute(sql, params)
        except psycopg.Error as exc:
            raise LoadError(
                "Error executing insert statement", context=context, original_exception=exc
            ) from exc

        log.info(
            f"Inserted batch at offset {offset} with {len(records)} comments",
            extra={"offset": offset, "rows": len(records)},
        )
        return len(records)


__all__ = ["BatchLoader", "build_insert"]
