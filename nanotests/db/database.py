"""
Query helpers on top of a ConnectionPool.

Rows come back as dicts keyed by column label. Driver errors are wrapped
in DatabaseError together with the SQL that caused them.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Sequence

from ..exceptions import DatabaseError
from .pool import ConnectionPool

logger = logging.getLogger(__name__)


class Database:
    """
    SQL execution surface used by the DB assertions.

    Attributes:
        placeholder: Bind-parameter marker of the driver's paramstyle
            ("?" for qmark drivers such as sqlite3, "%s" for format/pyformat)
    """

    def __init__(self, pool: ConnectionPool, placeholder: str = "?"):
        self.pool = pool
        self.placeholder = placeholder

    @classmethod
    def connect(cls, factory: Callable[[], Any], placeholder: str = "?") -> Database:
        """Create a Database with its own pool around a connection factory."""
        return cls(ConnectionPool(factory), placeholder=placeholder)

    def query(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        """Run a query and return every row."""
        with self._cursor(sql, params) as cursor:
            columns = _column_labels(cursor)
            return [dict(zip(columns, row)) for row in cursor.fetchall()]

    def query_single(self, sql: str, params: Sequence[Any] = ()) -> dict[str, Any] | None:
        """Run a query and return its first row, or None if it has none."""
        with self._cursor(sql, params) as cursor:
            row = cursor.fetchone()
            if row is None:
                return None
            return dict(zip(_column_labels(cursor), row))

    def query_column(self, sql: str, params: Sequence[Any] = ()) -> list[Any]:
        """Run a query and return the first column of every row."""
        with self._cursor(sql, params) as cursor:
            return [row[0] for row in cursor.fetchall()]

    def execute(self, sql: str, params: Sequence[Any] = ()) -> None:
        """Run a non-query statement and commit it."""
        with self._cursor(sql, params, commit=True):
            pass

    def last_id(self, table: str, id_field: str) -> Any:
        """
        Get the highest value of `id_field` in `table`.

        Raises:
            DatabaseError: If the query fails or returns no row
        """
        sql = f"SELECT MAX({id_field}) FROM {table}"
        values = self.query_column(sql)
        if not values:
            raise DatabaseError("Last id query returned no data", sql)
        return values[0]

    def shutdown(self) -> bool:
        return self.pool.shutdown()

    @contextmanager
    def _cursor(
        self, sql: str, params: Sequence[Any], commit: bool = False
    ) -> Iterator[Any]:
        """Borrow a cursor, execute `sql` on it and wrap driver errors."""
        with self.pool.cursor() as (connection, cursor):
            try:
                logger.debug(f"SQL: {sql} {list(params) or ''}")
                cursor.execute(sql, tuple(params))
                if commit:
                    connection.commit()
                yield cursor
            except DatabaseError:
                raise
            except Exception as e:
                raise DatabaseError(f"Failed on {sql}: {e}", sql) from e


def _column_labels(cursor: Any) -> list[str]:
    return [column[0] for column in cursor.description or ()]
