"""
Database assertions.

Table and field names are interpolated into the generated SQL as-is; only
the values compared against (row ids) are passed as bound parameters.

Beware of last_row() when several tests write to the same table at once:
the row with the highest id may belong to another test.
"""

from __future__ import annotations

from typing import Any

from ..db import Database
from ..exceptions import DatabaseError
from .models import AssertionResult


class DbAssertions:
    """
    Engine for checks against a Database.

    Example:
        engine = DbAssertions(Database.connect(lambda: sqlite3.connect("app.db")))
        engine.query_not_empty("SELECT * FROM users WHERE name = 'bob'")
        engine.last_row("users", "id", "name", "bob")
        engine.row("users", "id", 7, "active", True)
    """

    def __init__(self, database: Database):
        self.database = database

    def query_not_empty(self, sql: str) -> AssertionResult:
        """Assert that a query returns at least one row."""
        try:
            row = self.database.query_single(sql)
        except DatabaseError as e:
            return self._sql_error(sql, e)

        if row is not None:
            return AssertionResult.passed_result(
                message="Query result is not empty",
                subject=sql,
                actual=row,
            )
        return AssertionResult.failed_result(
            message=f"Query <{sql}> result is empty, but expected to be not empty",
            subject=sql,
            expected="at least one row",
            actual="no rows",
        )

    def query_empty(self, sql: str) -> AssertionResult:
        """Assert that a query returns no rows."""
        try:
            row = self.database.query_single(sql)
        except DatabaseError as e:
            return self._sql_error(sql, e)

        if row is None:
            return AssertionResult.passed_result(
                message="Query result is empty",
                subject=sql,
            )
        return AssertionResult.failed_result(
            message=f"Query <{sql}> result is not empty, but expected to be empty",
            subject=sql,
            expected="no rows",
            actual=row,
        )

    def last_row(self, table: str, id_field: str, field: str, expected: Any) -> AssertionResult:
        """Assert the value of `field` in the row with the highest `id_field`."""
        sql = (
            f"SELECT {field} FROM {table} "
            f"WHERE {id_field} = (SELECT MAX({id_field}) FROM {table})"
        )
        return self._check_field(sql, (), field, expected)

    def row(
        self,
        table: str,
        id_field: str,
        id_value: Any,
        field: str,
        expected: Any,
    ) -> AssertionResult:
        """Assert the value of `field` in the row where `id_field` equals `id_value`."""
        sql = f"SELECT {field} FROM {table} WHERE {id_field} = {self.database.placeholder}"
        return self._check_field(sql, (id_value,), field, expected)

    def _check_field(
        self, sql: str, params: tuple, field: str, expected: Any
    ) -> AssertionResult:
        try:
            row = self.database.query_single(sql, params)
        except DatabaseError as e:
            return self._sql_error(sql, e)

        if row is None:
            return AssertionResult.failed_result(
                message="Row not found",
                subject=sql,
                expected=expected,
                actual="<no row>",
            )
        return AssertionResult.compare(_field_value(row, field), expected, f"Field {field}", subject=sql)

    def _sql_error(self, sql: str, error: DatabaseError) -> AssertionResult:
        return AssertionResult.error_result(
            message="SQL execution failed",
            subject=sql,
            details={"error": str(error)},
        )


def _field_value(row: dict[str, Any], field: str) -> Any:
    """Look a column up by name, falling back to a case-insensitive match."""
    if field in row:
        return row[field]
    for label, value in row.items():
        if label.lower() == field.lower():
            return value
    # Expressions such as MAX(x) come back under a driver-specific label
    return next(iter(row.values()), None)


# Raising helpers
def assert_query_not_empty(database: Database, sql: str, message: str | None = None) -> None:
    DbAssertions(database).query_not_empty(sql).raise_for_status(message)


def assert_query_empty(database: Database, sql: str, message: str | None = None) -> None:
    DbAssertions(database).query_empty(sql).raise_for_status(message)


def assert_last_row(
    database: Database,
    table: str,
    id_field: str,
    field: str,
    expected: Any,
    message: str | None = None,
) -> None:
    DbAssertions(database).last_row(table, id_field, field, expected).raise_for_status(message)


def assert_row(
    database: Database,
    table: str,
    id_field: str,
    id_value: Any,
    field: str,
    expected: Any,
    message: str | None = None,
) -> None:
    DbAssertions(database).row(table, id_field, id_value, field, expected).raise_for_status(message)
