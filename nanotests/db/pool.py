"""
Connection pooling for DB-API 2.0 (PEP 249) connections.

Connections are opened lazily through a caller-supplied factory and reused
once their cursor is closed. Any PEP 249 driver works, e.g.:

    pool = ConnectionPool(lambda: sqlite3.connect("test.db"))
    with pool.cursor() as cursor:
        cursor.execute("SELECT 1")
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterator

from ..exceptions import DatabaseError

logger = logging.getLogger(__name__)


class PooledConnection:
    """
    A pooled connection. It is busy while a cursor obtained from it is open.
    """

    def __init__(self, connection: Any):
        self.connection = connection
        self._cursor: Any = None

    @property
    def is_busy(self) -> bool:
        return self._cursor is not None

    def open_cursor(self) -> Any:
        self._cursor = self.connection.cursor()
        return self._cursor

    def close_cursor(self) -> None:
        """Close the open cursor and make the connection available again."""
        if self._cursor is not None:
            try:
                self._cursor.close()
            finally:
                self._cursor = None

    def release(self) -> None:
        """Close the underlying connection."""
        self.connection.close()
        self.connection = None


class ConnectionPool:
    """Thread-safe pool of PooledConnection objects."""

    def __init__(self, connect: Callable[[], Any]):
        """
        Args:
            connect: Zero-argument factory returning a new DB-API connection
        """
        self._connect = connect
        self._connections: list[PooledConnection] = []
        self._lock = threading.Lock()

    @property
    def size(self) -> int:
        return len(self._connections)

    def _acquire(self) -> tuple[PooledConnection, Any]:
        with self._lock:
            for pooled in self._connections:
                if not pooled.is_busy:
                    return pooled, pooled.open_cursor()

            try:
                pooled = PooledConnection(self._connect())
            except Exception as e:
                raise DatabaseError(f"Failed to open connection: {e}") from e
            self._connections.append(pooled)
            logger.info(f"Opened database connection #{len(self._connections)}")
            return pooled, pooled.open_cursor()

    @contextmanager
    def cursor(self) -> Iterator[tuple[Any, Any]]:
        """
        Borrow a connection and a fresh cursor on it.

        Yields:
            Tuple of (connection, cursor); the cursor is closed on exit
        """
        pooled, cursor = self._acquire()
        try:
            yield pooled.connection, cursor
        finally:
            pooled.close_cursor()

    def shutdown(self) -> bool:
        """
        Close every pooled connection.

        Nothing is closed while any connection is still in use.

        Returns:
            True if the pool was shut down, False if a connection was busy
        """
        with self._lock:
            if any(pooled.is_busy for pooled in self._connections):
                logger.warning("Database pool shutdown skipped: a connection is still in use")
                return False

            for pooled in self._connections:
                pooled.release()
            logger.info(f"Closed {len(self._connections)} database connection(s)")
            self._connections.clear()
            return True
