"""
Database access for DB assertions.

Usage:
    import sqlite3
    from nanotests.db import Database

    db = Database.connect(lambda: sqlite3.connect("app.db"))
    rows = db.query("SELECT id, name FROM users")
    db.shutdown()
"""

from ..exceptions import DatabaseError
from .database import Database
from .pool import ConnectionPool, PooledConnection

__all__ = [
    "ConnectionPool",
    "Database",
    "DatabaseError",
    "PooledConnection",
]
