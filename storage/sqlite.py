"""SQLite helpers for the persistence layer."""
from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from typing import Iterator, Optional

from config.settings import settings

BUSY_TIMEOUT_S = 10.0


def _connect(db_path: str) -> sqlite3.Connection:
    directory = os.path.dirname(db_path) or "."
    os.makedirs(directory, exist_ok=True)
    conn = sqlite3.connect(db_path, timeout=BUSY_TIMEOUT_S, isolation_level=None)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_conn(db_path: Optional[str] = None, *, immediate: bool = True) -> Iterator[sqlite3.Connection]:
    """Yield a connection inside a transaction that commits on success.

    ``immediate`` takes the write lock up front so concurrent writers are
    serialised before they read. Any exception rolls the transaction back and
    is re-raised.
    """

    conn = _connect(db_path or settings.DB_PATH)
    try:
        conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
        try:
            yield conn
        except BaseException:
            conn.execute("ROLLBACK")
            raise
        conn.execute("COMMIT")
    finally:
        conn.close()
