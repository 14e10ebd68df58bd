"""
SQLite database integration and simple migration system.

Used by :class:`~todo_rpc_api.app.repositories.sqlite.SqliteRepository`
when ``STORAGE_BACKEND=sqlite``.  Entities of every kind live in one
``entities`` table as JSON payloads together with an insertion
sequence (for ordered listing); the ``sequences`` table holds the
per-kind id counters.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Tuple

MIGRATIONS: List[Tuple[int, str]] = [
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS entities (
            kind TEXT NOT NULL,
            id TEXT NOT NULL,
            seq INTEGER NOT NULL,
            payload TEXT NOT NULL,
            PRIMARY KEY (kind, id)
        );

        CREATE INDEX IF NOT EXISTS idx_entities_kind_seq ON entities (kind, seq);

        CREATE TABLE IF NOT EXISTS sequences (
            kind TEXT PRIMARY KEY,
            value INTEGER NOT NULL DEFAULT 0
        );
        """,
    ),
]


def get_database_path(database_url: str) -> str:
    """Resolve ``database_url`` to a file path.

    Absolute paths are used as is; relative ones are resolved against
    the current working directory.
    """
    if os.path.isabs(database_url):
        return database_url
    return str((Path.cwd() / database_url).resolve())


def get_connection(database_path: str) -> sqlite3.Connection:
    """Create and return a new SQLite connection with name-indexed rows."""
    conn = sqlite3.connect(database_path)
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_cursor(database_path: str) -> Iterator[sqlite3.Cursor]:
    """Yield a cursor, commit on success, roll back on error, always close."""
    conn = get_connection(database_path)
    try:
        yield conn.cursor()
        conn.commit()
    except BaseException:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db(database_path: str) -> None:
    """Create the database file if needed and apply pending migrations."""
    Path(database_path).parent.mkdir(parents=True, exist_ok=True)
    with get_cursor(database_path) as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) AS version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
