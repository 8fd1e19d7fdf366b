"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``) and applying migrations on application start
(``init_db``).  It plays the role of the external data layer for the
scheduling views: calendars and their entries live here, the layout
engine only ever sees snapshots read from these tables.

Timestamps are stored as ISO-8601 text normalised to UTC, so plain
string comparison orders them correctly in range queries.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .config import settings

DEFAULT_CALENDAR_NAME = "General"

MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: calendars and their entries
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS calendars (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            color TEXT NOT NULL DEFAULT '#3b82f6',
            is_visible INTEGER NOT NULL DEFAULT 1,
            is_default INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS calendar_entries (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            calendar_id INTEGER,
            title TEXT NOT NULL,
            description TEXT,
            location TEXT,
            start_time TEXT NOT NULL,
            end_time TEXT NOT NULL,
            is_all_day INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY(calendar_id) REFERENCES calendars(id) ON DELETE SET NULL
        );
        """,
    ),
    # Migration 2: range lookups for the visible period
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_calendar_entries_start ON calendar_entries(start_time);
        CREATE INDEX IF NOT EXISTS idx_calendar_entries_end ON calendar_entries(end_time);
        CREATE INDEX IF NOT EXISTS idx_calendar_entries_calendar_id ON calendar_entries(calendar_id);
        """,
    ),
]


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the package root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # event_calendar_api/
    return str((base_dir / db_url).resolve())


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed by
    name.  Foreign keys are switched on per connection; without it the
    ``ON DELETE SET NULL`` clause on entries is ignored.
    """
    conn = sqlite3.connect(get_database_path())
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_cursor() -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor and closes the connection on exit."""
    conn = get_connection()
    try:
        yield conn.cursor()
        conn.commit()
    finally:
        conn.close()


def init_db() -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, applies any
    migration newer than the recorded version and makes sure a default
    calendar exists so new entries always have somewhere to go.
    """
    with get_cursor() as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations ("
            "version INTEGER PRIMARY KEY, applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
                current_version = version

        cursor.execute(
            """
            INSERT INTO calendars (name, is_default)
            SELECT ?, 1
            WHERE NOT EXISTS (SELECT 1 FROM calendars WHERE is_default = 1)
            """,
            (DEFAULT_CALENDAR_NAME,),
        )
