"""Database schema and connection management for SQLite."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from filebot.config import DATABASE_PATH

BUSY_TIMEOUT_SECONDS = 30.0


def init_database() -> None:
    """
    Initialize database and create tables if they don't exist.
    """
    db_path = Path(DATABASE_PATH)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    with get_db_connection() as conn:
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS files (
                file_id TEXT PRIMARY KEY,
                display_name TEXT NOT NULL,
                caption TEXT,
                media_kind TEXT NOT NULL,
                added_by TEXT NOT NULL,
                added_at TEXT NOT NULL
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS file_keywords (
                file_id TEXT NOT NULL,
                keyword TEXT NOT NULL,
                PRIMARY KEY(file_id, keyword),
                FOREIGN KEY(file_id) REFERENCES files(file_id) ON DELETE CASCADE
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS daily_quotas (
                user_id TEXT NOT NULL,
                day TEXT NOT NULL,
                delivered_count INTEGER NOT NULL CHECK (delivered_count >= 0),
                PRIMARY KEY(user_id, day)
            )
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_file_keywords_keyword ON file_keywords(keyword)
        """)

        conn.commit()


@contextmanager
def get_db_connection() -> Generator[sqlite3.Connection, None, None]:
    """
    Context manager for database connections.
    """
    conn = sqlite3.connect(DATABASE_PATH, timeout=BUSY_TIMEOUT_SECONDS)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
    finally:
        conn.close()
