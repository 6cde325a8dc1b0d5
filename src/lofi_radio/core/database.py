"""
SQLite database operations for Lofi Radio

Local key-value style persistence for focus sessions, favorites and the
signed-in user.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from loguru import logger

from .config import get_data_dir

# Database schema version for migrations
SCHEMA_VERSION = 2


def get_database_path() -> Path:
    """Get the path to the SQLite database file."""
    return get_data_dir() / "lofi_radio.db"


@contextmanager
def get_db_connection(db_path: Optional[Path] = None) -> Iterator[sqlite3.Connection]:
    """Get a database connection with proper cleanup and concurrency support."""
    path = db_path if db_path is not None else get_database_path()
    conn = sqlite3.connect(path, timeout=30.0)
    conn.row_factory = sqlite3.Row  # Enable dict-like access

    # WAL mode allows reads during writes
    conn.execute("PRAGMA journal_mode=WAL")

    try:
        yield conn
    finally:
        conn.close()


def migrate_database(conn: sqlite3.Connection, current_version: int) -> None:
    """Migrate database from current_version to latest schema."""
    if current_version < 1:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS focus_sessions (
                id TEXT PRIMARY KEY,
                preset TEXT NOT NULL,
                duration REAL NOT NULL,
                completed_at TIMESTAMP NOT NULL,
                completed INTEGER NOT NULL
            )
        """)

        conn.execute("""
            CREATE TABLE IF NOT EXISTS favorites (
                id TEXT PRIMARY KEY,
                track_id TEXT UNIQUE NOT NULL,
                added_at TIMESTAMP NOT NULL,
                -- Snapshot of the track so favorites survive catalog changes
                title TEXT,
                artist TEXT,
                album_art_url TEXT,
                stream_url TEXT,
                duration REAL DEFAULT 0,
                genre TEXT
            )
        """)

    if current_version < 2:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS current_user (
                id INTEGER PRIMARY KEY CHECK (id = 1), -- Ensure only one row
                user_id TEXT NOT NULL,
                email TEXT,
                username TEXT NOT NULL DEFAULT '',
                display_name TEXT,
                is_guest INTEGER NOT NULL DEFAULT 0,
                subscription_tier TEXT NOT NULL DEFAULT 'free',
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_focus_sessions_completed_at
            ON focus_sessions (completed_at DESC)
        """)


def init_database(db_path: Optional[Path] = None) -> None:
    """Create or upgrade the schema."""
    path = db_path if db_path is not None else get_database_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    with get_db_connection(path) as conn:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER PRIMARY KEY
            )
        """)
        row = conn.execute("SELECT MAX(version) AS version FROM schema_version").fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        if current_version < SCHEMA_VERSION:
            logger.info(
                f"Migrating database {path} from v{current_version} to v{SCHEMA_VERSION}"
            )
            migrate_database(conn, current_version)
            conn.execute(
                "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
                (SCHEMA_VERSION,),
            )
            conn.commit()
