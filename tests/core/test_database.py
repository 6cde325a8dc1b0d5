"""Tests for database schema setup."""

from lofi_radio.core.database import SCHEMA_VERSION, get_db_connection, init_database


def test_init_creates_schema(tmp_path):
    db_path = tmp_path / "nested" / "lofi.db"
    init_database(db_path)

    with get_db_connection(db_path) as conn:
        tables = {
            row["name"]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        }
        version = conn.execute("SELECT MAX(version) AS v FROM schema_version").fetchone()["v"]

    assert {"focus_sessions", "favorites", "current_user", "schema_version"} <= tables
    assert version == SCHEMA_VERSION


def test_init_is_idempotent(db_path):
    init_database(db_path)
    init_database(db_path)

    with get_db_connection(db_path) as conn:
        rows = conn.execute("SELECT version FROM schema_version").fetchall()

    assert [row["version"] for row in rows] == [SCHEMA_VERSION]


def test_current_user_holds_one_row(db_path):
    init_database(db_path)
    with get_db_connection(db_path) as conn:
        for user_id in ("a", "b"):
            conn.execute(
                "INSERT OR REPLACE INTO current_user (id, user_id) VALUES (1, ?)", (user_id,)
            )
        conn.commit()
        rows = conn.execute("SELECT user_id FROM current_user").fetchall()

    assert [row["user_id"] for row in rows] == ["b"]
