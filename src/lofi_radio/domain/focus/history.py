"""
Focus session history and statistics.

Sessions are appended once and never modified; queries return them
newest first.
"""

from datetime import date, datetime
from pathlib import Path
from typing import Optional

from loguru import logger

from lofi_radio.core.database import get_db_connection, init_database

from .models import FocusSession


class FocusHistory:
    """Append-only store of FocusSession records in SQLite."""

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = db_path
        init_database(db_path)

    def append(self, session: FocusSession) -> None:
        with get_db_connection(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO focus_sessions (id, preset, duration, completed_at, completed)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    session.id,
                    session.preset,
                    session.duration,
                    session.completed_at.isoformat(),
                    int(session.completed),
                ),
            )
            conn.commit()
        logger.info(
            f"Recorded focus session: {session.preset} {session.duration:.0f}s "
            f"(completed={session.completed})"
        )

    def sessions(self, limit: Optional[int] = None) -> list[FocusSession]:
        """Get sessions, newest first."""
        query = """
            SELECT id, preset, duration, completed_at, completed
            FROM focus_sessions
            ORDER BY completed_at DESC, rowid DESC
        """
        params: tuple = ()
        if limit is not None:
            query += " LIMIT ?"
            params = (limit,)

        with get_db_connection(self.db_path) as conn:
            rows = conn.execute(query, params).fetchall()

        return [
            FocusSession(
                id=row["id"],
                preset=row["preset"],
                duration=row["duration"],
                completed_at=datetime.fromisoformat(row["completed_at"]),
                completed=bool(row["completed"]),
            )
            for row in rows
        ]

    def total_focus_time(self) -> float:
        """Seconds across all sessions."""
        with get_db_connection(self.db_path) as conn:
            row = conn.execute(
                "SELECT COALESCE(SUM(duration), 0) AS total FROM focus_sessions"
            ).fetchone()
        return float(row["total"])

    def completed_sessions_count(self) -> int:
        with get_db_connection(self.db_path) as conn:
            row = conn.execute(
                "SELECT COUNT(*) AS count FROM focus_sessions WHERE completed = 1"
            ).fetchone()
        return int(row["count"])

    def todays_focus_time(self, today: Optional[date] = None) -> float:
        """Seconds across sessions that ended on `today` (local date)."""
        day = today or date.today()
        return sum(s.duration for s in self.sessions() if s.completed_at.date() == day)

    def clear(self) -> None:
        with get_db_connection(self.db_path) as conn:
            conn.execute("DELETE FROM focus_sessions")
            conn.commit()
