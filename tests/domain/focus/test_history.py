"""Tests for focus session history and statistics."""

from datetime import date, datetime

from lofi_radio.domain.focus import FocusHistory, FocusSession


def _session(preset: str, minutes: int, completed: bool, when: datetime) -> FocusSession:
    return FocusSession(
        preset=preset, duration=minutes * 60, completed=completed, completed_at=when
    )


def test_sessions_are_listed_newest_first(db_path):
    history = FocusHistory(db_path)
    first = _session("Pomodoro", 25, True, datetime(2026, 3, 13, 9, 0))
    second = _session("Deep Work", 90, False, datetime(2026, 3, 14, 9, 0))
    history.append(first)
    history.append(second)

    assert history.sessions() == [second, first]
    assert history.sessions(limit=1) == [second]


def test_statistics(db_path):
    history = FocusHistory(db_path)
    history.append(_session("Pomodoro", 25, True, datetime(2026, 3, 13, 22, 0)))
    history.append(_session("Pomodoro", 25, True, datetime(2026, 3, 14, 8, 0)))
    history.append(_session("Custom", 10, False, datetime(2026, 3, 14, 12, 0)))

    assert history.total_focus_time() == 60 * 60
    assert history.completed_sessions_count() == 2
    assert history.todays_focus_time(today=date(2026, 3, 14)) == 35 * 60
    assert history.todays_focus_time(today=date(2026, 3, 15)) == 0


def test_empty_history(db_path):
    history = FocusHistory(db_path)
    assert history.sessions() == []
    assert history.total_focus_time() == 0.0
    assert history.completed_sessions_count() == 0


def test_history_persists_and_clears(db_path):
    FocusHistory(db_path).append(_session("Sleep", 60, True, datetime(2026, 1, 1, 23, 0)))

    reopened = FocusHistory(db_path)
    assert len(reopened.sessions()) == 1

    reopened.clear()
    assert FocusHistory(db_path).sessions() == []
