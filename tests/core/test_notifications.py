"""Tests for desktop notification scheduling."""

import asyncio
import subprocess
from unittest.mock import patch

import pytest

from lofi_radio import notifications
from lofi_radio.notifications import TIMER_NOTIFICATION_ID, DesktopNotifier


class TestNotify:
    def test_missing_notify_send(self):
        with patch("shutil.which", return_value=None):
            assert notifications.notify("Title", "Body") is False

    def test_runs_notify_send(self):
        with (
            patch("shutil.which", return_value="/usr/bin/notify-send"),
            patch("subprocess.run") as run,
        ):
            assert notifications.notify("Done", "Nice work", urgency="low") is True

        args = run.call_args[0][0]
        assert args[0] == "notify-send"
        assert args[-2:] == ["Done", "Nice work"]
        assert "low" in args

    def test_timeout_is_reported(self):
        with (
            patch("shutil.which", return_value="/usr/bin/notify-send"),
            patch("subprocess.run", side_effect=subprocess.TimeoutExpired("notify-send", 2)),
        ):
            assert notifications.notify("Title", "Body") is False


class TestDesktopNotifier:
    @pytest.mark.anyio
    async def test_scheduled_notification_fires(self):
        notifier = DesktopNotifier()
        with patch.object(notifications, "notify") as notify:
            notifier.schedule_completion(0.01, "Session done")
            assert notifier.pending_ids == [TIMER_NOTIFICATION_ID]
            await asyncio.sleep(0.05)

        notify.assert_called_once_with("Focus Session Complete!", "Session done")
        assert notifier.pending_ids == []

    @pytest.mark.anyio
    async def test_cancel_prevents_delivery(self):
        notifier = DesktopNotifier()
        with patch.object(notifications, "notify") as notify:
            notifier.schedule_completion(0.01, "Session done")
            notifier.cancel_pending()
            await asyncio.sleep(0.05)

        notify.assert_not_called()

    @pytest.mark.anyio
    async def test_reschedule_replaces_pending(self):
        notifier = DesktopNotifier()
        with patch.object(notifications, "notify") as notify:
            notifier.schedule_completion(0.01, "first")
            notifier.schedule_completion(0.02, "second")
            await asyncio.sleep(0.06)

        notify.assert_called_once_with("Focus Session Complete!", "second")

    @pytest.mark.anyio
    async def test_disabled_notifier_schedules_nothing(self):
        notifier = DesktopNotifier(enabled=False)
        with patch.object(notifications, "notify") as notify:
            notifier.schedule_completion(0.0, "x")
            notifier.deliver_now("t", "m")
            await asyncio.sleep(0.01)

        assert notifier.pending_ids == []
        notify.assert_not_called()
