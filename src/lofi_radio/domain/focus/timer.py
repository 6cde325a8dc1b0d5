"""
Focus timer for Lofi Radio

Runs one countdown at a time, independent of playback:

    idle -> running <-> paused
    running -> completed -> (grace delay) -> idle
    running/paused -> stop -> idle

Ticks are one-shot handles rescheduled after each tick, so pausing or
stopping cancels the pending tick before returning.
"""

import asyncio
from datetime import datetime
from typing import Any, Callable, Optional, Protocol

from loguru import logger

from lofi_radio.notifications import TIMER_NOTIFICATION_ID, NotificationScheduler

from .history import FocusHistory
from .models import CUSTOM_PRESET_LABEL, FocusPreset, FocusSession, FocusTimer, TimerState

TICK_INTERVAL = 1.0
COMPLETION_GRACE = 3.0

TimerCallback = Callable[[Optional[FocusTimer]], None]


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """The part of asyncio.AbstractEventLoop the timer needs."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> Cancellable: ...


class FocusTimerManager:
    """Owns the single active FocusTimer and its tick/grace handles."""

    def __init__(
        self,
        history: FocusHistory,
        notifier: Optional[NotificationScheduler] = None,
        scheduler: Optional[Scheduler] = None,
        clock: Callable[[], datetime] = datetime.now,
        tick_interval: float = TICK_INTERVAL,
        completion_grace: float = COMPLETION_GRACE,
        on_complete: Optional[Callable[[FocusSession], None]] = None,
    ):
        self.history = history
        self.notifier = notifier
        self.tick_interval = tick_interval
        self.completion_grace = completion_grace
        self.on_complete = on_complete
        self._scheduler = scheduler
        self._clock = clock
        self._timer: Optional[FocusTimer] = None
        self._preset: Optional[str] = None
        self._tick_handle: Optional[Cancellable] = None
        self._grace_handle: Optional[Cancellable] = None
        self._subscribers: list[TimerCallback] = []

    # Observers

    def subscribe(self, callback: TimerCallback) -> Callable[[], None]:
        """Register a timer observer. Returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            try:
                callback(self._timer)
            except Exception:
                logger.exception(f"Timer subscriber {callback!r} failed")

    # State

    @property
    def current_timer(self) -> Optional[FocusTimer]:
        return self._timer

    @property
    def current_preset(self) -> Optional[str]:
        return self._preset

    @property
    def state(self) -> TimerState:
        return self._timer.state if self._timer else TimerState.IDLE

    @property
    def is_running(self) -> bool:
        return self.state == TimerState.RUNNING

    @property
    def is_paused(self) -> bool:
        return self.state == TimerState.PAUSED

    @property
    def has_active_timer(self) -> bool:
        return self._timer is not None and self._timer.state != TimerState.COMPLETED

    # Controls

    def start(self, duration: float, preset: Optional[str] = None) -> bool:
        """Start a countdown of `duration` seconds.

        Ignored (returns False) while another timer is running or paused;
        stop that one first.

        Raises:
            ValueError: If duration is not positive
        """
        if self.has_active_timer:
            logger.warning(
                f"Ignoring start({duration}): a {self._preset or CUSTOM_PRESET_LABEL} "
                "timer is already active"
            )
            return False

        timer = FocusTimer.create(duration)
        self._cancel_grace()
        timer.state = TimerState.RUNNING
        timer.started_at = self._clock()
        self._timer = timer
        self._preset = preset
        logger.info(f"Focus timer started: {preset or CUSTOM_PRESET_LABEL} ({duration:.0f}s)")

        self._schedule_tick()
        self._schedule_notification()
        self._notify()
        return True

    def start_preset(self, preset: FocusPreset) -> bool:
        return self.start(preset.duration, preset.label)

    def pause(self) -> bool:
        if self._timer is None or self._timer.state != TimerState.RUNNING:
            return False

        self._cancel_tick()
        self._timer.state = TimerState.PAUSED
        self._timer.paused_at = self._clock()
        self._cancel_notification()
        logger.debug(f"Focus timer paused with {self._timer.remaining:.0f}s left")
        self._notify()
        return True

    def resume(self) -> bool:
        if self._timer is None or self._timer.state != TimerState.PAUSED:
            return False

        self._timer.state = TimerState.RUNNING
        self._timer.paused_at = None
        self._schedule_tick()
        self._schedule_notification()
        logger.debug("Focus timer resumed")
        self._notify()
        return True

    def stop(self, completed: bool = False) -> Optional[FocusSession]:
        """Stop the timer and record a session for it.

        Returns:
            The recorded session, or None if no timer was active
        """
        self._cancel_tick()
        self._cancel_grace()
        self._cancel_notification()

        timer = self._timer
        session = None
        if timer is not None and timer.state != TimerState.COMPLETED:
            session = FocusSession(
                preset=self._preset or CUSTOM_PRESET_LABEL,
                duration=timer.duration if completed else timer.elapsed,
                completed=completed,
                completed_at=self._clock(),
            )
            self._record(session)

        self._timer = None
        self._preset = None
        if timer is not None:
            logger.info("Focus timer stopped")
            self._notify()
        return session

    def add_time(self, seconds: float) -> bool:
        """Extend (or with a negative value, shorten) the active timer."""
        if not self.has_active_timer:
            return False

        timer = self._timer
        timer.remaining = max(0.0, timer.remaining + seconds)
        timer.duration = max(timer.remaining, timer.duration + seconds)
        if timer.state == TimerState.RUNNING:
            self._schedule_notification()
        logger.debug(f"Added {seconds:+.0f}s, {timer.remaining:.0f}s left")
        self._notify()
        return True

    def tick(self) -> None:
        """Advance the countdown by one second. No-op unless running."""
        timer = self._timer
        if timer is None or timer.state != TimerState.RUNNING:
            return

        timer.remaining = max(0.0, timer.remaining - 1)
        if timer.remaining <= 0:
            self._complete()
        else:
            self._notify()

    # Internals

    def _get_scheduler(self) -> Scheduler:
        if self._scheduler is None:
            return asyncio.get_running_loop()
        return self._scheduler

    def _schedule_tick(self) -> None:
        self._cancel_tick()
        self._tick_handle = self._get_scheduler().call_later(self.tick_interval, self._on_tick)

    def _on_tick(self) -> None:
        self._tick_handle = None
        self.tick()
        if self.is_running:
            self._schedule_tick()

    def _cancel_tick(self) -> None:
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None

    def _cancel_grace(self) -> None:
        if self._grace_handle is not None:
            self._grace_handle.cancel()
            self._grace_handle = None

    def _complete(self) -> None:
        timer = self._timer
        self._cancel_tick()
        timer.state = TimerState.COMPLETED
        timer.remaining = 0.0

        session = FocusSession(
            preset=self._preset or CUSTOM_PRESET_LABEL,
            duration=timer.duration,
            completed=True,
            completed_at=self._clock(),
        )
        self._record(session)
        logger.info(f"Focus timer completed: {session.preset}")

        self._cancel_notification()
        if self.notifier is not None:
            try:
                self.notifier.deliver_now(
                    "Focus Session Complete!", self._completion_message()
                )
            except Exception:
                logger.exception("Failed to deliver completion notification")

        if self.on_complete is not None:
            try:
                self.on_complete(session)
            except Exception:
                logger.exception("Focus completion callback failed")

        self._notify()
        self._grace_handle = self._get_scheduler().call_later(
            self.completion_grace, self._clear_completed
        )

    def _clear_completed(self) -> None:
        self._grace_handle = None
        if self._timer is not None and self._timer.state == TimerState.COMPLETED:
            self._timer = None
            self._preset = None
            self._notify()

    def _record(self, session: FocusSession) -> None:
        self.history.append(session)

    def _completion_message(self) -> str:
        return f"Great job! You've completed your {self._preset or 'focus'} session."

    def _schedule_notification(self) -> None:
        if self.notifier is None or self._timer is None:
            return
        try:
            self.notifier.schedule_completion(
                self._timer.remaining, self._completion_message(), TIMER_NOTIFICATION_ID
            )
        except Exception:
            logger.exception("Failed to schedule completion notification")

    def _cancel_notification(self) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier.cancel_pending(TIMER_NOTIFICATION_ID)
        except Exception:
            logger.exception("Failed to cancel completion notification")
