"""
Break reminder timing and lifecycle.

The countdown runs while the user works. When it reaches zero a reminder is
shown, unless the app in front is on the blocklist, in which case the
countdown simply starts over. A shown reminder closes itself after
REMINDER_TIMEOUT_SECONDS if the user does not dismiss it.
"""

import threading
import time
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Deque, Iterator, Optional, Tuple

from rest_reminder.core.blocklist import should_suppress
from rest_reminder.core.clock import RepeatingTimer, make_tick_timer
from rest_reminder.data.config import Config
from rest_reminder.utils.constants import REMINDER_TIMEOUT_SECONDS, ReminderPhase
from rest_reminder.utils.logger import logger

TimerFactory = Callable[..., RepeatingTimer]


@dataclass(frozen=True)
class TimerState:
    """Point-in-time view of the reminder state machine."""
    phase: str
    remaining_seconds: int
    reminder_elapsed_seconds: int
    last_tick: Optional[float]


def format_clock(seconds: float) -> str:
    """Format seconds as MM:SS (minutes are not wrapped at 60)."""
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"


class ReminderStateMachine:
    """
    Owns the countdown and the reminder timeout.

    All public methods are safe to call from any thread. Calls that make no
    sense in the current phase (e.g. dismiss() while running) do nothing.

    Event callbacks never run under the internal lock. Each transition
    finishes first and queues its events, which are delivered in order once
    the lock is released. A callback may therefore block, raise, or call back
    into the machine without stalling other threads.
    """

    def __init__(
        self,
        config: Config,
        frontmost_app: Optional[Callable[[], Optional[str]]] = None,
        on_tick: Optional[Callable[[int], None]] = None,
        on_phase_change: Optional[Callable[[str], None]] = None,
        on_reminder_shown: Optional[Callable[[], None]] = None,
        on_reminder_dismissed: Optional[Callable[[], None]] = None,
        on_reminder_timeout_tick: Optional[Callable[[int], None]] = None,
        on_reminder_skipped: Optional[Callable[[str], None]] = None,
        reminder_timeout_seconds: int = REMINDER_TIMEOUT_SECONDS,
        timer_factory: TimerFactory = make_tick_timer,
    ):
        """
        Initialize the state machine in the running phase.

        Args:
            config: Interval and blocklist settings (a copy is kept)
            frontmost_app: Returns the bundle id of the app in front, or None
            on_tick: Called with the remaining countdown whenever it changes
            on_phase_change: Called with the new phase
            on_reminder_shown: Called once each time a reminder appears
            on_reminder_dismissed: Called when a shown reminder goes away
            on_reminder_timeout_tick: Called with seconds left before auto-dismiss
            on_reminder_skipped: Called with the blocking app id when a reminder is skipped
            reminder_timeout_seconds: How long a reminder stays up on its own
            timer_factory: Builds the one-second timers, swapped out in tests
        """
        config.validate()
        self._config = config.copy()
        self.frontmost_app = frontmost_app

        self.on_tick = on_tick
        self.on_phase_change = on_phase_change
        self.on_reminder_shown = on_reminder_shown
        self.on_reminder_dismissed = on_reminder_dismissed
        self.on_reminder_timeout_tick = on_reminder_timeout_tick
        self.on_reminder_skipped = on_reminder_skipped

        self.reminder_timeout_seconds = reminder_timeout_seconds
        self._timer_factory = timer_factory

        self._lock = threading.RLock()
        self._depth = 0
        self._pending: Deque[Tuple[Callable, tuple]] = deque()
        self._delivering = False

        self._phase = ReminderPhase.RUNNING
        self._remaining = self._config.interval_seconds
        self._reminder_elapsed = 0
        self._last_tick: Optional[float] = None

        self._countdown_timer: Optional[RepeatingTimer] = None
        self._reminder_timer: Optional[RepeatingTimer] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def phase(self) -> str:
        return self._phase

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def reminder_elapsed_seconds(self) -> int:
        return self._reminder_elapsed

    @property
    def remaining_reminder_seconds(self) -> int:
        """Seconds until a shown reminder closes itself, 0 when none is shown."""
        if self._phase != ReminderPhase.REMINDING:
            return 0
        return max(0, self.reminder_timeout_seconds - self._reminder_elapsed)

    @property
    def last_tick(self) -> Optional[float]:
        """Monotonic timestamp of the last tick, None before the first."""
        return self._last_tick

    @property
    def is_paused(self) -> bool:
        return self._phase == ReminderPhase.PAUSED

    @property
    def is_reminding(self) -> bool:
        return self._phase == ReminderPhase.REMINDING

    @property
    def config(self) -> Config:
        """Copy of the configuration currently in effect."""
        with self._lock:
            return self._config.copy()

    def snapshot(self) -> TimerState:
        with self._lock:
            return TimerState(
                phase=self._phase,
                remaining_seconds=self._remaining,
                reminder_elapsed_seconds=self._reminder_elapsed,
                last_tick=self._last_tick,
            )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Arm the timer for the current phase."""
        with self._locked():
            if self._phase == ReminderPhase.RUNNING and self._countdown_timer is None:
                self._arm_countdown()
            elif self._phase == ReminderPhase.REMINDING and self._reminder_timer is None:
                self._arm_reminder_timer()
            self._emit(self.on_tick, self._remaining)

    def tick(self) -> None:
        """Advance by one second."""
        with self._locked():
            if self._phase == ReminderPhase.RUNNING:
                self._last_tick = time.monotonic()
                self._countdown_tick()
            elif self._phase == ReminderPhase.REMINDING:
                self._last_tick = time.monotonic()
                self._reminder_tick()

    def expire(self) -> None:
        """
        Countdown reached zero: show a reminder or skip it.

        Does nothing unless running, so a second call while the reminder is
        already up has no effect.
        """
        with self._locked():
            if self._phase != ReminderPhase.RUNNING:
                logger.debug(f"expire() ignored in phase {self._phase}")
                return

            app_id = self._query_frontmost_app()
            if should_suppress(app_id, self._config):
                logger.info(f"Reminder skipped, {app_id} is in front")
                self._remaining = self._config.interval_seconds
                self._emit(self.on_reminder_skipped, app_id)
                self._emit(self.on_tick, self._remaining)
                return

            self._enter_reminding()

    def start_break(self) -> None:
        """Show the reminder right away, regardless of the blocklist."""
        with self._locked():
            if self._phase not in (ReminderPhase.RUNNING, ReminderPhase.PAUSED, ReminderPhase.IDLE):
                logger.debug(f"start_break() ignored in phase {self._phase}")
                return
            self._enter_reminding()

    def pause(self) -> None:
        """Pause the countdown."""
        with self._locked():
            if self._phase != ReminderPhase.RUNNING:
                return
            self._cancel_countdown()
            self._set_phase(ReminderPhase.PAUSED)

    def resume(self) -> None:
        """Resume the countdown from where it was paused."""
        with self._locked():
            if self._phase != ReminderPhase.PAUSED:
                return
            self._set_phase(ReminderPhase.RUNNING)
            self._arm_countdown()

    def toggle_pause(self) -> None:
        with self._locked():
            if self._phase == ReminderPhase.RUNNING:
                self.pause()
            elif self._phase == ReminderPhase.PAUSED:
                self.resume()

    def dismiss(self) -> None:
        """Close the reminder and start a new countdown."""
        with self._locked():
            if self._phase != ReminderPhase.REMINDING:
                logger.debug(f"dismiss() ignored in phase {self._phase}")
                return
            logger.info("Reminder dismissed")
            self._finish_reminder()
            self._restart_countdown()

    def reset_timer(self) -> None:
        """Start the countdown over with the full interval."""
        with self._locked():
            if self._phase == ReminderPhase.STOPPED:
                return
            if self._phase == ReminderPhase.REMINDING:
                self._finish_reminder()
            self._restart_countdown()

    def halt(self) -> None:
        """Stop counting without quitting; reset_timer() starts again."""
        with self._locked():
            if self._phase in (ReminderPhase.IDLE, ReminderPhase.STOPPED):
                return
            was_reminding = self._phase == ReminderPhase.REMINDING
            self._cancel_timers()
            self._remaining = 0
            self._reminder_elapsed = 0
            self._set_phase(ReminderPhase.IDLE)
            logger.info("Timer halted")
            self._emit(self.on_tick, self._remaining)
            if was_reminding:
                self._emit(self.on_reminder_dismissed)

    def stop(self) -> None:
        """Stop for good. Every later call is a no-op."""
        with self._locked():
            if self._phase == ReminderPhase.STOPPED:
                return
            was_reminding = self._phase == ReminderPhase.REMINDING
            self._cancel_timers()
            self._remaining = 0
            self._reminder_elapsed = 0
            self._last_tick = None
            self._set_phase(ReminderPhase.STOPPED)
            logger.info("Timer stopped")
            if was_reminding:
                self._emit(self.on_reminder_dismissed)

    def apply_config(self, config: Config) -> None:
        """
        Switch to new settings.

        A changed interval restarts the countdown at the new full length
        while running or paused. Blocklist changes apply at the next expiry.

        Raises:
            ValueError: If the new configuration is invalid
        """
        config.validate()
        with self._locked():
            old_interval = self._config.reminder_interval_minutes
            self._config = config.copy()

            if (
                config.reminder_interval_minutes != old_interval
                and self._phase in (ReminderPhase.RUNNING, ReminderPhase.PAUSED)
            ):
                self._remaining = self._config.interval_seconds
                logger.info(
                    f"Interval changed to {config.reminder_interval_minutes} min",
                    extra={'phase': self._phase, 'remaining': self._remaining},
                )
                self._emit(self.on_tick, self._remaining)

    # ------------------------------------------------------------------
    # Internals (called with the lock held)
    # ------------------------------------------------------------------

    def _countdown_tick(self) -> None:
        if self._remaining > 0:
            self._remaining -= 1
            self._emit(self.on_tick, self._remaining)

        if self._remaining <= 0:
            self.expire()

    def _reminder_tick(self) -> None:
        self._reminder_elapsed += 1
        self._emit(self.on_reminder_timeout_tick, self.remaining_reminder_seconds)

        if self._reminder_elapsed >= self.reminder_timeout_seconds:
            logger.info("Reminder timed out, closing automatically")
            self._finish_reminder()
            self._restart_countdown()

    def _enter_reminding(self) -> None:
        self._cancel_countdown()
        self._reminder_elapsed = 0
        self._set_phase(ReminderPhase.REMINDING)
        self._arm_reminder_timer()

        logger.info("Reminder shown")
        self._emit(self.on_reminder_shown)
        self._emit(self.on_reminder_timeout_tick, self.reminder_timeout_seconds)

    def _finish_reminder(self) -> None:
        """Tear down the reminder timeout. Caller picks the next phase."""
        self._cancel_reminder_timer()
        self._reminder_elapsed = 0
        self._emit(self.on_reminder_dismissed)

    def _restart_countdown(self) -> None:
        self._remaining = self._config.interval_seconds
        self._set_phase(ReminderPhase.RUNNING)
        self._arm_countdown()
        self._emit(self.on_tick, self._remaining)

    def _arm_countdown(self) -> None:
        self._cancel_countdown()
        self._countdown_timer = self._make_timer("ReminderCountdown")
        self._countdown_timer.start()

    def _arm_reminder_timer(self) -> None:
        self._cancel_reminder_timer()
        self._reminder_timer = self._make_timer("ReminderTimeout")
        self._reminder_timer.start()

    def _make_timer(self, name: str) -> RepeatingTimer:
        # The timer gets no share of our lock: a fire must never hold it
        # while events are delivered. Stale fires are dropped by identity.
        timer = self._timer_factory(lambda: self._on_timer_fire(timer), name=name)
        return timer

    def _on_timer_fire(self, timer: RepeatingTimer) -> None:
        with self._locked():
            if timer is not self._countdown_timer and timer is not self._reminder_timer:
                logger.debug(f"Dropped a fire from cancelled timer {timer.name}")
                return
            self.tick()

    def _cancel_countdown(self) -> None:
        if self._countdown_timer is not None:
            self._countdown_timer.cancel()
            self._countdown_timer = None

    def _cancel_reminder_timer(self) -> None:
        if self._reminder_timer is not None:
            self._reminder_timer.cancel()
            self._reminder_timer = None

    def _cancel_timers(self) -> None:
        self._cancel_countdown()
        self._cancel_reminder_timer()

    def _set_phase(self, new_phase: str) -> None:
        """Set the phase and trigger callback."""
        old_phase = self._phase
        self._phase = new_phase

        if old_phase != new_phase:
            logger.debug(f"Phase {old_phase} -> {new_phase}")
            self._emit(self.on_phase_change, new_phase)

    def _query_frontmost_app(self) -> Optional[str]:
        if self.frontmost_app is None:
            return None
        try:
            return self.frontmost_app()
        except Exception as e:
            logger.warning(f"Could not read frontmost app, not skipping reminder: {e}")
            return None

    def _emit(self, callback: Optional[Callable], *args) -> None:
        """Queue an event; it is delivered after the lock is released."""
        if callback:
            self._pending.append((callback, args))

    # ------------------------------------------------------------------
    # Event delivery
    # ------------------------------------------------------------------

    @contextmanager
    def _locked(self) -> Iterator[None]:
        """Hold the lock, then deliver queued events once fully released."""
        with self._lock:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
                outermost = self._depth == 0
        if outermost:
            self._deliver_events()

    def _deliver_events(self) -> None:
        """
        Run queued callbacks in order, outside the lock.

        Only one thread delivers at a time. Another thread that finds delivery
        under way leaves its events in the queue and returns at once; the
        delivering thread picks them up before it stops.
        """
        with self._lock:
            if self._delivering:
                return
            self._delivering = True

        try:
            while True:
                with self._lock:
                    if not self._pending:
                        self._delivering = False
                        return
                    callback, args = self._pending.popleft()

                try:
                    callback(*args)
                except Exception:
                    logger.exception(f"Event callback {getattr(callback, '__name__', callback)} raised")
        except BaseException:
            with self._lock:
                self._delivering = False
            raise
