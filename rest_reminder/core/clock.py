"""
Repeating one-second timer used to drive the reminder countdown.
"""

import threading
from typing import Callable, Optional

from rest_reminder.utils.constants import TICK_INTERVAL_SECONDS
from rest_reminder.utils.logger import logger


class RepeatingTimer:
    """
    Fires a callback every `interval` seconds on a daemon thread.

    Callbacks run while holding `lock` (a private one unless given), so only
    one callback is in flight at a time. The cancel flag is re-checked under
    that lock before every call; once `cancel()` returns on a thread holding
    the lock, the callback will not run again. Owners that deliver events
    from the callback should not pass a lock their other threads take.
    """

    def __init__(
        self,
        interval: float,
        callback: Callable[[], None],
        lock: Optional[threading.RLock] = None,
        name: str = "RepeatingTimer",
    ):
        """
        Initialize the timer.

        Args:
            interval: Seconds between callbacks
            callback: Called once per interval
            lock: Lock held while the callback runs
            name: Thread name, shows up in logs and debuggers
        """
        self.interval = interval
        self.callback = callback
        self.name = name

        self._lock = lock if lock is not None else threading.RLock()
        self._cancelled = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        """Start firing. Calling start twice has no effect."""
        if self._thread is not None or self._cancelled.is_set():
            return

        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()

    def cancel(self) -> None:
        """Stop firing. Safe to call from inside the callback."""
        self._cancelled.set()

    @property
    def is_active(self) -> bool:
        """True while started and not cancelled."""
        return self._thread is not None and not self._cancelled.is_set()

    def _run(self) -> None:
        """Timer thread main loop."""
        while not self._cancelled.wait(self.interval):
            with self._lock:
                if self._cancelled.is_set():
                    break

                try:
                    self.callback()
                except Exception:
                    logger.exception(f"{self.name}: callback raised")


def make_tick_timer(
    callback: Callable[[], None],
    lock: Optional[threading.RLock] = None,
    name: str = "RepeatingTimer",
) -> RepeatingTimer:
    """Create a timer firing at the standard tick interval."""
    return RepeatingTimer(TICK_INTERVAL_SECONDS, callback, lock=lock, name=name)
