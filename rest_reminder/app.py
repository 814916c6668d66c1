"""
Main application orchestration for Rest Reminder (macOS).
"""

import ttkbootstrap as ttk
from ttkbootstrap.dialogs import Querybox
from typing import Any, Callable, Dict, Optional

from rest_reminder.core.frontmost import FrontmostAppDetector
from rest_reminder.core.quotes import QuoteProvider
from rest_reminder.core.reminder import ReminderStateMachine
from rest_reminder.data.config import Config
from rest_reminder.ui.reminder_window import ReminderWindow
from rest_reminder.ui.settings_window import SettingsWindow
from rest_reminder.ui.tray_icon import TrayIcon
from rest_reminder.utils.constants import ReminderPhase
from rest_reminder.utils.logger import logger


class RestReminderApp:
    """
    Main application class that wires the reminder timer to the UI.

    Timer events arrive on timer threads; every widget update is handed to
    the Tk main loop with root.after().
    """

    def __init__(self, config: Config):
        """
        Initialize the application.

        Args:
            config: Application configuration
        """
        self.config = config
        self._settings_window: Optional[SettingsWindow] = None
        self._exiting = False

        # Menu bar app - the root window itself is never shown
        self.root = ttk.Window(themename=config.theme)
        self.root.withdraw()

        self._init_quotes()
        self._init_timer()
        self._init_ui()
        self._init_tray()

    def _init_quotes(self) -> None:
        """Initialize the quote of the day."""
        self.quotes = QuoteProvider(on_update=self._on_quote_update)

    def _init_timer(self) -> None:
        """Initialize the reminder state machine."""
        self.frontmost_detector = FrontmostAppDetector()

        self.timer = ReminderStateMachine(
            self.config,
            frontmost_app=self.frontmost_detector.get_frontmost_app_id,
            on_tick=self._on_timer_tick,
            on_phase_change=self._on_phase_change,
            on_reminder_shown=self._on_reminder_shown,
            on_reminder_dismissed=self._on_reminder_dismissed,
            on_reminder_timeout_tick=self._on_reminder_timeout_tick,
            on_reminder_skipped=self._on_reminder_skipped,
        )

    def _init_ui(self) -> None:
        """Initialize the reminder overlay."""
        self.reminder_window = ReminderWindow(
            root=self.root,
            on_continue=self.timer.dismiss,
            on_stop=self.timer.halt,
        )

    def _init_tray(self) -> None:
        """Initialize the menu bar icon."""
        self.tray_icon = TrayIcon(
            on_reset=self._in_main_loop(self.timer.reset_timer),
            on_toggle_pause=self._in_main_loop(self.timer.toggle_pause),
            on_start_break=self._in_main_loop(self.timer.start_break),
            on_set_interval=self._on_set_interval,
            on_custom_interval=self._on_custom_interval,
            on_settings=self._on_settings,
            on_quit=self._on_exit_request,
            get_interval=lambda: self.config.reminder_interval_minutes,
            is_paused=lambda: self.timer.is_paused,
        )

        if self.tray_icon.is_available():
            self.tray_icon.start()
        else:
            # No menu bar icon means no way to reach settings or quit
            self.root.after(0, self._handle_settings)

    # ------------------------------------------------------------------
    # Timer events (timer threads)
    # ------------------------------------------------------------------

    def _on_timer_tick(self, seconds_remaining: int) -> None:
        """Handle timer tick - update the menu bar title."""
        self.root.after(0, lambda s=seconds_remaining: self.tray_icon.update_remaining(s))

    def _on_phase_change(self, new_phase: str) -> None:
        """Handle phase change."""
        self.root.after(0, lambda p=new_phase: self.tray_icon.update_phase(p))

    def _on_reminder_shown(self) -> None:
        """Cover the screen and fetch a fresh quote if the day changed."""
        quote = self.quotes.quote
        self.root.after(0, lambda q=quote: self.reminder_window.show(q))
        self.quotes.refresh_async()

    def _on_reminder_dismissed(self) -> None:
        self.root.after(0, self.reminder_window.hide)

    def _on_reminder_timeout_tick(self, seconds_remaining: int) -> None:
        self.root.after(0, lambda s=seconds_remaining: self.reminder_window.update_countdown(s))

    def _on_reminder_skipped(self, app_id: str) -> None:
        logger.debug(f"Reminder postponed for {app_id}")

    def _on_quote_update(self, quote: str) -> None:
        if self._exiting:
            return
        self.root.after(0, lambda q=quote: self.reminder_window.set_quote(q))

    # ------------------------------------------------------------------
    # Menu actions
    # ------------------------------------------------------------------

    def _in_main_loop(self, command: Callable[[], None]) -> Callable[[], None]:
        """Wrap a menu action so it runs on the Tk main loop, not the tray thread."""
        return lambda: self.root.after(0, command)

    def _on_set_interval(self, minutes: int) -> None:
        """Handle an interval picked from the menu."""
        self.root.after(0, lambda m=minutes: self._apply_interval(m))

    def _apply_interval(self, minutes: int) -> None:
        """Apply a new interval on the main thread."""
        self._apply_config(self.config.with_changes({'reminder_interval_minutes': minutes}))

    def _on_custom_interval(self) -> None:
        """Handle Custom... click."""
        self.root.after(0, self._handle_custom_interval)

    def _handle_custom_interval(self) -> None:
        """Ask for a custom interval on main thread."""
        minutes = Querybox.get_integer(
            prompt="Remind me every (minutes):",
            title="Custom Reminder Interval",
            initialvalue=self.config.reminder_interval_minutes,
            minvalue=1,
            maxvalue=24 * 60,
            parent=self.root,
        )
        if minutes:
            self._apply_interval(minutes)

    def _on_settings(self) -> None:
        """Handle settings click."""
        self.root.after(0, self._handle_settings)

    def _handle_settings(self) -> None:
        """Show settings on main thread."""
        if self._settings_window is not None and self._settings_window.dialog.winfo_exists():
            self._settings_window.dialog.lift()
            self._settings_window.dialog.focus_force()
            return

        self._settings_window = SettingsWindow(
            parent=self.root,
            config=self.config,
            on_save=self._on_settings_save,
            on_reset=self.timer.reset_timer,
            on_toggle_pause=self.timer.toggle_pause,
            on_quit=self._on_exit_request,
            is_paused=lambda: self.timer.is_paused,
        )

    def _on_settings_save(self, changes: Dict[str, Any]) -> None:
        """Handle settings save; only fields edited in the dialog are applied."""
        try:
            updated = self.config.with_changes(changes)
        except ValueError as e:
            logger.warning(f"Rejected settings: {e}")
            return
        self._apply_config(updated)

    def _apply_config(self, config: Config) -> None:
        """Validate, hand to the timer, persist."""
        try:
            self.timer.apply_config(config)
        except ValueError as e:
            logger.warning(f"Rejected settings: {e}")
            return

        self.config = config
        self.config.save()
        self.tray_icon.refresh_menu()

    # ------------------------------------------------------------------
    # Exit
    # ------------------------------------------------------------------

    def _on_exit_request(self) -> None:
        """Handle Quit click."""
        self.root.after(0, self._on_exit)

    def _on_exit(self) -> None:
        """Handle application exit."""
        if self._exiting:
            return
        self._exiting = True

        logger.info("Shutting down")
        self.timer.stop()
        self.reminder_window.destroy()
        self.tray_icon.stop()
        self.config.save()

        # Destroy window
        self.root.quit()
        self.root.destroy()

    def run(self) -> None:
        """Run the application main loop."""
        self.timer.start()
        logger.info(
            f"Rest Reminder started, interval {self.config.reminder_interval_minutes} min",
            extra={'phase': ReminderPhase.RUNNING, 'remaining': self.timer.remaining_seconds},
        )
        self.root.mainloop()
