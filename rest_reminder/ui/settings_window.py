"""
Settings window for Rest Reminder.
"""

import ttkbootstrap as ttk
from ttkbootstrap.constants import *
from tkinter import TclError, messagebox
from typing import Any, Callable, Dict

from rest_reminder.data.config import Config
from rest_reminder.utils.logger import logger


def changed_settings(original: Dict[str, Any], current: Dict[str, Any]) -> Dict[str, Any]:
    """Return the entries of `current` the user actually edited."""
    return {name: value for name, value in current.items() if original.get(name) != value}


class SettingsWindow:
    """
    Settings dialog for the reminder interval and app blocklist switch.
    """

    def __init__(
        self,
        parent: ttk.Window,
        config: Config,
        on_save: Callable[[Dict[str, Any]], None],
        on_reset: Callable,
        on_toggle_pause: Callable,
        on_quit: Callable,
        is_paused: Callable[[], bool],
    ):
        """
        Initialize the settings window.

        Args:
            parent: Parent window
            config: Current configuration
            on_save: Callback with the edited fields only, when saved
            on_reset: Callback to restart the countdown
            on_toggle_pause: Callback to pause or resume the countdown
            on_quit: Callback to exit application
            is_paused: Returns True while the countdown is paused
        """
        self.parent = parent
        self.config = config.copy()
        self.on_save = on_save
        self.on_reset = on_reset
        self.on_toggle_pause = on_toggle_pause
        self.on_quit = on_quit
        self.is_paused = is_paused

        # Store original values to detect changes
        self._original_values = {
            'reminder_interval_minutes': config.reminder_interval_minutes,
            'blocking_enabled': config.blocking_enabled,
        }

        self._setup_dialog()

    def _setup_dialog(self) -> None:
        """Set up the dialog UI."""
        self.dialog = ttk.Toplevel(self.parent)
        self.dialog.title("Rest Reminder Settings")
        self.dialog.resizable(False, False)
        self.dialog.attributes("-topmost", True)

        # Handle window close button (X)
        self.dialog.protocol("WM_DELETE_WINDOW", self._on_close)

        main_frame = ttk.Frame(self.dialog, padding=20)
        main_frame.pack(fill=BOTH, expand=YES)

        # Reminder Settings Section
        ttk.Label(
            main_frame,
            text="Reminder Settings",
            font=("Helvetica", 14, "bold")
        ).pack(anchor=W, pady=(0, 10))

        timer_frame = ttk.Labelframe(main_frame, text="Interval", padding=10)
        timer_frame.pack(fill=X, pady=(0, 20))

        interval_frame = ttk.Frame(timer_frame)
        interval_frame.pack(fill=X, pady=5)

        ttk.Label(interval_frame, text="Remind me every (minutes):").pack(side=LEFT)
        self.interval_var = ttk.IntVar(value=self.config.reminder_interval_minutes)
        ttk.Spinbox(
            interval_frame,
            from_=1,
            to=240,
            textvariable=self.interval_var,
            width=10
        ).pack(side=RIGHT)

        # Blocking Section
        ttk.Label(
            main_frame,
            text="App Blocklist",
            font=("Helvetica", 14, "bold")
        ).pack(anchor=W, pady=(10, 10))

        blocking_frame = ttk.Labelframe(main_frame, text="Skip reminders", padding=10)
        blocking_frame.pack(fill=X, pady=(0, 20))

        self.blocking_var = ttk.BooleanVar(value=self.config.blocking_enabled)
        ttk.Checkbutton(
            blocking_frame,
            text="Skip reminders while a blocked app is in front",
            variable=self.blocking_var,
            bootstyle="round-toggle"
        ).pack(anchor=W, pady=5)

        count = len(self.config.blocked_apps)
        ttk.Label(
            blocking_frame,
            text=f"{count} app(s) on the blocklist",
            font=("Helvetica", 9),
            bootstyle="secondary"
        ).pack(anchor=W, pady=(0, 5))

        # Timer controls
        controls_frame = ttk.Frame(main_frame)
        controls_frame.pack(fill=X, pady=(0, 10))

        ttk.Button(
            controls_frame,
            text="Reset Timer",
            command=self.on_reset,
            bootstyle="info-outline",
            width=12
        ).pack(side=LEFT)

        self.pause_btn = ttk.Button(
            controls_frame,
            text="Resume" if self.is_paused() else "Pause",
            command=self._on_toggle_pause_click,
            bootstyle="warning-outline",
            width=12
        )
        self.pause_btn.pack(side=LEFT, padx=10)

        ttk.Button(
            controls_frame,
            text="Quit",
            command=self._on_quit_click,
            bootstyle="danger-outline",
            width=12
        ).pack(side=RIGHT)

        # Buttons
        buttons_frame = ttk.Frame(main_frame)
        buttons_frame.pack(fill=X, pady=(20, 0))

        ttk.Button(
            buttons_frame,
            text="Cancel",
            command=self._on_close,
            bootstyle="secondary",
            width=12
        ).pack(side=LEFT)

        ttk.Button(
            buttons_frame,
            text="Save",
            command=self._on_save,
            bootstyle="success",
            width=12
        ).pack(side=RIGHT)

        # Finalize dialog - MUST be done AFTER all widgets are created
        self.dialog.update_idletasks()

        # Center on the screen (the root window stays hidden)
        width = 420
        height = 400
        x = (self.dialog.winfo_screenwidth() - width) // 2
        y = (self.dialog.winfo_screenheight() - height) // 2
        self.dialog.geometry(f"{width}x{height}+{x}+{y}")

        self.dialog.lift()
        self.dialog.focus_force()

    def _get_current_values(self) -> dict:
        """Get current values from UI widgets."""
        # Force spinbox values to update by focusing away
        self.dialog.focus_set()

        return {
            'reminder_interval_minutes': self.interval_var.get(),
            'blocking_enabled': self.blocking_var.get(),
        }

    def _has_unsaved_changes(self) -> bool:
        """Check if there are unsaved changes."""
        try:
            current = self._get_current_values()
        except TclError:
            # Spinbox holds something that is not a number
            return True
        return current != self._original_values

    def _on_toggle_pause_click(self) -> None:
        self.on_toggle_pause()
        self.pause_btn.configure(text="Resume" if self.is_paused() else "Pause")

    def _on_quit_click(self) -> None:
        self.dialog.destroy()
        self.on_quit()

    def _on_close(self) -> None:
        """Handle window close (X button or Cancel)."""
        if self._has_unsaved_changes():
            result = messagebox.askyesnocancel(
                "Unsaved Changes",
                "You have unsaved changes. Do you want to save before closing?",
                parent=self.dialog
            )
            if result is True:  # Yes - save and close
                self._on_save()
            elif result is False:  # No - discard and close
                self.dialog.destroy()
            # None (Cancel) - do nothing, stay open
        else:
            self.dialog.destroy()

    def _on_save(self) -> None:
        """Handle save button click."""
        try:
            values = self._get_current_values()
            self.config = self.config.with_changes(values)
            self.config.validate()
        except (TclError, ValueError):
            messagebox.showerror(
                "Invalid Interval",
                "The reminder interval must be a whole number of minutes (at least 1).",
                parent=self.dialog
            )
            return

        changes = changed_settings(self._original_values, values)
        if changes:
            self.on_save(changes)
            logger.info(f"Settings saved: {changes}")

        self.dialog.destroy()
