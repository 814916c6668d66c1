"""
Menu bar icon for Rest Reminder.
"""

from typing import Callable, Optional, Sequence
from PIL import Image, ImageDraw

try:
    from pystray import Icon, Menu, MenuItem
    PYSTRAY_AVAILABLE = True
except ImportError:
    PYSTRAY_AVAILABLE = False

from rest_reminder.core.reminder import format_clock
from rest_reminder.utils.constants import APP_NAME, INTERVAL_PRESETS, ReminderPhase
from rest_reminder.utils.logger import logger

PHASE_COLORS = {
    ReminderPhase.RUNNING: "#3498DB",    # Blue
    ReminderPhase.PAUSED: "#F39C12",     # Orange
    ReminderPhase.REMINDING: "#2ECC71",  # Green
    ReminderPhase.IDLE: "#808080",       # Gray
    ReminderPhase.STOPPED: "#808080",
}


class TrayIcon:
    """
    Menu bar icon showing the countdown, with the timer controls in its menu.
    """

    def __init__(
        self,
        on_reset: Callable,
        on_toggle_pause: Callable,
        on_start_break: Callable,
        on_set_interval: Callable[[int], None],
        on_custom_interval: Callable,
        on_settings: Callable,
        on_quit: Callable,
        get_interval: Callable[[], int],
        is_paused: Callable[[], bool],
        presets: Sequence[int] = INTERVAL_PRESETS,
    ):
        """
        Initialize the tray icon.

        Args:
            on_reset: Callback to restart the countdown
            on_toggle_pause: Callback to pause or resume
            on_start_break: Callback to show the reminder now
            on_set_interval: Callback with the chosen interval in minutes
            on_custom_interval: Callback to ask for a custom interval
            on_settings: Callback to show settings
            on_quit: Callback to exit application
            get_interval: Returns the current interval in minutes
            is_paused: Returns True while the countdown is paused
            presets: Interval choices in minutes
        """
        self.on_reset = on_reset
        self.on_toggle_pause = on_toggle_pause
        self.on_start_break = on_start_break
        self.on_set_interval = on_set_interval
        self.on_custom_interval = on_custom_interval
        self.on_settings = on_settings
        self.on_quit = on_quit
        self.get_interval = get_interval
        self.is_paused = is_paused
        self.presets = tuple(presets)

        self._icon: Optional[Icon] = None
        self._current_phase = ReminderPhase.RUNNING

        if PYSTRAY_AVAILABLE:
            self._setup_icon()
        else:
            logger.warning("pystray not available - running without a menu bar icon")

    def _create_icon_image(self, color: str = "#3498DB") -> Image:
        """
        Draw an hourglass icon.

        Args:
            color: Fill color for the sand

        Returns:
            PIL Image object
        """
        size = 64
        image = Image.new("RGBA", (size, size), (0, 0, 0, 0))
        draw = ImageDraw.Draw(image)

        top, bottom = 8, size - 8
        left, right = 14, size - 14
        center = size // 2

        # Glass outline
        draw.line([left, top, right, top], fill="#FFFFFF", width=4)
        draw.line([left, bottom, right, bottom], fill="#FFFFFF", width=4)
        draw.polygon(
            [(left + 2, top + 2), (right - 2, top + 2), (center + 3, center),
             (right - 2, bottom - 2), (left + 2, bottom - 2), (center - 3, center)],
            outline="#FFFFFF",
        )

        # Sand in the lower bulb
        draw.polygon(
            [(center, center + 6), (right - 6, bottom - 4), (left + 6, bottom - 4)],
            fill=color,
        )

        return image

    def _interval_item(self, minutes: int) -> "MenuItem":
        return MenuItem(
            f"{minutes} minutes",
            lambda icon, item: self.on_set_interval(minutes),
            checked=lambda item: self.get_interval() == minutes,
            radio=True,
        )

    def _setup_icon(self) -> None:
        """Set up the menu bar icon."""
        image = self._create_icon_image()

        interval_menu = Menu(
            *[self._interval_item(minutes) for minutes in self.presets],
            Menu.SEPARATOR,
            MenuItem(
                "Custom...",
                self._on_custom_interval_click,
                checked=lambda item: self.get_interval() not in self.presets,
            ),
        )

        menu = Menu(
            MenuItem("Reset Timer", self._on_reset_click),
            MenuItem(
                lambda item: "Resume" if self.is_paused() else "Pause",
                self._on_toggle_pause_click,
            ),
            MenuItem("Take a Break Now", self._on_start_break_click),
            Menu.SEPARATOR,
            MenuItem("Reminder Interval", interval_menu),
            MenuItem("Settings...", self._on_settings_click),
            Menu.SEPARATOR,
            MenuItem("Quit", self._on_quit_click),
        )

        self._icon = Icon(APP_NAME, image, "Rest Reminder", menu)

    def _on_reset_click(self, icon, item) -> None:
        self.on_reset()

    def _on_toggle_pause_click(self, icon, item) -> None:
        self.on_toggle_pause()

    def _on_start_break_click(self, icon, item) -> None:
        self.on_start_break()

    def _on_custom_interval_click(self, icon, item) -> None:
        self.on_custom_interval()

    def _on_settings_click(self, icon, item) -> None:
        self.on_settings()

    def _on_quit_click(self, icon, item) -> None:
        # The app stops the icon once it has shut everything else down
        self.on_quit()

    def start(self) -> None:
        """Show the icon without taking over the main loop (Tk owns it)."""
        if self._icon:
            self._icon.run_detached()

    def stop(self) -> None:
        """Remove the icon."""
        if self._icon:
            self._icon.stop()

    def update_phase(self, phase: str) -> None:
        """
        Recolor the icon for the reminder phase.

        Args:
            phase: Current reminder phase
        """
        self._current_phase = phase

        if not self._icon:
            return

        self._icon.icon = self._create_icon_image(PHASE_COLORS.get(phase, "#808080"))
        self.refresh_menu()

    def update_remaining(self, seconds: int) -> None:
        """
        Show the countdown as the icon title.

        Args:
            seconds: Seconds until the next reminder
        """
        if not self._icon:
            return

        if self._current_phase == ReminderPhase.PAUSED:
            self._icon.title = f"{format_clock(seconds)} (paused)"
        else:
            self._icon.title = format_clock(seconds)

    def refresh_menu(self) -> None:
        """Re-evaluate dynamic menu labels and check marks."""
        if self._icon:
            self._icon.update_menu()

    def is_available(self) -> bool:
        """Check if a menu bar icon can be shown."""
        return PYSTRAY_AVAILABLE
