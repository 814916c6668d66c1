"""
Full-screen break reminder overlay.
"""

import ttkbootstrap as ttk
from ttkbootstrap.constants import *
from typing import Callable, Optional

from rest_reminder.core.reminder import format_clock
from rest_reminder.utils.constants import DEFAULT_QUOTE


class ReminderWindow:
    """
    Topmost full-screen overlay asking the user to take a break.
    Created hidden and reused for every reminder.
    """

    def __init__(
        self,
        root: ttk.Window,
        on_continue: Callable,
        on_stop: Callable,
        opacity: float = 0.92,
    ):
        """
        Initialize the overlay.

        Args:
            root: The ttkbootstrap root window
            on_continue: Callback when Continue is clicked (ends the break)
            on_stop: Callback when Stop Timer is clicked
            opacity: Window opacity between 0.0 and 1.0
        """
        self.root = root
        self.on_continue = on_continue
        self.on_stop = on_stop
        self.opacity = opacity

        self.window: Optional[ttk.Toplevel] = None
        self._visible = False
        self._setup_ui()

    def _setup_ui(self) -> None:
        """Set up the overlay widgets."""
        self.window = ttk.Toplevel(self.root)
        self.window.title("Time for a break")
        self.window.withdraw()
        self.window.protocol("WM_DELETE_WINDOW", self._on_continue_click)

        main_frame = ttk.Frame(self.window, padding=40)
        main_frame.pack(fill=BOTH, expand=YES)

        # Centered column
        content = ttk.Frame(main_frame)
        content.place(relx=0.5, rely=0.5, anchor=CENTER)

        ttk.Label(
            content,
            text="Have some water, stretch a little",
            font=("Helvetica", 36, "bold"),
            bootstyle="inverse-dark"
        ).pack(pady=(0, 20))

        self.quote_label = ttk.Label(
            content,
            text=DEFAULT_QUOTE,
            font=("Helvetica", 16, "italic"),
            bootstyle="secondary",
            wraplength=700,
            justify=CENTER
        )
        self.quote_label.pack(pady=(0, 30))

        self.countdown_label = ttk.Label(
            content,
            text="",
            font=("Helvetica", 14),
            bootstyle="info"
        )
        self.countdown_label.pack(pady=(0, 30))

        buttons_frame = ttk.Frame(content)
        buttons_frame.pack()

        ttk.Button(
            buttons_frame,
            text="Continue",
            command=self._on_continue_click,
            bootstyle="success",
            width=14
        ).pack(side=LEFT, padx=10)

        ttk.Button(
            buttons_frame,
            text="Stop Timer",
            command=self._on_stop_click,
            bootstyle="danger-outline",
            width=14
        ).pack(side=LEFT, padx=10)

    def show(self, quote: Optional[str] = None) -> None:
        """Cover the screen. Does nothing if already shown."""
        if self._visible or self.window is None:
            return
        self._visible = True

        if quote:
            self.set_quote(quote)

        self.window.deiconify()
        self.window.attributes("-fullscreen", True)
        self.window.attributes("-topmost", True)
        self.window.attributes("-alpha", self.opacity)
        self.window.lift()
        self.window.focus_force()

    def hide(self) -> None:
        """Remove the overlay."""
        if not self._visible:
            return
        self._visible = False

        self.window.attributes("-fullscreen", False)
        self.window.withdraw()

    def set_quote(self, quote: str) -> None:
        self.quote_label.configure(text=quote)

    def update_countdown(self, seconds: int) -> None:
        """
        Show how long until the overlay closes on its own.

        Args:
            seconds: Seconds left before auto-dismiss
        """
        self.countdown_label.configure(text=f"Closes automatically in {format_clock(seconds)}")

    def destroy(self) -> None:
        """Tear down the overlay for good; later hide() calls do nothing."""
        self._visible = False
        if self.window is not None:
            self.window.destroy()
            self.window = None

    def _on_continue_click(self) -> None:
        self.on_continue()

    def _on_stop_click(self) -> None:
        self.on_stop()
