"""
Frontmost application lookup for Rest Reminder (macOS).
Uses NSWorkspace API to read the bundle identifier of the active app.
"""

from typing import Optional

from rest_reminder.utils.logger import logger


class FrontmostAppDetector:
    """
    Reports which application is currently in front.
    Falls back to "unknown" (None) when AppKit is not available.
    """

    def __init__(self):
        self._available = True

        try:
            from AppKit import NSWorkspace
            self._NSWorkspace = NSWorkspace
        except ImportError:
            logger.warning("AppKit not available - app blocklist disabled")
            self._available = False

    def get_frontmost_app_id(self) -> Optional[str]:
        """
        Get the bundle identifier of the frontmost application.

        Returns:
            Bundle identifier (e.g., "com.apple.Safari") or None if unavailable
        """
        if not self._available:
            return None

        try:
            app = self._NSWorkspace.sharedWorkspace().frontmostApplication()
            if app is None:
                return None
            return app.bundleIdentifier()
        except Exception as e:
            logger.debug(f"Frontmost app lookup failed: {e}")
            return None

    def is_available(self) -> bool:
        """Check if frontmost app detection works on this system."""
        return self._available
