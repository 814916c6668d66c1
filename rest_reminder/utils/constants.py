"""
Application-wide constants for Rest Reminder (macOS).
"""

from pathlib import Path

# App info
APP_NAME = "RestReminder"
APP_VERSION = "1.0.0"

# Paths
APP_DATA_DIR = Path.home() / "Library" / "Application Support" / APP_NAME
CONFIG_FILE = APP_DATA_DIR / "config.json"
LOG_FILE = APP_DATA_DIR / "rest_reminder.log"

# Timer defaults
DEFAULT_REMINDER_INTERVAL_MINUTES = 30
TICK_INTERVAL_SECONDS = 1
REMINDER_TIMEOUT_SECONDS = 300  # Overlay closes itself after 5 minutes

# Interval choices offered in the menu bar submenu
INTERVAL_PRESETS = (5, 10, 15, 20, 25, 30, 45, 60)

# Quote of the day
QUOTE_API_URL = "https://v1.hitokoto.cn/"
QUOTE_REQUEST_TIMEOUT = 10  # seconds
DEFAULT_QUOTE = "Take a breath. The work will still be here in five minutes."

# Theme
DEFAULT_THEME = "darkly"


# Reminder phases
class ReminderPhase:
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    REMINDING = "reminding"
    STOPPED = "stopped"
