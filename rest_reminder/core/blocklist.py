"""
Decides whether a due reminder should be skipped because of the app in front.
"""

from typing import Optional

from rest_reminder.data.config import Config


def should_suppress(frontmost_app_id: Optional[str], config: Config) -> bool:
    """
    Check whether the frontmost app blocks reminders.

    Only evaluated when the countdown runs out, not on every tick.

    Args:
        frontmost_app_id: Bundle identifier of the frontmost app, if known
        config: Current configuration

    Returns:
        True if blocking is enabled and the app is on the blocklist
    """
    if not config.blocking_enabled or not frontmost_app_id:
        return False
    return frontmost_app_id in config.blocked_app_ids
