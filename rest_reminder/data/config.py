"""
Configuration management for Rest Reminder.
"""

import json
from dataclasses import dataclass, field, fields, asdict, replace
from typing import Any, Dict, FrozenSet, List

from rest_reminder.utils.constants import (
    APP_DATA_DIR,
    CONFIG_FILE,
    DEFAULT_REMINDER_INTERVAL_MINUTES,
    DEFAULT_THEME,
)
from rest_reminder.utils.logger import logger


@dataclass
class Config:
    """Application configuration."""

    # Timer settings
    reminder_interval_minutes: int = DEFAULT_REMINDER_INTERVAL_MINUTES

    # Skip reminders while one of these apps is in front
    blocking_enabled: bool = True
    blocked_apps: List[str] = field(default_factory=list)  # Bundle identifiers, e.g. "com.apple.Keynote"

    # UI settings
    theme: str = DEFAULT_THEME

    @property
    def interval_seconds(self) -> int:
        """Full countdown length in seconds."""
        return self.reminder_interval_minutes * 60

    @property
    def blocked_app_ids(self) -> FrozenSet[str]:
        """Blocked bundle identifiers as a set."""
        return frozenset(self.blocked_apps)

    def validate(self) -> None:
        """
        Check that the configuration can drive the timer.

        Raises:
            ValueError: If the reminder interval is not a positive integer
        """
        interval = self.reminder_interval_minutes
        if isinstance(interval, bool) or not isinstance(interval, int) or interval < 1:
            raise ValueError(
                f"reminder_interval_minutes must be a positive integer, got {interval!r}"
            )
        if not isinstance(self.blocked_apps, list) or not all(
            isinstance(app, str) for app in self.blocked_apps
        ):
            raise ValueError("blocked_apps must be a list of bundle identifiers")

    def copy(self) -> 'Config':
        """Return an independent copy (the blocked app list is not shared)."""
        return replace(self, blocked_apps=list(self.blocked_apps))

    def with_changes(self, changes: Dict[str, Any]) -> 'Config':
        """
        Return a copy with only the given fields replaced.

        Used to merge edits from a dialog that was opened on an older copy,
        so fields changed elsewhere in the meantime are kept.
        """
        known = {f.name for f in fields(self)}
        updated = self.copy()
        for name, value in changes.items():
            if name not in known:
                raise ValueError(f"Unknown setting: {name}")
            setattr(updated, name, value)
        return updated

    def add_blocked_app(self, bundle_id: str) -> bool:
        """
        Add an app to the blocklist.

        Returns:
            True if the app was added, False if it was already blocked
        """
        if bundle_id in self.blocked_apps:
            return False
        self.blocked_apps.append(bundle_id)
        return True

    def remove_blocked_app(self, bundle_id: str) -> bool:
        """
        Remove an app from the blocklist.

        Returns:
            True if the app was blocked before the call
        """
        if bundle_id not in self.blocked_apps:
            return False
        self.blocked_apps = [app for app in self.blocked_apps if app != bundle_id]
        return True

    def is_app_blocked(self, bundle_id: str) -> bool:
        return bundle_id in self.blocked_apps

    def save(self) -> None:
        """Save configuration to file."""
        APP_DATA_DIR.mkdir(parents=True, exist_ok=True)
        with open(CONFIG_FILE, 'w') as f:
            json.dump(asdict(self), f, indent=2)

    @classmethod
    def load(cls) -> 'Config':
        """Load configuration from file, or create default if not exists."""
        if CONFIG_FILE.exists():
            try:
                with open(CONFIG_FILE, 'r') as f:
                    data = json.load(f)
                config = cls(**data)
                config.validate()
                return config
            except (json.JSONDecodeError, TypeError, ValueError) as e:
                logger.warning(f"Invalid config at {CONFIG_FILE}, using defaults: {e}")
                return cls()
        return cls()
