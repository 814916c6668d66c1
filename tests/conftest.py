"""
Shared pytest fixtures.
"""

from pathlib import Path

import pytest

import rest_reminder.data.config as config_mod
from rest_reminder.data.config import Config


class FakeTimer:
    """Stands in for RepeatingTimer; fired by hand from tests."""

    def __init__(self, callback, lock=None, name="FakeTimer"):
        self.callback = callback
        self.lock = lock
        self.name = name
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    @property
    def is_active(self):
        return self.started and not self.cancelled

    def fire(self, times: int = 1):
        for _ in range(times):
            if not self.is_active:
                return
            self.callback()


class FakeTimerFactory:
    """Records every timer the state machine creates."""

    def __init__(self):
        self.created = []

    def __call__(self, callback, lock=None, name="FakeTimer"):
        timer = FakeTimer(callback, lock=lock, name=name)
        self.created.append(timer)
        return timer

    def active(self, name=None):
        return [t for t in self.created if t.is_active and (name is None or t.name == name)]


@pytest.fixture()
def timer_factory():
    return FakeTimerFactory()


@pytest.fixture()
def tmp_config_file(tmp_path: Path, monkeypatch):
    """Redirect config persistence to a temp directory."""
    data_dir = tmp_path / "RestReminder"
    config_file = data_dir / "config.json"
    monkeypatch.setattr(config_mod, "APP_DATA_DIR", data_dir)
    monkeypatch.setattr(config_mod, "CONFIG_FILE", config_file)
    return config_file


@pytest.fixture()
def config():
    return Config(reminder_interval_minutes=1, blocking_enabled=True, blocked_apps=[])
