"""Tests for the settings dialog's save logic (no window is created)."""

from rest_reminder.data.config import Config
from rest_reminder.ui.settings_window import changed_settings


class TestChangedSettings:
    def test_untouched_dialog_reports_nothing(self):
        original = {'reminder_interval_minutes': 30, 'blocking_enabled': True}
        assert changed_settings(original, dict(original)) == {}

    def test_reports_only_edited_fields(self):
        original = {'reminder_interval_minutes': 30, 'blocking_enabled': True}
        current = {'reminder_interval_minutes': 30, 'blocking_enabled': False}
        assert changed_settings(original, current) == {'blocking_enabled': False}

    def test_save_keeps_interval_picked_from_menu(self):
        # Dialog opened at 30 min, then 45 was picked from the menu bar
        opened_with = {'reminder_interval_minutes': 30, 'blocking_enabled': True}
        saved = {'reminder_interval_minutes': 30, 'blocking_enabled': False}
        current = Config(reminder_interval_minutes=45, blocking_enabled=True)

        updated = current.with_changes(changed_settings(opened_with, saved))

        assert updated.reminder_interval_minutes == 45
        assert updated.blocking_enabled is False

    def test_edited_interval_wins(self):
        opened_with = {'reminder_interval_minutes': 30, 'blocking_enabled': True}
        saved = {'reminder_interval_minutes': 20, 'blocking_enabled': True}
        current = Config(reminder_interval_minutes=45)

        updated = current.with_changes(changed_settings(opened_with, saved))

        assert updated.reminder_interval_minutes == 20
