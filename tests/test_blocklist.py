"""Tests for the foreground-app suppression policy."""

import pytest

from rest_reminder.core.blocklist import should_suppress
from rest_reminder.data.config import Config


def _config(enabled: bool = True, apps=("com.apple.Keynote", "us.zoom.xos")) -> Config:
    return Config(blocking_enabled=enabled, blocked_apps=list(apps))


class TestShouldSuppress:
    def test_blocked_app_in_front_suppresses(self):
        assert should_suppress("com.apple.Keynote", _config()) is True

    def test_other_app_in_front_does_not_suppress(self):
        assert should_suppress("com.apple.Safari", _config()) is False

    def test_blocking_disabled_never_suppresses(self):
        assert should_suppress("com.apple.Keynote", _config(enabled=False)) is False

    @pytest.mark.parametrize("app_id", [None, ""])
    def test_unknown_frontmost_app_never_suppresses(self, app_id):
        assert should_suppress(app_id, _config()) is False

    def test_unknown_app_with_empty_blocklist(self):
        assert should_suppress(None, _config(apps=())) is False

    def test_match_is_exact(self):
        assert should_suppress("com.apple.keynote", _config()) is False
        assert should_suppress("com.apple", _config()) is False

    def test_does_not_mutate_config(self):
        config = _config()
        should_suppress("com.apple.Keynote", config)
        assert config.blocked_apps == ["com.apple.Keynote", "us.zoom.xos"]
        assert config.blocking_enabled is True
