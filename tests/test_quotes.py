"""Tests for the quote of the day provider (network patched out)."""

import json
import threading
import urllib.error
from datetime import date, timedelta
from unittest.mock import MagicMock, patch

import pytest

from rest_reminder.core.quotes import BACKUP_QUOTES, QuoteProvider
from rest_reminder.utils.constants import DEFAULT_QUOTE


def _response(payload) -> MagicMock:
    body = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
    mock_urlopen = MagicMock()
    mock_urlopen.return_value.__enter__.return_value.read.return_value = body
    return mock_urlopen


class FakeToday:
    def __init__(self, day: date):
        self.day = day

    def __call__(self) -> date:
        return self.day


@pytest.fixture()
def today():
    return FakeToday(date(2026, 10, 19))


class TestFetch:
    def test_quote_with_source(self, today):
        provider = QuoteProvider(today=today)
        payload = {"hitokoto": "Rest is part of the work.", "from": "Notebook", "from_who": "Someone"}
        with patch("urllib.request.urlopen", _response(payload)):
            assert provider.refresh() == "Rest is part of the work. -- Notebook"
        assert provider.quote == "Rest is part of the work. -- Notebook"

    def test_quote_falls_back_to_author(self, today):
        provider = QuoteProvider(today=today)
        payload = {"hitokoto": "Stretch.", "from": None, "from_who": "Coach"}
        with patch("urllib.request.urlopen", _response(payload)):
            assert provider.refresh() == "Stretch. -- Coach"

    def test_quote_without_source(self, today):
        provider = QuoteProvider(today=today)
        with patch("urllib.request.urlopen", _response({"hitokoto": "Breathe."})):
            assert provider.refresh() == "Breathe."

    def test_request_uses_timeout(self, today):
        provider = QuoteProvider(api_url="https://quotes.example/", timeout=3, today=today)
        mock_urlopen = _response({"hitokoto": "Breathe."})
        with patch("urllib.request.urlopen", mock_urlopen):
            provider.refresh()
        request = mock_urlopen.call_args[0][0]
        assert request.full_url == "https://quotes.example/"
        assert mock_urlopen.call_args[1]["timeout"] == 3


class TestFallback:
    @pytest.mark.parametrize("error", [
        urllib.error.URLError("offline"),
        TimeoutError("slow"),
    ])
    def test_network_error_uses_backup(self, today, error):
        provider = QuoteProvider(today=today)
        with patch("urllib.request.urlopen", side_effect=error):
            quote = provider.refresh()
        assert quote in BACKUP_QUOTES
        assert provider.last_update == today.day

    def test_bad_json_uses_backup(self, today):
        provider = QuoteProvider(backup_quotes=["Only backup"], today=today)
        with patch("urllib.request.urlopen", _response(b"<html>")):
            assert provider.refresh() == "Only backup"

    def test_empty_text_uses_backup(self, today):
        provider = QuoteProvider(backup_quotes=["Only backup"], today=today)
        with patch("urllib.request.urlopen", _response({"hitokoto": "  "})):
            assert provider.refresh() == "Only backup"

    def test_no_backups_uses_default(self, today):
        provider = QuoteProvider(backup_quotes=[], today=today)
        with patch("urllib.request.urlopen", side_effect=urllib.error.URLError("offline")):
            assert provider.refresh() == DEFAULT_QUOTE


class TestDailyRefresh:
    def test_starts_with_default_quote(self, today):
        provider = QuoteProvider(today=today)
        assert provider.quote == DEFAULT_QUOTE
        assert provider.needs_update()

    def test_no_update_needed_same_day(self, today):
        provider = QuoteProvider(today=today)
        with patch("urllib.request.urlopen", _response({"hitokoto": "Breathe."})):
            provider.refresh()
        assert not provider.needs_update()

        today.day += timedelta(days=1)
        assert provider.needs_update()

    def test_on_update_called(self, today):
        updates = []
        provider = QuoteProvider(on_update=updates.append, today=today)
        with patch("urllib.request.urlopen", _response({"hitokoto": "Breathe."})):
            provider.refresh()
        assert updates == ["Breathe."]

    def test_refresh_async_runs_once_per_day(self, today):
        done = threading.Event()
        provider = QuoteProvider(on_update=lambda q: done.set(), today=today)
        with patch("urllib.request.urlopen", _response({"hitokoto": "Breathe."})):
            assert provider.refresh_async() is True
            assert done.wait(2.0)

        assert provider.quote == "Breathe."
        assert provider.refresh_async() is False

    def test_refresh_async_skips_while_loading(self, today):
        entered = threading.Event()
        release = threading.Event()
        done = threading.Event()
        provider = QuoteProvider(on_update=lambda q: done.set(), today=today)

        def slow_urlopen(*args, **kwargs):
            entered.set()
            release.wait(2.0)
            raise urllib.error.URLError("offline")

        with patch("urllib.request.urlopen", side_effect=slow_urlopen):
            assert provider.refresh_async() is True
            assert entered.wait(2.0)
            assert provider.refresh_async() is False
            release.set()
            assert done.wait(2.0)

        assert provider.quote in BACKUP_QUOTES
