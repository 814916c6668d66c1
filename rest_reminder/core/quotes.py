"""
Quote of the day shown on the break overlay.
"""

import json
import random
import threading
import urllib.error
import urllib.request
from datetime import date
from typing import Callable, List, Optional, Sequence

from rest_reminder.utils.constants import DEFAULT_QUOTE, QUOTE_API_URL, QUOTE_REQUEST_TIMEOUT
from rest_reminder.utils.logger import logger

# Used when the quote service cannot be reached
BACKUP_QUOTES: List[str] = [
    "Action is the ladder to success; the more you act, the higher you climb.",
    "The secret of success is constancy to purpose. -- Benjamin Disraeli",
    "Every effort brings you closer; every drop of sweat waters an opportunity.",
    "What you give today is what you reap tomorrow.",
    "Don't look for excuses to fail, look for ways to succeed.",
    "Your fate is in your own hands.",
    "Nothing is impossible, only unimagined.",
    "Success comes from persistence; dedication creates miracles.",
    "A little progress each day brings success a little closer.",
    "Dreams never abandon those who keep chasing them.",
]


class QuoteProvider:
    """
    Keeps one quote per day, fetched from a quote API.
    Falls back to a local list when the API is unavailable.
    """

    def __init__(
        self,
        api_url: str = QUOTE_API_URL,
        timeout: float = QUOTE_REQUEST_TIMEOUT,
        on_update: Optional[Callable[[str], None]] = None,
        backup_quotes: Sequence[str] = BACKUP_QUOTES,
        today: Callable[[], date] = date.today,
    ):
        """
        Initialize the quote provider.

        Args:
            api_url: JSON endpoint returning {"hitokoto", "from", "from_who"}
            timeout: Request timeout in seconds
            on_update: Called with the new quote after every refresh
            backup_quotes: Quotes used when fetching fails
            today: Returns the current date
        """
        self.api_url = api_url
        self.timeout = timeout
        self.on_update = on_update
        self.backup_quotes = list(backup_quotes)
        self._today = today

        self._quote = DEFAULT_QUOTE
        self._last_update: Optional[date] = None
        self._loading = False
        self._lock = threading.Lock()

    @property
    def quote(self) -> str:
        return self._quote

    @property
    def last_update(self) -> Optional[date]:
        return self._last_update

    def needs_update(self) -> bool:
        """True unless the quote was already refreshed today."""
        return self._last_update != self._today()

    def refresh_async(self) -> bool:
        """
        Refresh in a background thread if needed.

        Returns:
            True if a refresh was started
        """
        with self._lock:
            if self._loading or not self.needs_update():
                return False
            self._loading = True

        thread = threading.Thread(target=self._refresh_in_background, name="QuoteRefresh", daemon=True)
        thread.start()
        return True

    def refresh(self) -> str:
        """Fetch a new quote now, falling back to a backup quote on failure."""
        try:
            quote = self.fetch_quote()
        except (urllib.error.URLError, OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Quote fetch failed, using a backup quote: {e}")
            quote = random.choice(self.backup_quotes) if self.backup_quotes else DEFAULT_QUOTE

        with self._lock:
            self._quote = quote
            self._last_update = self._today()

        logger.debug(f"Quote updated: {quote}")
        if self.on_update:
            self.on_update(quote)
        return quote

    def fetch_quote(self) -> str:
        """
        Request one quote from the API.

        Raises:
            urllib.error.URLError: On network or HTTP errors
            ValueError: If the response is not valid JSON or has no text
        """
        req = urllib.request.Request(self.api_url, headers={"Accept": "application/json"})
        with urllib.request.urlopen(req, timeout=self.timeout) as resp:
            data = json.loads(resp.read().decode())

        text = (data.get("hitokoto") or "").strip()
        if not text:
            raise ValueError("Quote response has no text")

        source = data.get("from") or data.get("from_who")
        if source:
            return f"{text} -- {source}"
        return text

    def _refresh_in_background(self) -> None:
        try:
            self.refresh()
        finally:
            with self._lock:
                self._loading = False
