"""
Logging setup for Rest Reminder.
"""

import logging
from pathlib import Path

from rich.logging import RichHandler

from rest_reminder.utils.constants import APP_NAME, LOG_FILE

logger = logging.getLogger(APP_NAME)
logger.setLevel(logging.DEBUG)


class PhaseFormatter(logging.Formatter):
    """Appends the reminder phase and countdown to file records when present."""

    def format(self, record):
        s = super().format(record)
        if hasattr(record, 'phase'):
            s += f" - Phase: {record.phase}"
        if hasattr(record, 'remaining'):
            mins, secs = divmod(int(record.remaining), 60)
            s += f" - Remaining: {mins:02d}:{secs:02d}"
        return s


def setup_logging(log_file_path: Path = LOG_FILE, verbose: bool = False) -> None:
    """
    Attach file and console handlers to the application logger.

    Args:
        log_file_path: Where the debug log is written
        verbose: Show debug records on the console too
    """
    log_file_path = Path(log_file_path)
    log_file_path.parent.mkdir(parents=True, exist_ok=True)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    fh = logging.FileHandler(log_file_path)
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(PhaseFormatter('%(asctime)s - %(levelname)s - %(message)s'))

    rh = RichHandler(
        rich_tracebacks=True,
        show_path=False,
        log_time_format='[%H:%M:%S]'
    )
    rh.setLevel(logging.DEBUG if verbose else logging.INFO)

    logger.addHandler(fh)
    logger.addHandler(rh)
