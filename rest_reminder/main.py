"""
Entry point for Rest Reminder (macOS).
Sets up logging and starts the menu bar application.
"""

import argparse

from rest_reminder.data.config import Config
from rest_reminder.utils.constants import APP_VERSION, CONFIG_FILE, LOG_FILE
from rest_reminder.utils.logger import setup_logging


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=f"Menu bar break reminder. Config: '{CONFIG_FILE}', Log: '{LOG_FILE}'.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("--log-file", type=str,
                        default=str(LOG_FILE), help="Path to log file.")
    parser.add_argument("--verbose", action="store_true",
                        help="Enable verbose output to console.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)

    # Load configuration
    config = Config.load()

    # Imported here so --help works without a display
    from rest_reminder.app import RestReminderApp

    # Create and run the application
    app = RestReminderApp(config)
    app.run()


if __name__ == "__main__":
    main()
