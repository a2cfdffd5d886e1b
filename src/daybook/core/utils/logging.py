"""Loguru setup for the daybook CLI.

Library modules log through ``loguru.logger`` directly and never configure
it; only the CLI entry point calls :func:`setup_logging`. The console sink
stays quiet by default (warnings and up) because the CLI prints its own
output; the optional file sink records everything for debugging sync.
"""

import sys

from loguru import logger

CONSOLE_FORMAT = "<level>{level: <7}</level> {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <7} | {name}:{function}:{line} | {message}"

# Chatty third-party loggers routed through loguru never reach the console.
_QUIET_PREFIXES = ("googleapiclient", "google_auth_httplib2", "urllib3")


def _console_filter(record) -> bool:
    name = record["name"] or ""
    return not name.startswith(_QUIET_PREFIXES)


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    rotation: str = "5 MB",
    retention: int = 3,
) -> None:
    """
    Replace loguru's default sink with a console sink and an optional file sink.

    Args:
        level: Minimum console level (DEBUG, INFO, WARNING, ERROR).
        log_file: Debug log path. Its directory must already exist.
        rotation: Size at which the log file rotates.
        retention: Number of rotated files to keep.
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=CONSOLE_FORMAT, filter=_console_filter)

    if log_file:
        logger.add(
            log_file,
            level="DEBUG",
            format=FILE_FORMAT,
            rotation=rotation,
            retention=retention,
            encoding="utf-8",
        )
        logger.debug(f"Logging to {log_file}")
