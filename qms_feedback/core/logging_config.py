"""Logging setup for the feedback client.

Usage:
    from qms_feedback.core.logging_config import configure_logging
    configure_logging("DEBUG")

    # In any module:
    import logging
    logger = logging.getLogger(__name__)
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Noisy third-party loggers kept at WARNING unless debugging them
_QUIET_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: str | int = "INFO") -> None:
    """Configure the root logger with a single stream handler."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Replace handlers so repeated calls don't duplicate output
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
