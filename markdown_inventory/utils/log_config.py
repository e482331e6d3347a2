"""
Logging setup.

Progress and success messages go to stdout; warnings and errors go to
stderr so they can be redirected separately.
"""

import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<level>{message}</level>"
)


def configure_logging(level: str = "INFO") -> None:
    """Replace loguru's default sink with the stdout/stderr split."""
    level = level.upper()
    warning_no = logger.level("WARNING").no

    logger.remove()
    logger.add(
        sys.stdout,
        format=LOG_FORMAT,
        level=level,
        filter=lambda record: record["level"].no < warning_no,
    )
    logger.add(
        sys.stderr,
        format=LOG_FORMAT,
        level=max(logger.level(level).no, warning_no),
    )
