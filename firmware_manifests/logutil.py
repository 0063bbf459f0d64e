"""Logging setup shared by the command line entry point."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


class BlankLineFormatter(logging.Formatter):
    """Render empty records as empty lines so batch logs keep separators."""

    def format(self, record: logging.LogRecord) -> str:
        if record.getMessage() == "":
            return ""
        return super().format(record)


def configure_logging(verbose: bool = False) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(BlankLineFormatter(LOG_FORMAT))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        handlers=[handler],
        force=True,
    )


def log_skip(logger: logging.Logger, message: str, *args, level: int = logging.WARNING) -> None:
    """Log why something was skipped, followed by a blank separator line."""
    logger.log(level, message, *args)
    logger.log(level, "")
