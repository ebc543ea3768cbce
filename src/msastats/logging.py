"""
Logging configuration for msastats.

Statistic values may be written to stdout, so diagnostics never are. The
console handler writes to stderr: warnings and errors by default, progress
and the sequence weight dump as well in verbose runs. A log file, when
given, receives every INFO record in plain text whatever the console shows.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO, Union

from msastats.exceptions import ConfigurationError

RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[0;90m",
    logging.INFO: "\033[0;32m",
    logging.WARNING: "\033[1;33m",
    logging.ERROR: "\033[0;31m",
    logging.CRITICAL: "\033[0;31m",
}

CONSOLE_FORMAT = "%(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class ColoredFormatter(logging.Formatter):
    """Prefix each record with its bracketed level, colored on a terminal."""

    def __init__(self, fmt: Optional[str] = None, use_colors: bool = False):
        super().__init__(fmt or CONSOLE_FORMAT)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        # Work on a copy so the file handler sees the bare level name
        record = logging.makeLogRecord(record.__dict__)
        label = f"[{record.levelname}]"
        if self.use_colors:
            label = f"{LEVEL_COLORS.get(record.levelno, RESET)}{label}{RESET}"
        record.levelname = label
        return super().format(record)


def setup_logging(
    verbose: bool = False,
    log_file: Optional[Union[str, Path]] = None,
    use_colors: bool = True,
    name: str = "msastats",
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure the msastats logger for one command-line run.

    Handlers from a previous run are closed and replaced.

    Args:
        verbose: Show INFO records (progress, sequence weights) on the console
        log_file: Optional plain-text log receiving INFO and above
        use_colors: Color level names when the console is a terminal
        name: Logger to configure (default: "msastats")
        stream: Console stream (default: sys.stderr)

    Returns:
        Configured logger instance

    Raises:
        ConfigurationError: If the log file cannot be opened
    """
    stream = stream or sys.stderr
    console_level = logging.INFO if verbose else logging.WARNING

    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.INFO if log_file else console_level)

    console_handler = logging.StreamHandler(stream)
    console_handler.setLevel(console_level)
    colors = use_colors and hasattr(stream, "isatty") and stream.isatty()
    console_handler.setFormatter(ColoredFormatter(use_colors=colors))
    logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
        except OSError as e:
            raise ConfigurationError(str(log_file), e.strerror or str(e)) from e
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger
