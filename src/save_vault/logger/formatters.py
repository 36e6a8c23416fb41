"""Logging formatters for console output.

- ColoredConsoleFormatter: Adds ANSI color codes to log levels
- HybridConsoleFormatter: Uses simple format for INFO, structured for others
"""

import logging

from save_vault.constants import LOG_COLORS


class ColoredConsoleFormatter(logging.Formatter):
    """Console formatter with ANSI color support for different log levels."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with a colored level name.

        The record's levelname is swapped only for the duration of the
        call so other handlers see the original value.
        """
        if record.levelname in LOG_COLORS:
            color = LOG_COLORS[record.levelname]
            reset = LOG_COLORS["RESET"]
            original_levelname = record.levelname
            record.levelname = f"{color}{record.levelname}{reset}"
            try:
                return super().format(record)
            finally:
                record.levelname = original_levelname

        return super().format(record)


class HybridConsoleFormatter(logging.Formatter):
    """Console formatter with simple format for INFO, structured for others.

    INFO messages are user-facing command output and are shown bare.
    DEBUG, WARNING and above carry timestamp, logger name and a colored
    level.

    Example Output:
        INFO:     "Backup created: 20260204_140204_1a2b3c4d"
        WARNING:  "12:30:45 - save_vault - WARNING - Skipping missing path"

    """

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
    ) -> None:
        """Initialize hybrid formatter with structured format template.

        Args:
            fmt: Format string for structured messages
            datefmt: Date format string for timestamps

        """
        super().__init__(fmt, datefmt)
        self._colored_formatter = ColoredConsoleFormatter(fmt, datefmt)

    def format(self, record: logging.LogRecord) -> str:
        """Format log record using simple or structured format by level."""
        if record.levelno == logging.INFO:
            return record.getMessage()
        return self._colored_formatter.format(record)
