"""Queue-fed log handlers.

Backups and restores copy trees in worker threads. Records from every
thread go onto one queue and a single listener thread writes them to the
console and to the rotating log file, so a slow terminal never holds up a
copy.
"""

import logging
import queue
import sys
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path

from save_vault.constants import (
    LOG_BACKUP_COUNT,
    LOG_CONSOLE_DATE_FORMAT,
    LOG_CONSOLE_FORMAT,
    LOG_FILE_DATE_FORMAT,
    LOG_FILE_FORMAT,
    LOG_ROTATION_THRESHOLD_BYTES,
)
from save_vault.logger.formatters import HybridConsoleFormatter


def parse_level(name: str, default: int = logging.INFO) -> int:
    """Map a level name such as "debug" to its number."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else default


class LogPipeline:
    """Console and log-file handlers behind one QueueListener.

    The log file is optional: when it cannot be opened the pipeline runs
    with the console alone and keeps the error in ``file_error`` so the
    caller can report it once logging works.

    Attributes:
        console: Handler writing to stdout
        file: Rotating handler for the log file, or None
        file_error: Why the log file could not be opened

    """

    def __init__(
        self, console_level: str, file_level: str, log_file: Path
    ) -> None:
        self.log_file = log_file
        self.console = logging.StreamHandler(sys.stdout)
        self.console.setFormatter(
            HybridConsoleFormatter(
                LOG_CONSOLE_FORMAT, datefmt=LOG_CONSOLE_DATE_FORMAT
            )
        )

        self.file: RotatingFileHandler | None = None
        self.file_error: OSError | None = None
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            self.file = RotatingFileHandler(
                log_file,
                maxBytes=LOG_ROTATION_THRESHOLD_BYTES,
                backupCount=LOG_BACKUP_COUNT,
                encoding="utf-8",
            )
        except OSError as e:
            self.file_error = e
        else:
            self.file.setFormatter(
                logging.Formatter(LOG_FILE_FORMAT, datefmt=LOG_FILE_DATE_FORMAT)
            )

        self.set_levels(console=console_level, file=file_level)

        self._queue: queue.SimpleQueue[logging.LogRecord] = queue.SimpleQueue()
        self._queue_handler = QueueHandler(self._queue)
        self._listener = QueueListener(
            self._queue, *self.handlers, respect_handler_level=True
        )
        self._attached: logging.Logger | None = None

    @property
    def handlers(self) -> list[logging.Handler]:
        return [h for h in (self.console, self.file) if h is not None]

    def set_levels(
        self, *, console: str | None = None, file: str | None = None
    ) -> None:
        """Change handler thresholds; None leaves a handler as it is."""
        if console is not None:
            self.console.setLevel(parse_level(console))
        if file is not None and self.file is not None:
            self.file.setLevel(parse_level(file))

    def attach(self, logger: logging.Logger) -> None:
        """Send logger's records through the queue and start writing."""
        logger.setLevel(logging.DEBUG)
        logger.propagate = False
        logger.addHandler(self._queue_handler)
        self._attached = logger
        self._listener.start()

    def close(self) -> None:
        """Write every queued record, then release the handlers."""
        if self._attached is None:
            return
        self._attached.removeHandler(self._queue_handler)
        self._attached = None
        # stop() enqueues a sentinel and joins the thread, so earlier
        # records are all handled first.
        self._listener.stop()
        for handler in self.handlers:
            handler.close()
