from __future__ import annotations

import logging
import os
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_BYTES = 50 * 1024 * 1024

APP_LOGGER = "title_bot"
AUDIT_LOGGER = "title_bot.audit"

# logger name, file under the logs dir, days kept, minimum level
LOG_FILES = (
    (APP_LOGGER, "app.log", 14, logging.INFO),
    (APP_LOGGER, "error.log", 30, logging.WARNING),
    (AUDIT_LOGGER, "audit.log", 90, logging.INFO),
)


class SizeAndTimeRotatingFileHandler(TimedRotatingFileHandler):
    """Rotate at midnight, or earlier once the file would pass ``MAX_BYTES``."""

    def __init__(self, filename: Path, backup_count: int) -> None:
        filename.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(filename, when="midnight", backupCount=backup_count, encoding="utf-8")

    def shouldRollover(self, record: logging.LogRecord) -> int:  # noqa: N802 - signature from base class
        if super().shouldRollover(record):
            return 1
        if self.stream is None:
            self.stream = self._open()
        pending = len(self.format(record).encode("utf-8"))
        return int(self.stream.tell() + pending >= MAX_BYTES)


def _has_file_handler(logger: logging.Logger, path: Path) -> bool:
    target = os.path.abspath(path)
    return any(getattr(handler, "baseFilename", None) == target for handler in logger.handlers)


def setup_logging(logs_dir: Path) -> None:
    """Send bot logs to the console and to rotating files in ``logs_dir``.

    Calling it again with the same directory does not duplicate handlers.
    Audit records go to ``audit.log`` only.
    """
    logs_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, datefmt=DATE_FORMAT)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    for name, filename, backup_count, level in LOG_FILES:
        logger = logging.getLogger(name)
        logger.setLevel(logging.INFO)
        path = logs_dir / filename
        if _has_file_handler(logger, path):
            continue
        handler = SizeAndTimeRotatingFileHandler(path, backup_count=backup_count)
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logging.getLogger(AUDIT_LOGGER).propagate = False
    for noisy in ("apscheduler", "aiogram"):
        logging.getLogger(noisy).setLevel(logging.INFO)
