"""
Run logging - Append each run's log lines to a per-workflow log file.
"""

import os
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional

from loguru import logger

DEFAULT_LOG_DIR = "logs"
LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {message}"


class RunLogger:
    """
    Captures logs during a run into logs/<name>.log.

    Usage:
        with RunLogger("scraper") as run:
            logger.info("Processing...")
        # start/end markers and duration are appended to logs/scraper.log
    """

    def __init__(self, name: str, log_dir: Optional[str] = None, level: str = "DEBUG"):
        """
        Args:
            name: Run name, used as the log file stem (e.g. 'scraper', 'discovery')
            log_dir: Directory for log files (defaults to VENUE_LOG_DIR env var, then ./logs)
            level: Minimum level written to the file
        """
        self.name = name
        self.log_dir = Path(log_dir or os.getenv("VENUE_LOG_DIR", DEFAULT_LOG_DIR))
        self.level = level

        self._handler_id: Optional[int] = None
        self._start_time: Optional[datetime] = None

    @property
    def log_path(self) -> Path:
        return self.log_dir / f"{self.name}.log"

    def __enter__(self) -> "RunLogger":
        self._start_time = datetime.now()

        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            self._handler_id = logger.add(
                str(self.log_path),
                format=LOG_FORMAT,
                level=self.level,
                mode="a",
                encoding="utf-8",
            )
        except OSError as e:
            logger.warning(f"Run log disabled, cannot write {self.log_path}: {e}")

        logger.info(f"=== Run started: {self.name} ===")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = datetime.now() - self._start_time

        if exc_type:
            logger.error(f"Run failed with error: {exc_type.__name__}: {exc_val}")

        logger.info(f"Duration: {duration}")
        logger.info(f"=== Run completed: {self.name} ===")

        if self._handler_id is not None:
            logger.remove(self._handler_id)
            self._handler_id = None

        return False  # Don't suppress exceptions


@contextmanager
def capture_run_logs(name: str, log_dir: Optional[str] = None):
    """
    Context manager to capture a run's logs.

    Usage:
        with capture_run_logs("scraper"):
            logger.info("Processing...")
    """
    with RunLogger(name, log_dir=log_dir) as run:
        yield run
