# logger.py
"""Logging utilities for the pteropower client."""

import logging
import threading
import time
from typing import Optional, Union

class SmartLogger:
    """Logging helper that gets more verbose while dispatches keep failing.

    Failure tracking is shared by every caller of one client, so it is
    guarded by a lock; log calls happen outside it.
    """

    def __init__(self, logger: Union[logging.Logger, str, None] = None,
                 failure_threshold: int = 3, failure_window: float = 300):
        if logger is None:
            logger = logging.getLogger("pteropower")
        elif isinstance(logger, str):
            logger = logging.getLogger(logger)
        self._logger = logger
        self._failure_count = 0
        self._last_failure_time = 0.0
        self._failure_threshold = failure_threshold
        self._failure_window = failure_window  # seconds
        self._lock = threading.Lock()

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def failure_count(self) -> int:
        return self._failure_count

    def _should_log_verbose(self) -> bool:
        """Determine if we should log verbose information."""
        with self._lock:
            if time.time() - self._last_failure_time > self._failure_window:
                self._failure_count = 0
            return self._failure_count >= self._failure_threshold

    def failure(self, msg: str, *args, exc: Optional[BaseException] = None, **kwargs):
        """Log a failed dispatch as a warning and track the failure burst."""
        with self._lock:
            current_time = time.time()
            if current_time - self._last_failure_time > self._failure_window:
                self._failure_count = 0
            self._failure_count += 1
            self._last_failure_time = current_time
            verbose = self._failure_count >= self._failure_threshold

        if exc is not None and verbose:
            kwargs.setdefault("exc_info", exc)
        self._logger.warning(msg, *args, **kwargs)

    def success(self, msg: str, *args, **kwargs):
        """Log a successful dispatch and reset failure tracking."""
        with self._lock:
            self._failure_count = 0
        self._logger.info(msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs):
        """Only emitted while failures are piling up."""
        if self._should_log_verbose():
            self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        self._logger.warning(msg, *args, **kwargs)

def setup_logging(log_level="INFO", log_format=None):
    """Configure root logging."""
    if log_format is None:
        log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=log_format
    )
