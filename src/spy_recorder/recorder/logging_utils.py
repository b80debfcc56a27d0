"""Logging helpers for the spy recorder."""

from __future__ import annotations

import logging


class LoggingManager:
    """Manage spy recorder logging configuration and messages."""

    def __init__(self, logger_name: str = "spy_recorder") -> None:
        self.logger = logging.getLogger(logger_name)
        self.logger.propagate = False

    def setup(self, verbose: bool) -> None:
        """Configure console logging at INFO, or DEBUG when verbose."""
        level = logging.DEBUG if verbose else logging.INFO

        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))

        self.logger.handlers.clear()
        self.logger.addHandler(console)
        self.logger.setLevel(level)

    def log(self, msg: str, *args: object) -> None:
        """Log an informational message."""
        self.logger.info(msg, *args)

    def debug(self, msg: str, *args: object) -> None:
        """Log a debug message."""
        self.logger.debug(msg, *args)


DEFAULT_LOGGER = LoggingManager()
