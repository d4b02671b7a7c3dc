"""
Notifier implementations.

LoggingNotifier routes notifications to the standard logger; it is the
default when the host provides no notification channel. ConsoleNotifier
prints them for the command line front-end.
"""

import logging
import sys

from .abstractions import Notifier

logger = logging.getLogger(__name__)

NOTIFICATION_TITLE = "Impersonator"


class LoggingNotifier(Notifier):
    """Sends notifications to the log"""

    def info(self, message: str) -> None:
        logger.info("[%s] %s", NOTIFICATION_TITLE, message)

    def success(self, message: str) -> None:
        logger.info("[%s] %s", NOTIFICATION_TITLE, message)

    def warning(self, message: str) -> None:
        logger.warning("[%s] %s", NOTIFICATION_TITLE, message)

    def error(self, message: str) -> None:
        logger.error("[%s] %s", NOTIFICATION_TITLE, message)


class ConsoleNotifier(Notifier):
    """Prints notifications to stderr so stdout carries only results"""

    def __init__(self, stream=None):
        self.stream = stream or sys.stderr

    def _write(self, level: str, message: str) -> None:
        print(f"[{NOTIFICATION_TITLE}] {level}: {message}", file=self.stream)

    def info(self, message: str) -> None:
        self._write("info", message)

    def success(self, message: str) -> None:
        self._write("ok", message)

    def warning(self, message: str) -> None:
        self._write("warning", message)

    def error(self, message: str) -> None:
        self._write("error", message)
