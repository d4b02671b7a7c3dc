"""Abstractions and notifier implementations shared by the impersonator."""

from .abstractions import TextGenerator, Notifier
from .notifications import LoggingNotifier, ConsoleNotifier

__all__ = ['TextGenerator', 'Notifier', 'LoggingNotifier', 'ConsoleNotifier']
