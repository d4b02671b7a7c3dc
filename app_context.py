"""
Centralized Application Context for Shared Services

This module provides a singleton `AppContext` class that loads the settings
file and wires the generation backend, the notifier and the Impersonator
together, so a host or the CLI builds them only once.
"""

import logging
from typing import Optional

from ai_handler import AIHandler
from config import (
    IMPERSONATOR_ENABLED, IMPERSONATOR_SETTINGS_FILE, IMPERSONATOR_EXPORT_DIR,
    IMPERSONATOR_DEFAULT_PRESET, IMPERSONATOR_REQUEST_TIMEOUT
)
from core.abstractions import Notifier, TextGenerator
from core.notifications import LoggingNotifier
from impersonator import Impersonator
from presets.settings import ImpersonatorSettings
from storage.interfaces import ChatContext, ContextProvider
from storage.settings_file import SettingsFile

logger = logging.getLogger(__name__)


class AppContext:
    """Singleton class to hold all shared application services."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(AppContext, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self.settings_file: Optional[SettingsFile] = None
        self.settings: Optional[ImpersonatorSettings] = None
        self.generator: Optional[TextGenerator] = None
        self.impersonator: Optional[Impersonator] = None
        self._chat_context: Optional[ChatContext] = None

        self._initialized = True
        logger.info("AppContext created but not yet initialized.")

    def set_chat_context(self, chat_context: Optional[ChatContext]) -> None:
        """Replace the chat snapshot the impersonator reads from"""
        self._chat_context = chat_context

    def get_chat_context(self) -> Optional[ChatContext]:
        return self._chat_context

    def initialize(
        self,
        settings_path: str = None,
        generator: TextGenerator = None,
        notifier: Notifier = None,
        context_provider: ContextProvider = None
    ) -> "AppContext":
        """
        Initializes all shared services. This should be called once on application startup.

        Args:
            settings_path: Settings file location (defaults to IMPERSONATOR_SETTINGS_FILE)
            generator: Generation backend (defaults to AIHandler for the configured provider)
            notifier: Notification channel (defaults to LoggingNotifier)
            context_provider: Chat snapshot source (defaults to set_chat_context values)
        """
        if self.impersonator:
            logger.info("AppContext already initialized.")
            return self

        logger.info("Initializing AppContext...")

        # 1. Load settings
        self.settings_file = SettingsFile(settings_path or IMPERSONATOR_SETTINGS_FILE)
        self.settings = ImpersonatorSettings.load(
            self.settings_file.load(),
            default_enabled=IMPERSONATOR_ENABLED,
            default_preset=IMPERSONATOR_DEFAULT_PRESET,
        )

        # 2. Generation backend
        self.generator = generator or AIHandler()

        # 3. Impersonator
        self.impersonator = Impersonator(
            settings=self.settings,
            generator=self.generator,
            context_provider=context_provider or self.get_chat_context,
            notifier=notifier or LoggingNotifier(),
            save_settings=self.settings_file.save,
            timeout=IMPERSONATOR_REQUEST_TIMEOUT or None,
            export_dir=IMPERSONATOR_EXPORT_DIR,
        )

        logger.info("AppContext initialization complete.")
        return self

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton so the next AppContext() starts fresh"""
        cls._instance = None


def get_app_context() -> AppContext:
    """
    Returns the initialized AppContext instance.
    If not initialized, it will initialize it first.
    """
    context = AppContext()
    if not context.impersonator:
        context.initialize()
    return context
