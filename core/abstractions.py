"""
Core abstractions for the impersonator.

This module defines the abstract base classes (ABCs) for the collaborators
the impersonation core talks to: the text generation backend and the
user-facing notification channel. Different hosts plug in their own
implementations without touching the prompt or preset logic.
"""

from abc import ABC, abstractmethod
from typing import Optional


class TextGenerator(ABC):
    """
    Abstract base class for a text generation backend.
    """

    @abstractmethod
    async def generate(self, prompt: str, system_prompt: str, response_length: Optional[int] = None) -> str:
        """
        Generate text for a single prompt pair.

        Args:
            prompt: The user prompt.
            system_prompt: The system prompt.
            response_length: Maximum response tokens, or None for no limit.

        Returns:
            The generated text. May be empty.
        """
        pass


class Notifier(ABC):
    """
    Abstract base class for user-visible notifications.
    """

    @abstractmethod
    def info(self, message: str) -> None:
        pass

    @abstractmethod
    def success(self, message: str) -> None:
        pass

    @abstractmethod
    def warning(self, message: str) -> None:
        pass

    @abstractmethod
    def error(self, message: str) -> None:
        pass
