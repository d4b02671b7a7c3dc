"""
Conversation windowing for impersonation prompts.

Selects the trailing turns of a chat and formats them as a plain transcript.
"""

import logging
from typing import List, Sequence

from storage.interfaces import ConversationTurn
from .templates import TURN_SEPARATOR, format_turn

logger = logging.getLogger(__name__)


class ConversationWindower:
    """Formats the last N eligible chat turns as "<speaker>: <text>" lines"""

    def __init__(self, user_display_name: str):
        """
        Args:
            user_display_name: Label used for every turn sent by the user
        """
        self.user_display_name = user_display_name

    def select(self, turns: Sequence[ConversationTurn], window_size: int) -> List[ConversationTurn]:
        """
        Pick the eligible turns inside the window.

        The window is taken over raw turns first, then system notes and empty
        turns are dropped, so a window may hold fewer than window_size turns.
        Chronological order is preserved.
        """
        if not turns or window_size <= 0:
            return []

        size = min(window_size, len(turns))
        recent = list(turns)[-size:]
        return [turn for turn in recent if not turn.is_system_note and turn.text]

    def speaker_label(self, turn: ConversationTurn) -> str:
        return self.user_display_name if turn.is_from_user else turn.speaker_name

    def build_transcript(self, turns: Sequence[ConversationTurn], window_size: int) -> str:
        """
        Build the transcript string.

        Returns:
            Turns joined by a blank line, or an empty string when none are eligible
        """
        selected = self.select(turns, window_size)
        transcript = TURN_SEPARATOR.join(format_turn(self.speaker_label(turn), turn.text) for turn in selected)
        logger.debug("Windowed %d of %d turns (window=%d)", len(selected), len(turns or []), window_size)
        return transcript


__all__ = ['ConversationWindower']
