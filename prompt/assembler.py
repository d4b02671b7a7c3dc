"""
PromptAssembler for building impersonation prompts.

This module provides the PromptAssembler class that turns a preset, a chat
context and an optional idea into a system prompt and a user prompt. It
never calls the generation backend; for a fixed preset and chat snapshot the
output is deterministic.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from errors import NoContextError
from presets.models import PresetBundle
from storage.interfaces import ChatContext
from .resolver import PlaceholderResolver, embeds_style_placeholders
from .templates import (
    CONVERSATION_HEADER,
    IDEA_HEADER,
    INSTRUCTION_HEADER,
    SECTION_SEPARATOR,
    format_next_speaker_line,
    format_section,
)
from .windower import ConversationWindower

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationRequest:
    """Prompts and length limit for one generation call"""
    system_prompt: str
    user_prompt: str
    response_length: Optional[int] = None


class PromptAssembler:
    """
    Assembles impersonation prompts.

    System prompt order: resolved template, persona section, character
    section, additional instructions, style summary. The style summary is
    only added when the template has no {{pov}}/{{length}} of its own.
    """

    def build_prompt(
        self,
        bundle: PresetBundle,
        context: Optional[ChatContext],
        idea: str = None
    ) -> GenerationRequest:
        """
        Build the prompts for one impersonation.

        Args:
            bundle: Active preset (working copy)
            context: Current chat snapshot
            idea: Optional free-form idea the reply should develop

        Returns:
            GenerationRequest with both prompts and the response length

        Raises:
            NoContextError: If there is no conversation or it has no turns
        """
        request, _ = self.build_prompt_and_metadata(bundle, context, idea)
        return request

    def build_prompt_and_metadata(
        self,
        bundle: PresetBundle,
        context: Optional[ChatContext],
        idea: str = None
    ) -> Tuple[GenerationRequest, Dict[str, Any]]:
        """
        Build the prompts along with details of what went into them.

        Returns:
            Tuple of (request, metadata) where metadata holds the preset name,
            the number of windowed turns and which optional sections were added

        Raises:
            NoContextError: If there is no conversation or it has no turns
        """
        if context is None or not context.turns:
            logger.warning("No chat context available")
            raise NoContextError()

        resolver = PlaceholderResolver(bundle, context)

        # 1. System prompt
        sections = [resolver.resolve(bundle.system_prompt)]

        persona = resolver.persona_section()
        character = resolver.character_section()
        instruction = format_section(INSTRUCTION_HEADER, resolver.resolve(bundle.instruction))
        style = "" if embeds_style_placeholders(bundle.system_prompt) else resolver.style_summary()

        sections.extend([persona, character, instruction, style])
        system_prompt = SECTION_SEPARATOR.join(section for section in sections if section)

        # 2. Conversation window
        windower = ConversationWindower(context.user_display_name)
        selected = windower.select(context.turns, bundle.context_size)
        transcript = windower.build_transcript(context.turns, bundle.context_size)

        # 3. User prompt
        user_sections = []
        if transcript:
            user_sections.append(f"{CONVERSATION_HEADER}\n\n{transcript}")
        if idea:
            user_sections.append(format_section(IDEA_HEADER, resolver.substitute(idea)))
        user_sections.append(format_next_speaker_line(context.user_display_name))
        user_prompt = SECTION_SEPARATOR.join(section for section in user_sections if section)

        request = GenerationRequest(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            response_length=bundle.max_tokens if bundle.max_tokens > 0 else None,
        )

        metadata = {
            "preset": bundle.name,
            "turns_included": len(selected),
            "turns_total": len(context.turns),
            "persona_included": bool(persona),
            "character_included": bool(character),
            "instruction_included": bool(instruction),
            "style_summary_included": bool(style),
            "response_length": request.response_length,
        }

        logger.info("Built impersonation prompt with %d messages, POV: %s, Style: %s",
                    len(selected), bundle.pov, bundle.response_style)
        return request, metadata


# Export public API
__all__ = [
    'PromptAssembler',
    'GenerationRequest',
]
