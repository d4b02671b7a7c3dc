"""
Placeholder resolution for impersonation templates.

Resolution runs in two phases. Phase 1 replaces the style placeholders
({{pov}}, {{length}}) with directive text chosen by the preset. Phase 2
expands domain macros ({{user}}, {{char}}, {{persona}}, {{description}},
{{input}} and any host-supplied macro) in a single regex pass, so a value
inserted by a macro is never scanned again. Phase 1 must come first because
directive text may contain macros of its own.
"""

import logging
import re
from typing import Dict

from presets.models import PresetBundle
from storage.interfaces import ChatContext
from .templates import (
    POV_PLACEHOLDER,
    LENGTH_PLACEHOLDER,
    PERSONA_HEADER,
    CHARACTER_HEADER,
    STYLE_HEADER,
    STYLE_SUMMARY_TEMPLATE,
    format_section,
    pov_directive,
    length_directive,
)

logger = logging.getLogger(__name__)

MACRO_PATTERN = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")
STYLE_PLACEHOLDERS = (POV_PLACEHOLDER, LENGTH_PLACEHOLDER)


def embeds_style_placeholders(template: str) -> bool:
    """True when the template carries its own {{pov}} or {{length}} placeholder"""
    return any(match.group(1).lower() in STYLE_PLACEHOLDERS for match in MACRO_PATTERN.finditer(template or ""))


class PlaceholderResolver:
    """Expands placeholders for one preset against one chat context"""

    def __init__(self, bundle: PresetBundle, context: ChatContext):
        self.bundle = bundle
        self.context = context

    def _style_values(self) -> Dict[str, str]:
        return {
            POV_PLACEHOLDER: pov_directive(self.bundle.pov),
            LENGTH_PLACEHOLDER: length_directive(self.bundle.response_style),
        }

    def _macro_values(self) -> Dict[str, str]:
        context = self.context
        persona = context.persona_text if self.bundle.include_persona else ""
        description = ""
        if self.bundle.include_char_card and context.character:
            description = context.character.description or ""

        # Host macros first so the built-in names cannot be shadowed
        values = dict(context.macros)
        values.update({
            "user": context.user_display_name,
            "char": context.character_name,
            "persona": persona or "",
            "description": description,
            "input": context.input_text or "",
        })
        return values

    def resolve_style(self, text: str) -> str:
        """Phase 1: replace {{pov}} and {{length}} with directive text"""
        if not text:
            return ""
        values = self._style_values()

        def replace(match):
            name = match.group(1).lower()
            return values[name] if name in values else match.group(0)

        return MACRO_PATTERN.sub(replace, text)

    def substitute(self, text: str) -> str:
        """
        Phase 2: expand domain macros in one pass.

        Macros without a value become empty strings. Replacement values are
        not rescanned, so literal braces in persona or input text survive.
        """
        if not text:
            return ""
        values = self._macro_values()

        def replace(match):
            name = match.group(1).lower()
            value = values.get(name)
            if value is None:
                logger.debug("No value for macro {{%s}}, using empty string", name)
                return ""
            return value

        return MACRO_PATTERN.sub(replace, text)

    def resolve(self, text: str) -> str:
        """Run both phases"""
        return self.substitute(self.resolve_style(text))

    def persona_section(self) -> str:
        """Persona block, or an empty string when disabled or blank"""
        if not self.bundle.include_persona:
            return ""
        persona = (self.context.persona_text or "").strip()
        if not persona:
            return ""
        logger.debug("Adding user persona to prompt")
        return format_section(PERSONA_HEADER.format(name=self.context.user_display_name), persona)

    def character_section(self) -> str:
        """Character description block, or an empty string when disabled or missing"""
        character = self.context.character
        if not self.bundle.include_char_card or character is None:
            return ""
        description = (character.description or "").strip()
        if not description:
            return ""
        logger.debug("Adding character card to prompt")
        return format_section(CHARACTER_HEADER.format(name=character.name or "Character"), description)

    def style_summary(self) -> str:
        """Style directive block for templates without their own {{pov}}/{{length}}"""
        values = self._style_values()
        body = STYLE_SUMMARY_TEMPLATE.format(pov=values[POV_PLACEHOLDER], length=values[LENGTH_PLACEHOLDER])
        return format_section(STYLE_HEADER, self.substitute(body))


__all__ = ['PlaceholderResolver', 'embeds_style_placeholders', 'MACRO_PATTERN']
