"""
Template text for impersonation prompts.

This module provides the point-of-view and response-length directive text,
the section headers used when composing the system and user prompts, and
helpers that format those sections.
"""

from typing import Dict

from presets.models import (
    POV_FIRST, POV_SECOND, POV_THIRD,
    STYLE_SHORT, STYLE_MEDIUM, STYLE_LONG, STYLE_ADAPTIVE,
)


# Directive text may itself contain macros; it is inserted before macro expansion
POV_DIRECTIVES: Dict[str, str] = {
    POV_FIRST: "first-person, I/me/my",
    POV_SECOND: "second-person, you/your",
    POV_THIRD: "third-person, using {{user}}'s name or pronouns",
}

LENGTH_DIRECTIVES: Dict[str, str] = {
    STYLE_SHORT: "1–3 sentences, direct",
    STYLE_MEDIUM: "2–4 paragraphs, balanced",
    STYLE_LONG: "4+ paragraphs, detailed, with internal thought",
    STYLE_ADAPTIVE: "match the length/style of {{user}}'s prior messages",
}

POV_PLACEHOLDER = "pov"
LENGTH_PLACEHOLDER = "length"

PERSONA_HEADER = "### Your Persona ({name}):"
CHARACTER_HEADER = "### Character Information ({name}):"
INSTRUCTION_HEADER = "### Additional Instructions:"
STYLE_HEADER = "### Style Instructions:"
CONVERSATION_HEADER = "### Recent Conversation:"
IDEA_HEADER = "### Idea to develop (guidance only, do not copy verbatim):"

STYLE_SUMMARY_TEMPLATE = """Perspective: {pov}.
Response length: {length}."""

SECTION_SEPARATOR = "\n\n"
TURN_SEPARATOR = "\n\n"


def pov_directive(pov: str) -> str:
    return POV_DIRECTIVES.get(pov, POV_DIRECTIVES[POV_FIRST])


def length_directive(response_style: str) -> str:
    return LENGTH_DIRECTIVES.get(response_style, LENGTH_DIRECTIVES[STYLE_MEDIUM])


def format_section(header: str, body: str) -> str:
    """
    Format a titled prompt section.

    Returns:
        "<header>\\n<body>", or an empty string when body is blank
    """
    if not body or not body.strip():
        return ""
    return f"{header}\n{body.strip()}"


def format_turn(speaker: str, text: str) -> str:
    return f"{speaker}: {text}"


def format_next_speaker_line(user_name: str) -> str:
    return f"{user_name}:"


# Export public API
__all__ = [
    'POV_DIRECTIVES',
    'LENGTH_DIRECTIVES',
    'POV_PLACEHOLDER',
    'LENGTH_PLACEHOLDER',
    'PERSONA_HEADER',
    'CHARACTER_HEADER',
    'INSTRUCTION_HEADER',
    'STYLE_HEADER',
    'CONVERSATION_HEADER',
    'IDEA_HEADER',
    'STYLE_SUMMARY_TEMPLATE',
    'SECTION_SEPARATOR',
    'TURN_SEPARATOR',
    'pov_directive',
    'length_directive',
    'format_section',
    'format_turn',
    'format_next_speaker_line',
]
