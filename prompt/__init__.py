"""
Prompt assembling package for impersonation requests.

This package provides placeholder resolution, conversation windowing and the
assembler that combines them into a system prompt and a user prompt.
"""

from .assembler import PromptAssembler, GenerationRequest
from .resolver import PlaceholderResolver, embeds_style_placeholders
from .windower import ConversationWindower
from .templates import POV_DIRECTIVES, LENGTH_DIRECTIVES

__all__ = [
    'PromptAssembler',
    'GenerationRequest',
    'PlaceholderResolver',
    'embeds_style_placeholders',
    'ConversationWindower',
    'POV_DIRECTIVES',
    'LENGTH_DIRECTIVES',
]
