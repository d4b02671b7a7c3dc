"""
Built-in presets shipped with the impersonator.

Built-ins are restored on every load if missing and cannot be deleted, but a
user may overwrite any of them with their own values.
"""

from typing import Dict

from .models import (
    PresetBundle,
    POV_FIRST, POV_SECOND, POV_THIRD,
    STYLE_SHORT, STYLE_MEDIUM, STYLE_LONG, STYLE_ADAPTIVE,
)

DEFAULT_PRESET_NAME = "Default"

BUILTIN_PRESET_CONFIGS = {
    "Default": {
        "systemPrompt": "You are {{user}}. Continue the conversation naturally based on the context and your personality. Stay in character.",
        "contextSize": 10,
        "maxTokens": 200,
        "instruction": "Write in first person perspective. Match the conversation style.",
        "includeCharCard": False,
        "includePersona": True,
        "pov": POV_FIRST,
        "responseStyle": STYLE_MEDIUM,
    },
    "First Person Short": {
        "systemPrompt": "You are {{user}}. Reply briefly in first person, staying in character.",
        "contextSize": 5,
        "maxTokens": 100,
        "instruction": 'Use "I" perspective. Keep responses to 1-2 sentences. Be direct and immediate.',
        "includeCharCard": False,
        "includePersona": True,
        "pov": POV_FIRST,
        "responseStyle": STYLE_SHORT,
    },
    "First Person Detailed": {
        "systemPrompt": "You are {{user}}. Provide detailed first-person responses that reflect your personality, thoughts, and emotions.",
        "contextSize": 15,
        "maxTokens": 400,
        "instruction": 'Use "I" perspective. Include internal thoughts and feelings. Be descriptive and expressive.',
        "includeCharCard": False,
        "includePersona": True,
        "pov": POV_FIRST,
        "responseStyle": STYLE_LONG,
    },
    "Second Person": {
        "systemPrompt": "Narrate {{user}}'s actions and responses in second person perspective.",
        "contextSize": 10,
        "maxTokens": 250,
        "instruction": 'Use "You" perspective. Describe actions and dialogue as if narrating to the reader.',
        "includeCharCard": False,
        "includePersona": True,
        "pov": POV_SECOND,
        "responseStyle": STYLE_MEDIUM,
    },
    "Third Person": {
        "systemPrompt": "Narrate {{user}}'s actions and responses in third person perspective.",
        "contextSize": 10,
        "maxTokens": 250,
        "instruction": 'Use "{{user}}" or appropriate pronouns. Describe actions and dialogue from an outside perspective.',
        "includeCharCard": False,
        "includePersona": True,
        "pov": POV_THIRD,
        "responseStyle": STYLE_MEDIUM,
    },
    "Adaptive Context": {
        "systemPrompt": "You are {{user}}. Analyze the recent conversation and match the style, length, and tone of previous {{user}} messages.",
        "contextSize": 20,
        "maxTokens": 300,
        "instruction": "Adapt to the conversation style. If previous messages were short, be brief. If detailed, be expressive. Match the established pattern.",
        "includeCharCard": False,
        "includePersona": True,
        "pov": POV_FIRST,
        "responseStyle": STYLE_ADAPTIVE,
    },
}

BUILTIN_PRESET_NAMES = frozenset(BUILTIN_PRESET_CONFIGS)


def get_builtin_presets() -> Dict[str, PresetBundle]:
    """Fresh copies of every built-in preset, in display order"""
    return {
        name: PresetBundle.from_dict(config, name=name)
        for name, config in BUILTIN_PRESET_CONFIGS.items()
    }


def get_default_preset() -> PresetBundle:
    return PresetBundle.from_dict(BUILTIN_PRESET_CONFIGS[DEFAULT_PRESET_NAME], name=DEFAULT_PRESET_NAME)


__all__ = [
    'DEFAULT_PRESET_NAME',
    'BUILTIN_PRESET_CONFIGS',
    'BUILTIN_PRESET_NAMES',
    'get_builtin_presets',
    'get_default_preset',
]
