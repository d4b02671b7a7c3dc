"""
Preset bundle data model.

A PresetBundle is one named impersonation configuration. Bundles are stored
and exported with the camelCase keys of the persisted settings layout;
``from_dict`` is the boundary where imported or hand-edited values are
coerced and clamped.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping

logger = logging.getLogger(__name__)

# Point of view
POV_FIRST = "first"
POV_SECOND = "second"
POV_THIRD = "third"
POINTS_OF_VIEW = (POV_FIRST, POV_SECOND, POV_THIRD)

# Response style
STYLE_SHORT = "short"
STYLE_MEDIUM = "medium"
STYLE_LONG = "long"
STYLE_ADAPTIVE = "adaptive"
RESPONSE_STYLES = (STYLE_SHORT, STYLE_MEDIUM, STYLE_LONG, STYLE_ADAPTIVE)

DEFAULT_CONTEXT_SIZE = 10
DEFAULT_MAX_TOKENS = 200
DEFAULT_SYSTEM_PROMPT = (
    "You are roleplaying as {{user}}. Based on the conversation context and {{user}}'s personality, "
    "continue the dialogue naturally. Stay in character and respond as {{user}} would."
)

# Long-form names accepted on import in addition to the persisted keys
_KEY_ALIASES = {
    "systemPromptTemplate": "systemPrompt",
    "includeCharacterCard": "includeCharCard",
    "pointOfView": "pov",
}


def clamp_non_negative(value: Any, default: int) -> int:
    """Coerce a form/import value to an int >= 0, falling back to default when unparsable"""
    if isinstance(value, bool):
        return default
    try:
        number = int(float(value))
    except (TypeError, ValueError):
        return default
    return max(0, number)


def coerce_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)


def _coerce_choice(value: Any, choices: tuple, default: str) -> str:
    if isinstance(value, str) and value.strip().lower() in choices:
        return value.strip().lower()
    if value is not None:
        logger.debug("Unknown option %r, using %r", value, default)
    return default


@dataclass
class PresetBundle:
    """
    A named impersonation configuration.

    Attributes:
        name: Unique key within the preset store
        system_prompt: System prompt template with {{...}} placeholders
        context_size: Number of trailing chat turns to include
        max_tokens: Response length limit, 0 means unbounded
        instruction: Optional free-text instruction appended to the prompt
        include_char_card: Whether to append the character description
        include_persona: Whether to append the user persona
        pov: One of POINTS_OF_VIEW
        response_style: One of RESPONSE_STYLES
    """
    name: str
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    context_size: int = DEFAULT_CONTEXT_SIZE
    max_tokens: int = DEFAULT_MAX_TOKENS
    instruction: str = ""
    include_char_card: bool = False
    include_persona: bool = True
    pov: str = POV_FIRST
    response_style: str = STYLE_MEDIUM

    def copy(self) -> "PresetBundle":
        return replace(self)

    def with_name(self, name: str) -> "PresetBundle":
        return replace(self, name=name)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the persisted camelCase keys"""
        return {
            "name": self.name,
            "systemPrompt": self.system_prompt,
            "contextSize": self.context_size,
            "maxTokens": self.max_tokens,
            "instruction": self.instruction,
            "includeCharCard": self.include_char_card,
            "includePersona": self.include_persona,
            "pov": self.pov,
            "responseStyle": self.response_style,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], name: str = None) -> "PresetBundle":
        """
        Build a bundle from persisted or imported data.

        Args:
            data: Mapping using the persisted keys (long aliases accepted)
            name: Overrides the name found in data

        Returns:
            A bundle with every numeric field clamped to >= 0

        Raises:
            ValueError: If no non-empty name is available
        """
        values = dict(data)
        for alias, key in _KEY_ALIASES.items():
            if alias in values and key not in values:
                values[key] = values[alias]

        bundle_name = name if name is not None else values.get("name")
        if not isinstance(bundle_name, str) or not bundle_name.strip():
            raise ValueError("Preset name cannot be empty")

        system_prompt = values.get("systemPrompt")
        instruction = values.get("instruction")

        return cls(
            name=bundle_name,
            system_prompt=system_prompt if isinstance(system_prompt, str) else DEFAULT_SYSTEM_PROMPT,
            context_size=clamp_non_negative(values.get("contextSize"), DEFAULT_CONTEXT_SIZE),
            max_tokens=clamp_non_negative(values.get("maxTokens"), DEFAULT_MAX_TOKENS),
            instruction=instruction if isinstance(instruction, str) else "",
            include_char_card=coerce_bool(values.get("includeCharCard"), False),
            include_persona=coerce_bool(values.get("includePersona"), True),
            pov=_coerce_choice(values.get("pov"), POINTS_OF_VIEW, POV_FIRST),
            response_style=_coerce_choice(values.get("responseStyle"), RESPONSE_STYLES, STYLE_MEDIUM),
        )


# Export public API
__all__ = [
    'PresetBundle',
    'clamp_non_negative',
    'coerce_bool',
    'POINTS_OF_VIEW',
    'RESPONSE_STYLES',
    'POV_FIRST',
    'POV_SECOND',
    'POV_THIRD',
    'STYLE_SHORT',
    'STYLE_MEDIUM',
    'STYLE_LONG',
    'STYLE_ADAPTIVE',
    'DEFAULT_CONTEXT_SIZE',
    'DEFAULT_MAX_TOKENS',
    'DEFAULT_SYSTEM_PROMPT',
]
