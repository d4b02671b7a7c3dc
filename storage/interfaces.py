from typing import Protocol, List, Dict, Any, Optional
from dataclasses import dataclass, field


DEFAULT_USER_NAME = "User"


@dataclass
class ConversationTurn:
    """Data class representing a single chat turn supplied by the host"""
    speaker_name: str
    text: Optional[str]
    is_system_note: bool = False
    is_from_user: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConversationTurn":
        """Build a turn from a host chat entry (``name``/``mes``/``is_user``/``is_system``)"""
        return cls(
            speaker_name=str(data.get("name") or data.get("speaker_name") or ""),
            text=data.get("mes", data.get("text")),
            is_system_note=bool(data.get("is_system", data.get("is_system_note", False))),
            is_from_user=bool(data.get("is_user", data.get("is_from_user", False))),
        )


@dataclass
class CharacterInfo:
    """Data class representing the character the user is chatting with"""
    id: str
    name: str = ""
    description: str = ""


@dataclass
class ChatContext:
    """
    Snapshot of the host state needed to build an impersonation prompt.

    Attributes:
        turns: Ordered conversation, oldest first
        user_name_override: Display name chosen for this chat, wins over the persona name
        persona_name: Name of the default user persona
        persona_text: Free-form persona description
        character: Active character, if any
        input_text: Current contents of the host input box
        macros: Extra host-wide macro values keyed by lowercase name
    """
    turns: List[ConversationTurn] = field(default_factory=list)
    user_name_override: Optional[str] = None
    persona_name: Optional[str] = None
    persona_text: str = ""
    character: Optional[CharacterInfo] = None
    input_text: str = ""
    macros: Dict[str, str] = field(default_factory=dict)

    @property
    def user_display_name(self) -> str:
        return self.user_name_override or self.persona_name or DEFAULT_USER_NAME

    @property
    def character_name(self) -> str:
        return self.character.name if self.character else ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChatContext":
        """
        Build a context from the JSON chat export used by the CLI.

        Raises:
            ValueError: If the document, its turns or its character have the wrong shape
        """
        if not isinstance(data, dict):
            raise ValueError("Chat file must contain a JSON object")
        turns = data.get("turns") or []
        if not isinstance(turns, list) or not all(isinstance(turn, dict) for turn in turns):
            raise ValueError("Chat turns must be a list of objects")

        character = None
        char_data = data.get("character")
        if char_data and not isinstance(char_data, dict):
            raise ValueError("Chat character must be an object")
        if char_data:
            character = CharacterInfo(
                id=str(char_data.get("id", "")),
                name=char_data.get("name", ""),
                description=char_data.get("description", ""),
            )

        return cls(
            turns=[ConversationTurn.from_dict(turn) for turn in turns],
            user_name_override=data.get("user_name"),
            persona_name=data.get("persona_name"),
            persona_text=data.get("persona", "") or "",
            character=character,
            input_text=data.get("input", "") or "",
            macros={str(k).lower(): str(v) for k, v in (data.get("macros") or {}).items()},
        )


class ContextProvider(Protocol):
    """Protocol for the host callable returning the current chat snapshot"""

    def __call__(self) -> Optional[ChatContext]: ...
