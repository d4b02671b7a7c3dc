"""
Host data interfaces and settings persistence for the impersonator.

This package provides the read-only chat data types supplied by the host
(turns, character, chat snapshot) and the JSON file used to persist the
settings object when running stand-alone.
"""

from .interfaces import ConversationTurn, CharacterInfo, ChatContext, ContextProvider
from .settings_file import SettingsFile, read_json_file, write_json_file

__all__ = [
    'ConversationTurn',
    'CharacterInfo',
    'ChatContext',
    'ContextProvider',
    'SettingsFile',
    'read_json_file',
    'write_json_file',
]
