"""
Pytest configuration and fixtures for impersonator tests.

Provides sample chat snapshots, presets, a mocked generation backend and a
mocked notifier so tests never reach a real LLM provider.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from core.abstractions import Notifier, TextGenerator
from impersonator import Impersonator
from presets.models import PresetBundle
from presets.settings import ImpersonatorSettings
from storage.interfaces import CharacterInfo, ChatContext, ConversationTurn


@pytest.fixture
def sample_turns():
    """A short chat between the user (Alex) and a character (Mira)"""
    return [
        ConversationTurn(speaker_name="Mira", text="Welcome to the lighthouse."),
        ConversationTurn(speaker_name="You", text="Thanks, it's freezing out there.", is_from_user=True),
        ConversationTurn(speaker_name="System", text="Mira lights the stove.", is_system_note=True),
        ConversationTurn(speaker_name="Mira", text="Sit by the fire, then."),
        ConversationTurn(speaker_name="You", text="", is_from_user=True),
        ConversationTurn(speaker_name="Mira", text="Did you bring the map?"),
    ]


@pytest.fixture
def sample_character():
    return CharacterInfo(id="mira-1", name="Mira", description="A lighthouse keeper who distrusts {{user}}.")


@pytest.fixture
def chat_context(sample_turns, sample_character):
    """A chat snapshot with persona, character and an input box value"""
    return ChatContext(
        turns=sample_turns,
        user_name_override="Alex",
        persona_name="Default Persona",
        persona_text="Alex is a cartographer who talks fast.",
        character=sample_character,
        input_text="the map",
    )


@pytest.fixture
def bundle():
    """A plain preset without style placeholders in its template"""
    return PresetBundle(
        name="Test",
        system_prompt="You are {{user}} talking to {{char}}.",
        context_size=10,
        max_tokens=150,
        instruction="Stay terse, {{user}}.",
        include_char_card=False,
        include_persona=True,
        pov="first",
        response_style="short",
    )


@pytest.fixture
def settings():
    """Fresh enabled settings with only the built-in presets"""
    return ImpersonatorSettings.load({}, default_enabled=True)


@pytest.fixture
def mock_generator():
    """Mock generation backend returning a padded reply"""
    generator = MagicMock(spec=TextGenerator)
    generator.generate = AsyncMock(return_value="  I brought the map.  \n")
    return generator


@pytest.fixture
def mock_notifier():
    return MagicMock(spec=Notifier)


@pytest.fixture
def mock_save():
    return MagicMock()


@pytest.fixture
def impersonator(settings, mock_generator, mock_notifier, mock_save, chat_context, tmp_path):
    """Impersonator wired to mocks and reading the sample chat"""
    return Impersonator(
        settings=settings,
        generator=mock_generator,
        context_provider=lambda: chat_context,
        notifier=mock_notifier,
        save_settings=mock_save,
        export_dir=str(tmp_path),
    )
