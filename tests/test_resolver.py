"""
Unit tests for PlaceholderResolver.
"""

import pytest

from presets.models import PresetBundle
from prompt.resolver import PlaceholderResolver, embeds_style_placeholders
from storage.interfaces import ChatContext, ConversationTurn


@pytest.fixture
def resolver(bundle, chat_context):
    return PlaceholderResolver(bundle, chat_context)


class TestMacroExpansion:
    """Test phase 2 macro substitution"""

    def test_user_and_char(self, resolver):
        assert resolver.substitute("{{user}} meets {{char}}") == "Alex meets Mira"

    def test_case_and_whitespace_insensitive(self, resolver):
        assert resolver.substitute("{{ USER }} / {{Char}}") == "Alex / Mira"

    def test_input_macro(self, resolver):
        assert resolver.substitute("Mention {{input}}.") == "Mention the map."

    def test_unknown_macro_becomes_empty(self, resolver):
        assert resolver.substitute("a{{nonexistent}}b") == "ab"

    def test_text_without_macros_unchanged(self, resolver):
        text = "Plain text with {single} braces and {{ not closed"
        assert resolver.substitute(text) == text

    def test_host_macros(self, bundle, chat_context):
        chat_context.macros = {"weather": "stormy", "user": "Impostor"}
        resolver = PlaceholderResolver(bundle, chat_context)
        # Built-in names cannot be shadowed by host values
        assert resolver.substitute("{{weather}} night for {{user}}") == "stormy night for Alex"

    def test_persona_respects_toggle(self, bundle, chat_context):
        assert PlaceholderResolver(bundle, chat_context).substitute("{{persona}}") == chat_context.persona_text

        bundle.include_persona = False
        assert PlaceholderResolver(bundle, chat_context).substitute("{{persona}}") == ""

    def test_description_respects_toggle(self, bundle, chat_context):
        assert PlaceholderResolver(bundle, chat_context).substitute("{{description}}") == ""

        bundle.include_char_card = True
        value = PlaceholderResolver(bundle, chat_context).substitute("{{description}}")
        assert value == "A lighthouse keeper who distrusts {{user}}."

    def test_inserted_values_not_rescanned(self, bundle, chat_context):
        """Literal braces in persona text survive expansion"""
        chat_context.persona_text = "Writes {{char}} and {curly} in notes."
        resolver = PlaceholderResolver(bundle, chat_context)
        assert resolver.substitute("P: {{persona}}") == "P: Writes {{char}} and {curly} in notes."

    def test_no_character(self, bundle):
        context = ChatContext(turns=[ConversationTurn("A", "hi")])
        resolver = PlaceholderResolver(bundle, context)
        assert resolver.substitute("[{{char}}] {{user}}") == "[] User"


class TestStylePlaceholders:
    """Test phase 1 and the two-phase ordering"""

    def test_resolve_style_leaves_other_macros(self, resolver):
        assert resolver.resolve_style("{{pov}} as {{user}}") == "first-person, I/me/my as {{user}}"

    def test_directive_macros_expanded_in_phase_two(self, bundle, chat_context):
        bundle.pov = "third"
        bundle.response_style = "adaptive"
        resolver = PlaceholderResolver(bundle, chat_context)

        result = resolver.resolve("POV: {{pov}}. Length: {{length}}.")

        assert result == (
            "POV: third-person, using Alex's name or pronouns. "
            "Length: match the length/style of Alex's prior messages."
        )

    @pytest.mark.parametrize("style,expected", [
        ("short", "1–3 sentences, direct"),
        ("medium", "2–4 paragraphs, balanced"),
        ("long", "4+ paragraphs, detailed, with internal thought"),
    ])
    def test_length_directives(self, bundle, chat_context, style, expected):
        bundle.response_style = style
        assert PlaceholderResolver(bundle, chat_context).resolve("{{length}}") == expected

    def test_embeds_style_placeholders(self):
        assert embeds_style_placeholders("Write {{pov}}")
        assert embeds_style_placeholders("Be {{ LENGTH }}")
        assert not embeds_style_placeholders("You are {{user}}")
        assert not embeds_style_placeholders("")


class TestSections:
    """Test persona, character and style summary blocks"""

    def test_persona_section(self, resolver):
        assert resolver.persona_section() == (
            "### Your Persona (Alex):\nAlex is a cartographer who talks fast."
        )

    def test_persona_section_disabled_or_blank(self, bundle, chat_context):
        bundle.include_persona = False
        assert PlaceholderResolver(bundle, chat_context).persona_section() == ""

        bundle.include_persona = True
        chat_context.persona_text = "   "
        assert PlaceholderResolver(bundle, chat_context).persona_section() == ""

    def test_character_section(self, bundle, chat_context):
        assert PlaceholderResolver(bundle, chat_context).character_section() == ""

        bundle.include_char_card = True
        section = PlaceholderResolver(bundle, chat_context).character_section()
        assert section == "### Character Information (Mira):\nA lighthouse keeper who distrusts {{user}}."

    def test_style_summary(self, resolver):
        assert resolver.style_summary() == (
            "### Style Instructions:\n"
            "Perspective: first-person, I/me/my.\n"
            "Response length: 1–3 sentences, direct."
        )

    def test_style_summary_expands_user(self):
        bundle = PresetBundle(name="T", pov="third")
        context = ChatContext(turns=[ConversationTurn("A", "hi")], persona_name="Sam")
        summary = PlaceholderResolver(bundle, context).style_summary()
        assert "using Sam's name or pronouns" in summary
