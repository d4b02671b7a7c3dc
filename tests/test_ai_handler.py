"""
Tests for ModelClient and AIHandler with the provider SDKs mocked out.
"""

import pytest
from unittest.mock import MagicMock, patch

from ai_handler import AIHandler, ModelClient


def make_completion(content):
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


@pytest.fixture
def openai_client():
    """Patched OpenAI class returning a client with a canned completion"""
    with patch("ai_handler.OpenAI") as openai_cls:
        client = openai_cls.return_value
        client.base_url = "http://localhost:1234/v1"
        client.chat.completions.create.return_value = make_completion("Sure, I'll go.")
        yield client


class TestModelClient:
    """Test request shaping per provider"""

    def test_build_messages(self):
        assert ModelClient.build_messages("hi", "sys") == [
            {"role": "system", "content": "sys"},
            {"role": "user", "content": "hi"},
        ]
        assert ModelClient.build_messages("hi", "") == [{"role": "user", "content": "hi"}]

    def test_unsupported_provider(self):
        with pytest.raises(ValueError):
            ModelClient(provider="carrier-pigeon")

    def test_lmstudio_ask_with_limit(self, openai_client):
        client = ModelClient(provider="lmstudio")

        assert client.ask("user prompt", "system prompt", 120) == "Sure, I'll go."

        kwargs = openai_client.chat.completions.create.call_args.kwargs
        assert kwargs["max_tokens"] == 120
        assert kwargs["messages"][0] == {"role": "system", "content": "system prompt"}
        assert kwargs["messages"][1] == {"role": "user", "content": "user prompt"}

    def test_unbounded_omits_max_tokens(self, openai_client):
        ModelClient(provider="lmstudio").ask("user prompt", "system prompt", None)
        assert "max_tokens" not in openai_client.chat.completions.create.call_args.kwargs

    def test_none_content_becomes_empty(self, openai_client):
        openai_client.chat.completions.create.return_value = make_completion(None)
        assert ModelClient(provider="lmstudio").ask("p", "s") == ""

    def test_errors_propagate(self, openai_client):
        openai_client.chat.completions.create.side_effect = RuntimeError("connection refused")
        with pytest.raises(RuntimeError):
            ModelClient(provider="lmstudio").ask("p", "s")

    def test_gemini_ask(self):
        with patch("ai_handler.genai") as genai, \
                patch("ai_handler.GEMINI_AVAILABLE", True), \
                patch("config.GEMINI_API_KEY", "key"), \
                patch("config.GEMINI_MODEL", "gemini-pro"):
            genai.GenerativeModel.return_value.generate_content.return_value.text = "Fine."
            client = ModelClient(provider="gemini")

            assert client.ask("p", "s", 64) == "Fine."

            genai.configure.assert_called_once_with(api_key="key")
            genai.GenerativeModel.assert_called_once_with("gemini-pro", system_instruction="s")
            config = genai.GenerativeModel.return_value.generate_content.call_args.kwargs["generation_config"]
            assert config["max_output_tokens"] == 64


class TestAIHandler:
    """Test the async generation backend"""

    @pytest.mark.asyncio
    async def test_generate_runs_client(self):
        model_client = MagicMock(spec=ModelClient)
        model_client.ask.return_value = "reply"
        handler = AIHandler(model_client=model_client)

        assert await handler.generate("p", "s", 30) == "reply"
        model_client.ask.assert_called_once_with("p", "s", 30)

    @pytest.mark.asyncio
    async def test_generate_without_client(self):
        handler = AIHandler(model_client=MagicMock())
        handler.model_client = None

        with pytest.raises(RuntimeError):
            await handler.generate("p", "s")

    @pytest.mark.asyncio
    async def test_bad_provider_fails_on_generate(self):
        handler = AIHandler(provider="carrier-pigeon")
        assert handler.model_client is None

        with pytest.raises(RuntimeError):
            await handler.generate("p", "s")

    def test_configured_provider(self, openai_client):
        handler = AIHandler(provider="lmstudio")
        assert handler.model_client.provider == "lmstudio"
