import asyncio
import logging
from typing import Dict, List, Optional

from config import TEMPERATURE
from core.abstractions import TextGenerator

# Import OpenAI clients (v1+)
try:
    from openai import OpenAI, AzureOpenAI
    OPENAI_AVAILABLE = True
except ImportError:
    OPENAI_AVAILABLE = False
    OpenAI = None
    AzureOpenAI = None

# Import Google Generative AI
try:
    import google.generativeai as genai
    GEMINI_AVAILABLE = True
except ImportError:
    GEMINI_AVAILABLE = False
    genai = None

logger = logging.getLogger(__name__)


class ModelClient:
    """Abstracts interaction with different LLM providers"""

    def __init__(self, provider="lmstudio"):
        self.provider = provider

        if provider == "azure":
            if not OPENAI_AVAILABLE:
                raise ImportError("OpenAI package not available. Install with: pip install openai")
            from config import AZURE_ENDPOINT, AZURE_API_KEY, AZURE_MODEL, AZURE_API_VERSION

            if not all([AZURE_ENDPOINT, AZURE_API_KEY, AZURE_MODEL]):
                raise ValueError("Azure provider requires AZURE_ENDPOINT, AZURE_API_KEY, and AZURE_MODEL to be set in .env")

            self.client = AzureOpenAI(
                azure_endpoint=AZURE_ENDPOINT,
                api_key=AZURE_API_KEY,
                api_version=AZURE_API_VERSION,
            )
            self.model_name = AZURE_MODEL
            logger.info("ModelClient initialized with Azure provider - Model: %s", AZURE_MODEL)

        elif provider == "lmstudio":
            if not OPENAI_AVAILABLE:
                raise ImportError("OpenAI package not available. Install with: pip install openai")
            from config import LMSTUDIO_MODEL, LMSTUDIO_BASE_URL

            self.client = OpenAI(
                base_url=LMSTUDIO_BASE_URL,
                api_key="lm-studio",
            )
            self.model_name = LMSTUDIO_MODEL
            logger.info("ModelClient initialized with LM Studio provider - Model: %s, Base URL: %s", LMSTUDIO_MODEL, LMSTUDIO_BASE_URL)

        elif provider == "gemini":
            if not GEMINI_AVAILABLE:
                raise ImportError("Google Generative AI package not available. Install with: pip install google-generativeai")

            from config import GEMINI_API_KEY, GEMINI_MODEL
            if not all([GEMINI_API_KEY, GEMINI_MODEL]):
                raise ValueError("Gemini provider requires GEMINI_API_KEY and GEMINI_MODEL to be set in .env")

            genai.configure(api_key=GEMINI_API_KEY)
            self.client = None
            self.model_name = GEMINI_MODEL
            logger.info("ModelClient initialized with Gemini provider - Model: %s", GEMINI_MODEL)

        else:
            raise ValueError(f"Unsupported provider: {provider}. Supported providers: 'azure', 'lmstudio', 'gemini'")

    @staticmethod
    def build_messages(prompt: str, system_prompt: str) -> List[Dict[str, str]]:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        return messages

    def ask(self, prompt: str, system_prompt: str, response_length: Optional[int] = None) -> str:
        """
        Send one system/user prompt pair to the LLM and return the raw text.

        Args:
            prompt: User prompt
            system_prompt: System prompt
            response_length: Max tokens for the reply, None for the provider default
        """
        try:
            logger.info("Sending request to %s provider (max tokens: %s)", self.provider, response_length or "unbounded")
            logger.debug("  System prompt: %s", system_prompt[:1000] + "..." if len(system_prompt) > 1000 else system_prompt)
            logger.debug("  User prompt: %s", prompt[:1000] + "..." if len(prompt) > 1000 else prompt)

            if self.provider == 'gemini':
                generation_config = {"temperature": TEMPERATURE}
                if response_length:
                    generation_config["max_output_tokens"] = response_length

                model = genai.GenerativeModel(self.model_name, system_instruction=system_prompt or None)
                resp = model.generate_content(prompt, generation_config=generation_config)
                content = resp.text
            else:
                kwargs = {}
                if response_length:
                    kwargs["max_tokens"] = response_length

                resp = self.client.chat.completions.create(
                    model=self.model_name,
                    messages=self.build_messages(prompt, system_prompt),
                    temperature=TEMPERATURE,
                    **kwargs
                )
                content = resp.choices[0].message.content

            logger.info("Received response from %s provider (%d chars)", self.provider, len(content or ""))
            return content or ""

        except Exception as e:
            logger.error("Error in %s provider: %s", self.provider, e)
            raise


class AIHandler(TextGenerator):
    """Generation backend used by the impersonator. No retries: a failure is final."""

    def __init__(self, model_client: ModelClient = None, provider: str = None):
        if model_client is not None:
            self.model_client = model_client
            return

        try:
            if provider is None:
                from config import PROVIDER
                provider = PROVIDER
            self.model_client = ModelClient(provider=provider)
            logger.info("AIHandler initialized with %s provider via ModelClient", provider)
        except Exception as e:
            logger.error("Failed to initialize ModelClient: %s", e)
            self.model_client = None

    async def generate(self, prompt: str, system_prompt: str, response_length: Optional[int] = None) -> str:
        """Run the blocking provider call in the default executor"""
        if not self.model_client:
            raise RuntimeError("ModelClient not available; check provider configuration")

        logger.info("Making LLM API call via ModelClient")
        loop = asyncio.get_running_loop()
        response = await loop.run_in_executor(
            None,
            self.model_client.ask,
            prompt,
            system_prompt,
            response_length
        )
        logger.info("LLM API call completed")
        return response
