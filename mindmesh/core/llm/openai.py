"""
OpenAI LLM provider using official SDK.
"""

from openai import AsyncOpenAI

from mindmesh.core.llm.base import LLMProvider
from mindmesh.utils.exceptions import ConfigurationError, GenerationError, ValidationError
from mindmesh.utils.logger import get_logger

logger = get_logger(__name__)

# Model id fragments that never serve chat completions
_NON_CHAT_MARKERS = ("embedding", "whisper", "tts", "dall-e", "moderation", "transcribe")


class OpenAILLM(LLMProvider):
    """
    OpenAI LLM provider for text generation.

    Uses the chat completions API.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str | None = None,
        organization: str | None = None,
        base_url: str | None = None,
        timeout: float = 120.0,
    ):
        """
        Initialize OpenAI LLM provider.

        Args:
            api_key: OpenAI API key
            model: Default model name (e.g., "gpt-4o-mini")
            organization: Optional organization ID
            base_url: Optional custom base URL
            timeout: Request timeout in seconds

        Raises:
            ConfigurationError: If no API key is given
        """
        if not api_key:
            raise ConfigurationError("OpenAI LLM requires an API key")

        self.model = model

        self.client = AsyncOpenAI(
            api_key=api_key, organization=organization, base_url=base_url, timeout=timeout
        )

    async def complete(
        self,
        prompt: str,
        system: str | None = None,
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.2,
        **kwargs,
    ) -> str:
        """
        Generate completion using OpenAI.

        Args:
            prompt: Input prompt
            system: Optional system instruction
            model: Model override
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            **kwargs: Additional parameters (e.g., stop, presence_penalty)
        Returns:
            Generated text
        Raises:
            ValidationError: If prompt is empty or no model is known
            GenerationError: If OpenAI API call fails
        """
        if not prompt or not prompt.strip():
            raise ValidationError("Prompt cannot be empty")

        model_name = model or self.model
        if not model_name:
            raise ValidationError("No model given for OpenAI completion")

        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        try:
            response = await self.client.chat.completions.create(
                model=model_name,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                **kwargs,
            )
        except Exception as e:
            logger.bind(model=model_name, error_type=type(e).__name__).error(
                f"OpenAI API error: {e}"
            )
            raise GenerationError(
                f"OpenAI API error: {e}",
                context={"model": model_name, "response_text": str(e)},
            ) from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise GenerationError("OpenAI returned empty content", context={"model": model_name})

        return content

    async def list_models(self) -> list[str]:
        """List model ids that can serve chat completions."""
        try:
            page = await self.client.models.list()
        except Exception as e:
            raise GenerationError(
                f"OpenAI list models error: {e}", context={"response_text": str(e)}
            ) from e

        return [
            model.id
            for model in page.data
            if not any(marker in model.id for marker in _NON_CHAT_MARKERS)
        ]

    async def close(self):
        """Close OpenAI client."""
        await self.client.close()
