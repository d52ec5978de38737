"""
Ollama LLM provider using native ollama-python SDK.
"""

import ollama

from mindmesh.core.llm.base import LLMProvider
from mindmesh.utils.exceptions import GenerationError, ValidationError
from mindmesh.utils.logger import get_logger

logger = get_logger(__name__)


class OllamaLLM(LLMProvider):
    """
    Ollama LLM provider for text generation.

    Uses native ollama-python SDK for chat completions.
    """

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str | None = None,
        timeout: float = 120.0,
    ):
        """
        Initialize Ollama LLM provider.

        Args:
            host: Ollama server URL
            model: Default model for text generation (e.g., "llama3.1:8b")
            timeout: Request timeout in seconds
        """
        self.host = host
        self.model = model
        self.timeout = timeout

        self.client = ollama.AsyncClient(host=host, timeout=timeout)

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
        Generate completion using Ollama.

        Args:
            prompt: Input prompt
            system: Optional system instruction
            model: Model override
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            **kwargs: Additional options (passed to Ollama)

        Returns:
            Generated text

        Raises:
            ValidationError: If prompt is empty or no model is known
            GenerationError: If the Ollama call fails
        """
        if not prompt or not prompt.strip():
            raise ValidationError("Prompt cannot be empty")

        model_name = model or self.model
        if not model_name:
            raise ValidationError("No model given for Ollama completion")

        options = {
            "temperature": temperature,
            "num_predict": max_tokens,
            **kwargs.get("options", {}),
        }

        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        try:
            response = await self.client.chat(
                model=model_name,
                messages=messages,
                options=options,
                **{k: v for k, v in kwargs.items() if k != "options"},
            )
        except Exception as e:
            logger.bind(model=model_name, host=self.host, error_type=type(e).__name__).error(
                f"Ollama chat error: {e}"
            )
            raise GenerationError(
                f"Ollama chat error: {e}",
                context={"model": model_name, "response_text": str(e)},
            ) from e

        content = response["message"]["content"]
        if not content:
            raise GenerationError(
                "Ollama returned empty content", context={"model": model_name}
            )

        return content

    async def list_models(self) -> list[str]:
        """
        List locally available chat models.

        Embedding-only models are skipped.
        """
        try:
            response = await self.client.list()
        except Exception as e:
            raise GenerationError(
                f"Ollama list models error: {e}", context={"response_text": str(e)}
            ) from e

        names = []
        for entry in response["models"]:
            name = entry.get("model") or entry.get("name") or ""
            if name and "embed" not in name:
                names.append(name)
        return names

    async def close(self):
        """Close client (Ollama SDK handles cleanup internally)."""
        pass
