"""
Abstract base class for chat model providers.
Handles plain text generation and model discovery.
"""

from abc import ABC, abstractmethod


class LLMProvider(ABC):
    """
    Abstract base for LLM text generation providers.

    Responsibilities:
    - Text completion with an optional system instruction
    - Listing the models the provider can generate with
    """

    @abstractmethod
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
        Generate completion from prompt.

        Args:
            prompt: The user prompt
            system: Optional system instruction
            model: Model to use; defaults to the provider's configured model
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            **kwargs: Provider-specific parameters

        Returns:
            Generated text

        Raises:
            GenerationError: If the provider call fails. ``context["response_text"]``
                carries the provider's error body for failure classification.
        """
        pass

    @abstractmethod
    async def list_models(self) -> list[str]:
        """
        List model names usable for text generation.

        Raises:
            GenerationError: If the provider cannot be queried
        """
        pass

    @abstractmethod
    async def close(self):
        """
        Close any open connections.
        Optional to override if provider needs cleanup.
        """
