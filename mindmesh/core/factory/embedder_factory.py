"""
Factory for creating embedder providers.
"""

from mindmesh.config import EmbedderConfig
from mindmesh.core.embeddings.base import Embedder
from mindmesh.core.embeddings.ollama import OllamaEmbedder
from mindmesh.core.embeddings.openai import OpenAIEmbedder
from mindmesh.utils.exceptions import ConfigurationError


class EmbedderFactory:
    """Factory for creating embedder providers from configuration."""

    @staticmethod
    def create(config: EmbedderConfig) -> Embedder:
        """
        Create embedder from configuration.

        Args:
            config: Embedder configuration

        Returns:
            Embedder instance

        Raises:
            ConfigurationError: If provider is not supported or credentials are missing
        """
        if config.provider == "ollama":
            return OllamaEmbedder(
                host=config.base_url,
                model=config.model,
                timeout=config.timeout,
                document_prefix=config.document_prefix,
                query_prefix=config.query_prefix,
            )
        elif config.provider == "openai":
            if not config.api_key:
                raise ConfigurationError("OpenAI API key is required")
            return OpenAIEmbedder(
                api_key=config.api_key,
                model=config.model,
                timeout=config.timeout,
                document_prefix=config.document_prefix,
                query_prefix=config.query_prefix,
            )
        else:
            raise ConfigurationError(f"Unsupported embedder provider: {config.provider}")

    @staticmethod
    async def get_dimension(embedder: Embedder, config: EmbedderConfig | None = None) -> int:
        """
        Get embedding dimension with fallback logic.

        Priority:
        1. From config if provided
        2. From the embedder (known model table or a test embedding)

        Args:
            embedder: Embedder instance
            config: Optional embedder config with dimension hint

        Returns:
            Embedding dimension
        """
        if config and config.dimension:
            return config.dimension

        return await embedder.get_dimension()
