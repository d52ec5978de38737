"""
OpenAI embedder using official SDK.
"""

from openai import AsyncOpenAI

from mindmesh.core.embeddings.base import Embedder, EmbeddingIntent
from mindmesh.utils.exceptions import ConfigurationError, EmbeddingError, ValidationError
from mindmesh.utils.logger import get_logger

logger = get_logger(__name__)


class OpenAIEmbedder(Embedder):
    """
    OpenAI embedder for generating text embeddings.

    Supports models like text-embedding-3-small, text-embedding-3-large, etc.
    OpenAI has no task-type parameter, so intents are expressed with the same
    configurable text prefixes the other providers use.
    """

    # Known dimensions for OpenAI embedding models
    _MODEL_DIMENSIONS = {
        "text-embedding-3-small": 1536,
        "text-embedding-3-large": 3072,
        "text-embedding-ada-002": 1536,
    }

    def __init__(
        self,
        api_key: str | None,
        model: str = "text-embedding-3-small",
        organization: str | None = None,
        base_url: str | None = None,
        timeout: float = 120.0,
        document_prefix: str = "search_document: ",
        query_prefix: str = "search_query: ",
    ):
        """
        Initialize OpenAI embedder.

        Args:
            api_key: OpenAI API key
            model: Embedding model name (e.g., "text-embedding-3-small")
            organization: Optional organization ID
            base_url: Optional custom base URL
            timeout: Request timeout in seconds
            document_prefix: Task hint for DOCUMENT intent
            query_prefix: Task hint for QUERY intent

        Raises:
            ConfigurationError: If no API key is given
        """
        if not api_key:
            raise ConfigurationError("OpenAI embedder requires an API key")

        self.model = model
        self.document_prefix = document_prefix
        self.query_prefix = query_prefix

        self.client = AsyncOpenAI(
            api_key=api_key, organization=organization, base_url=base_url, timeout=timeout
        )

    async def embed(self, text: str, intent: EmbeddingIntent, **kwargs) -> list[float]:
        """
        Generate embedding for text using OpenAI.

        Args:
            text: Text to embed
            intent: Embedding intent
            **kwargs: Additional parameters (e.g., dimensions, user)

        Returns:
            Embedding vector as list of floats

        Raises:
            ValidationError: If text is empty
            EmbeddingError: If OpenAI API call fails or returns no vector
        """
        if not text or not text.strip():
            raise ValidationError("Text cannot be empty")

        try:
            response = await self.client.embeddings.create(
                model=self.model, input=self.apply_intent(text, intent), **kwargs
            )
        except Exception as e:
            logger.bind(model=self.model, error_type=type(e).__name__).error(
                f"OpenAI embedding error: {e}"
            )
            raise EmbeddingError(
                f"OpenAI embedding error: {e}", context={"model": self.model}
            ) from e

        if not response.data or not response.data[0].embedding:
            raise EmbeddingError(
                "OpenAI returned empty embedding response", context={"model": self.model}
            )

        return list(response.data[0].embedding)

    async def get_dimension(self) -> int:
        """
        Get embedding dimension.

        Uses known dimensions for OpenAI models, falls back to a test embedding.
        """
        if self.model in self._MODEL_DIMENSIONS:
            return self._MODEL_DIMENSIONS[self.model]

        return await super().get_dimension()

    async def close(self):
        """Close OpenAI client."""
        await self.client.close()
