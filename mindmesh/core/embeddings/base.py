"""
Abstract base class for embedding providers.
Handles text to vector embeddings for semantic search.
"""

from abc import ABC, abstractmethod
from enum import Enum


class EmbeddingIntent(str, Enum):
    """
    What a vector will be used for.

    Corpus text and search text are embedded with different task hints, so the
    same string yields different vectors under each intent.
    """

    DOCUMENT = "document"
    QUERY = "query"


class Embedder(ABC):
    """
    Abstract base for embedding providers.

    Responsibilities:
    - Generate vector embeddings for text under an explicit intent
    - Consistent vector dimensions

    Callers truncate text before embedding; providers never shorten input and
    never retry.
    """

    document_prefix: str = "search_document: "
    query_prefix: str = "search_query: "

    def apply_intent(self, text: str, intent: EmbeddingIntent) -> str:
        """Prefix text with the task hint for ``intent``."""
        prefix = self.document_prefix if intent == EmbeddingIntent.DOCUMENT else self.query_prefix
        return f"{prefix}{text}"

    @abstractmethod
    async def embed(self, text: str, intent: EmbeddingIntent, **kwargs) -> list[float]:
        """
        Generate embedding vector for text.

        Args:
            text: Text to embed (already truncated by the caller)
            intent: DOCUMENT for indexed content, QUERY for search text
            **kwargs: Provider-specific parameters

        Returns:
            List of floats representing the embedding vector

        Raises:
            ValidationError: If text is empty
            EmbeddingError: If embedding generation fails
        """
        pass

    async def get_dimension(self) -> int:
        """
        Get the dimension of embeddings produced by this provider.

        Default implementation embeds a test string.
        """
        test_embedding = await self.embed("test", EmbeddingIntent.DOCUMENT)
        return len(test_embedding)

    @abstractmethod
    async def close(self):
        """Close any open connections."""
        pass
