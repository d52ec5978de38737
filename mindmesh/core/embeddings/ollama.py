"""
Ollama embedder using native ollama-python SDK.
"""

import ollama

from mindmesh.core.embeddings.base import Embedder, EmbeddingIntent
from mindmesh.utils.exceptions import EmbeddingError, ValidationError
from mindmesh.utils.logger import get_logger

logger = get_logger(__name__)


class OllamaEmbedder(Embedder):
    """
    Ollama embedder for generating text embeddings.

    Uses native ollama-python SDK. The default task hints follow the
    nomic-embed-text convention (``search_document:`` / ``search_query:``).
    """

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str = "nomic-embed-text",
        timeout: float = 120.0,
        document_prefix: str = "search_document: ",
        query_prefix: str = "search_query: ",
    ):
        """
        Initialize Ollama embedder.

        Args:
            host: Ollama server URL
            model: Embedding model name (e.g., "nomic-embed-text", "mxbai-embed-large")
            timeout: Request timeout in seconds
            document_prefix: Task hint for DOCUMENT intent
            query_prefix: Task hint for QUERY intent
        """
        self.host = host
        self.model = model
        self.timeout = timeout
        self.document_prefix = document_prefix
        self.query_prefix = query_prefix
        self._dimension = None

        self.client = ollama.AsyncClient(host=host, timeout=timeout)

    async def embed(self, text: str, intent: EmbeddingIntent, **kwargs) -> list[float]:
        """
        Generate embedding for text using Ollama.

        Args:
            text: Text to embed
            intent: Embedding intent
            **kwargs: Additional options passed to Ollama

        Returns:
            Embedding vector as list of floats

        Raises:
            ValidationError: If text is empty
            EmbeddingError: If Ollama embedding fails
        """
        if not text or not text.strip():
            raise ValidationError("Text cannot be empty")

        try:
            response = await self.client.embeddings(
                model=self.model, prompt=self.apply_intent(text, intent), **kwargs
            )
        except Exception as e:
            logger.bind(model=self.model, host=self.host, intent=intent.value).error(
                f"Ollama embedding error: {e}"
            )
            raise EmbeddingError(
                f"Ollama embedding error: {e}", context={"model": self.model}
            ) from e

        embedding = response.get("embedding") if response else None
        if not embedding:
            raise EmbeddingError(
                "Ollama returned invalid embedding response", context={"model": self.model}
            )

        return list(embedding)

    async def get_dimension(self) -> int:
        """
        Get embedding dimension.
        Caches result after first call.
        """
        if self._dimension is None:
            self._dimension = await super().get_dimension()
        return self._dimension

    async def close(self):
        """Close client (Ollama SDK handles cleanup internally)."""
        pass
