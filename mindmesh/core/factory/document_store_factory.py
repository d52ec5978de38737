"""
Factory for creating document index backends.
"""

from urllib.parse import urlparse

from mindmesh.config import Config
from mindmesh.core.document_store.base import DocumentStore
from mindmesh.core.document_store.memory import InMemoryDocumentStore
from mindmesh.core.document_store.qdrant import QdrantDocumentStore
from mindmesh.utils.exceptions import ConfigurationError


class DocumentStoreFactory:
    """Factory for creating document stores from configuration."""

    @staticmethod
    def create(config: Config, vector_size: int) -> DocumentStore:
        """
        Create document store from configuration.

        Args:
            config: Main configuration object
            vector_size: Embedding dimension size

        Returns:
            Document store instance

        Raises:
            ConfigurationError: If backend is not supported
        """
        if config.document_backend == "memory":
            return InMemoryDocumentStore()
        elif config.document_backend == "qdrant":
            # Parse URL to extract host and port
            parsed = urlparse(config.qdrant.url)
            host = parsed.hostname or "localhost"
            port = parsed.port or 6333

            return QdrantDocumentStore(
                host=host,
                port=port,
                collection_name=config.qdrant.collection_name,
                vector_size=vector_size,
                use_grpc=config.qdrant.use_grpc,
                hnsw_m=config.qdrant.hnsw_m,
                hnsw_ef_construct=config.qdrant.hnsw_ef_construct,
                on_disk=config.qdrant.on_disk,
                scroll_batch_size=config.qdrant.scroll_batch_size,
                timeout=config.qdrant.timeout,
            )
        else:
            raise ConfigurationError(f"Unsupported document backend: {config.document_backend}")
