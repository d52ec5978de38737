"""
Base interface for the document index.

The index holds one DocumentRecord per source item, keyed by
(source_type, source_id), and answers tenant-scoped similarity queries.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from mindmesh.models.document import DocumentMatch, DocumentRecord
from mindmesh.models.source import SourceType


class DocumentStore(ABC):
    """Abstract base class for document index implementations."""

    @abstractmethod
    async def initialize(self) -> None:
        """
        Initialize the store (create collections/indices).

        Raises:
            DocumentStoreError: If initialization fails
        """
        pass

    @abstractmethod
    async def get_watermarks(self, tenant_id: str, user_id: str) -> dict[str, datetime]:
        """
        Get the indexed ``updated_at`` of every document in a tenant+user scope.

        Args:
            tenant_id: Workspace ID
            user_id: Owner ID

        Returns:
            Mapping of ``"type:id"`` keys to watermarks

        Raises:
            DocumentStoreError: If the read fails
        """
        pass

    @abstractmethod
    async def upsert_document(self, document: DocumentRecord) -> None:
        """
        Insert or overwrite the document keyed by (source_type, source_id).

        Args:
            document: Document with embedding

        Raises:
            ValidationError: If the document has no embedding
            DocumentStoreError: If the write fails
        """
        pass

    @abstractmethod
    async def match_documents(
        self, query_vector: list[float], k: int, tenant_id: str
    ) -> list[DocumentMatch]:
        """
        Find the ``k`` documents of a tenant nearest to ``query_vector``.

        Args:
            query_vector: Query embedding
            k: Maximum number of matches
            tenant_id: Tenant scope; other tenants' documents are never returned

        Returns:
            Matches ordered by descending similarity

        Raises:
            DocumentStoreError: If the search fails
        """
        pass

    @abstractmethod
    async def delete_document(self, source_type: SourceType, source_id: str) -> None:
        """
        Delete the document of one source item, if present.

        Raises:
            DocumentStoreError: If the delete fails
        """
        pass

    @abstractmethod
    async def count_documents(self, tenant_id: str | None = None) -> int:
        """Count documents, optionally within one tenant."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the connection to the store."""
        pass
