"""
Tenant-scoped similarity retrieval over the document index.
"""

from mindmesh.core.document_store.base import DocumentStore
from mindmesh.models.document import DocumentMatch
from mindmesh.utils.logger import get_logger

logger = get_logger(__name__)

MATCH_COUNT = 8


class Retriever:
    """Fetches the nearest documents of one tenant for a query vector."""

    def __init__(self, document_store: DocumentStore, match_count: int = MATCH_COUNT):
        """
        Args:
            document_store: Document index to search
            match_count: Default fan-out, large enough for the selection policy
                to have candidates left after thresholding
        """
        self.document_store = document_store
        self.match_count = match_count

    async def retrieve(
        self, tenant_id: str, query_vector: list[float], k: int | None = None
    ) -> list[DocumentMatch]:
        """
        Return up to ``k`` matches ordered by descending similarity.

        Matches belonging to another tenant are dropped even if the backend
        returns them.

        Raises:
            DocumentStoreError: If the search fails
        """
        limit = k or self.match_count
        matches = await self.document_store.match_documents(query_vector, limit, tenant_id)

        scoped = [match for match in matches if match.tenant_id == tenant_id]
        if len(scoped) != len(matches):
            logger.bind(tenant_id=tenant_id).warning(
                f"Dropped {len(matches) - len(scoped)} matches outside tenant scope"
            )

        scoped.sort(key=lambda match: match.similarity, reverse=True)
        return scoped[:limit]
