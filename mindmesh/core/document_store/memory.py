"""
In-process document index.

Keeps documents in a dict and ranks them with cosine similarity. Suitable for
local runs, small workspaces and tests.
"""

import asyncio
from datetime import datetime

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity

from mindmesh.core.document_store.base import DocumentStore
from mindmesh.models.document import DocumentMatch, DocumentRecord, document_key
from mindmesh.models.source import SourceType
from mindmesh.utils.exceptions import DocumentStoreError, ValidationError
from mindmesh.utils.logger import get_logger

logger = get_logger(__name__)


class InMemoryDocumentStore(DocumentStore):
    """Dict-backed document index with numpy cosine search."""

    def __init__(self):
        self._documents: dict[str, DocumentRecord] = {}
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        pass

    async def get_watermarks(self, tenant_id: str, user_id: str) -> dict[str, datetime]:
        return {
            key: doc.updated_at
            for key, doc in self._documents.items()
            if doc.tenant_id == tenant_id and doc.user_id == user_id
        }

    async def upsert_document(self, document: DocumentRecord) -> None:
        if not document.embedding:
            raise ValidationError(
                "Document must have an embedding", context={"key": document.key}
            )

        async with self._lock:
            self._documents[document.key] = document.model_copy(deep=True)

    async def match_documents(
        self, query_vector: list[float], k: int, tenant_id: str
    ) -> list[DocumentMatch]:
        candidates = [doc for doc in self._documents.values() if doc.tenant_id == tenant_id]
        if not candidates or k <= 0:
            return []

        try:
            query = np.array(query_vector, dtype=float).reshape(1, -1)
            matrix = np.array([doc.embedding for doc in candidates], dtype=float)
            scores = cosine_similarity(query, matrix)[0]
        except ValueError as e:
            logger.bind(tenant_id=tenant_id, candidates=len(candidates)).error(
                f"Similarity search failed: {e}"
            )
            raise DocumentStoreError(
                f"Similarity search failed: {e}", context={"tenant_id": tenant_id}
            ) from e

        ranked = sorted(zip(candidates, scores), key=lambda pair: pair[1], reverse=True)
        return [DocumentMatch.from_document(doc, float(score)) for doc, score in ranked[:k]]

    async def get_document(self, source_type: SourceType, source_id: str) -> DocumentRecord | None:
        """Fetch one document by source key."""
        return self._documents.get(document_key(source_type, source_id))

    async def delete_document(self, source_type: SourceType, source_id: str) -> None:
        async with self._lock:
            self._documents.pop(document_key(source_type, source_id), None)

    async def count_documents(self, tenant_id: str | None = None) -> int:
        if tenant_id is None:
            return len(self._documents)
        return sum(1 for doc in self._documents.values() if doc.tenant_id == tenant_id)

    async def close(self) -> None:
        pass
