"""
Shared test fixtures for document store tests.
"""

from datetime import datetime

import pytest

from mindmesh.core.document_store.memory import InMemoryDocumentStore
from mindmesh.core.document_store.qdrant import QdrantDocumentStore
from mindmesh.models.document import DocumentRecord
from mindmesh.models.source import SourceType


@pytest.fixture
def memory_store():
    """Create in-memory document store for testing."""
    return InMemoryDocumentStore()


@pytest.fixture
def qdrant_store():
    """Create Qdrant document store for testing."""
    return QdrantDocumentStore(
        host="localhost",
        port=6333,
        collection_name="test_documents",
        vector_size=3,
    )


@pytest.fixture
def make_document():
    """Build a document with sensible defaults."""

    def _make(
        source_id: str = "n1",
        embedding: list[float] | None = None,
        tenant_id: str = "t1",
        user_id: str = "u1",
        source_type: SourceType = SourceType.NOTE,
        updated_at: datetime = datetime(2024, 5, 1, 12, 0, 0),
        title: str = "Groceries",
    ) -> DocumentRecord:
        return DocumentRecord(
            source_type=source_type,
            source_id=source_id,
            tenant_id=tenant_id,
            user_id=user_id,
            title=title,
            content=f"Title: {title}",
            tags=["home"],
            embedding=embedding if embedding is not None else [1.0, 0.0, 0.0],
            updated_at=updated_at,
        )

    return _make
