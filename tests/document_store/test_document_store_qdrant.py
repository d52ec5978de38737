"""
Tests for Qdrant document store implementation.
"""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from mindmesh.core.document_store.qdrant import QdrantDocumentStore
from mindmesh.models.source import SourceType
from mindmesh.utils.exceptions import DocumentStoreError, ValidationError


def _point(payload: dict, score: float | None = None):
    point = MagicMock()
    point.payload = payload
    point.score = score
    return point


@pytest.mark.unit
@pytest.mark.asyncio
class TestQdrantDocumentStore:
    """Test Qdrant document store with a mocked client."""

    async def test_initialization(self, qdrant_store):
        """Test store initialization."""
        assert qdrant_store.host == "localhost"
        assert qdrant_store.port == 6333
        assert qdrant_store.collection_name == "test_documents"
        assert qdrant_store.vector_size == 3
        assert qdrant_store.client is None

    async def test_point_id_stable(self):
        """Point IDs depend only on type and source id."""
        first = QdrantDocumentStore.point_id(SourceType.NOTE, "n1")

        assert first == QdrantDocumentStore.point_id("note", "n1")
        assert first != QdrantDocumentStore.point_id(SourceType.TASK, "n1")
        assert len(first) == 36

    async def test_connect_failure(self, qdrant_store):
        """Test connection failure handling."""
        with patch("mindmesh.core.document_store.qdrant.AsyncQdrantClient") as mock_client:
            mock_client.side_effect = Exception("Connection failed")
            with pytest.raises(DocumentStoreError, match="Failed to connect"):
                await qdrant_store.connect()

    async def test_initialize_new_collection(self, qdrant_store):
        """Test initialization with new collection."""
        mock_client = AsyncMock()
        mock_collections = MagicMock()
        mock_collections.collections = []
        mock_client.get_collections.return_value = mock_collections

        with patch("mindmesh.core.document_store.qdrant.AsyncQdrantClient", return_value=mock_client):
            await qdrant_store.initialize()

            mock_client.create_collection.assert_called_once()
            indexed = [
                call.kwargs["field_name"] for call in mock_client.create_payload_index.call_args_list
            ]
            assert indexed == ["tenant_id", "user_id", "source_type"]

    async def test_initialize_existing_collection(self, qdrant_store):
        """Test initialization with existing collection."""
        mock_client = AsyncMock()
        mock_collection = MagicMock()
        mock_collection.name = "test_documents"
        mock_collections = MagicMock()
        mock_collections.collections = [mock_collection]
        mock_client.get_collections.return_value = mock_collections

        with patch("mindmesh.core.document_store.qdrant.AsyncQdrantClient", return_value=mock_client):
            await qdrant_store.initialize()

            mock_client.create_collection.assert_not_called()

    async def test_upsert_document(self, qdrant_store, make_document):
        """Upsert writes one point with an ISO watermark."""
        qdrant_store.client = AsyncMock()
        document = make_document("n1")

        await qdrant_store.upsert_document(document)

        call = qdrant_store.client.upsert.call_args
        point = call.kwargs["points"][0]
        assert point.id == QdrantDocumentStore.point_id(SourceType.NOTE, "n1")
        assert point.payload["updated_at"] == "2024-05-01T12:00:00"
        assert point.payload["tenant_id"] == "t1"
        assert point.payload["source_type"] == "note"

    async def test_upsert_requires_embedding(self, qdrant_store, make_document):
        """Documents without vectors are rejected."""
        qdrant_store.client = AsyncMock()

        with pytest.raises(ValidationError):
            await qdrant_store.upsert_document(make_document("n1", embedding=[]))

        qdrant_store.client.upsert.assert_not_called()

    async def test_upsert_failure(self, qdrant_store, make_document):
        """Client errors become DocumentStoreError."""
        qdrant_store.client = AsyncMock()
        qdrant_store.client.upsert.side_effect = RuntimeError("disk full")

        with pytest.raises(DocumentStoreError, match="disk full"):
            await qdrant_store.upsert_document(make_document("n1"))

    async def test_get_watermarks_paginates(self, qdrant_store):
        """Watermarks are read across scroll pages."""
        qdrant_store.client = AsyncMock()
        qdrant_store.client.scroll.side_effect = [
            (
                [_point({"source_type": "note", "source_id": "n1", "updated_at": "2024-05-01T12:00:00"})],
                "next-page",
            ),
            (
                [_point({"source_type": "task", "source_id": "t9", "updated_at": "2024-05-02T08:30:00"})],
                None,
            ),
        ]

        watermarks = await qdrant_store.get_watermarks("t1", "u1")

        assert watermarks == {
            "note:n1": datetime(2024, 5, 1, 12, 0, 0),
            "task:t9": datetime(2024, 5, 2, 8, 30, 0),
        }
        assert qdrant_store.client.scroll.call_count == 2
        assert qdrant_store.client.scroll.call_args_list[1].kwargs["offset"] == "next-page"

    async def test_match_documents(self, qdrant_store):
        """Scored points map to matches."""
        qdrant_store.client = AsyncMock()
        response = MagicMock()
        response.points = [
            _point(
                {
                    "source_type": "note",
                    "source_id": "n1",
                    "tenant_id": "t1",
                    "user_id": "u1",
                    "title": "Groceries",
                    "content": "Title: Groceries",
                    "tags": ["home"],
                    "updated_at": "2024-05-01T12:00:00",
                },
                score=0.82,
            )
        ]
        qdrant_store.client.query_points.return_value = response

        matches = await qdrant_store.match_documents([1.0, 0.0, 0.0], k=8, tenant_id="t1")

        assert len(matches) == 1
        assert matches[0].source_type == SourceType.NOTE
        assert matches[0].similarity == 0.82
        assert matches[0].tags == ["home"]
        call = qdrant_store.client.query_points.call_args
        assert call.kwargs["limit"] == 8
        condition = call.kwargs["query_filter"].must[0]
        assert condition.key == "tenant_id"
        assert condition.match.value == "t1"

    async def test_match_documents_failure(self, qdrant_store):
        """Search errors become DocumentStoreError."""
        qdrant_store.client = AsyncMock()
        qdrant_store.client.query_points.side_effect = RuntimeError("timeout")

        with pytest.raises(DocumentStoreError):
            await qdrant_store.match_documents([1.0, 0.0, 0.0], k=8, tenant_id="t1")

    async def test_delete_document(self, qdrant_store):
        """Delete targets the derived point id."""
        qdrant_store.client = AsyncMock()

        await qdrant_store.delete_document(SourceType.FILE, "f1")

        call = qdrant_store.client.delete.call_args
        assert call.kwargs["points_selector"] == [QdrantDocumentStore.point_id(SourceType.FILE, "f1")]

    async def test_close(self, qdrant_store):
        """Close drops the client."""
        client = AsyncMock()
        qdrant_store.client = client

        await qdrant_store.close()

        client.close.assert_called_once()
        assert qdrant_store.client is None


@pytest.mark.integration
@pytest.mark.asyncio
class TestQdrantDocumentStoreIntegration:
    """
    Integration tests for Qdrant document store.
    Requires running Qdrant on localhost:6333.
    Run with: pytest -m integration
    """

    async def test_roundtrip(self, make_document):
        """Upsert, read watermarks, search and delete against a real server."""
        store = QdrantDocumentStore(collection_name="test_documents_integration", vector_size=3)

        try:
            await store.initialize()
        except DocumentStoreError as e:
            pytest.skip(f"Qdrant not available: {e}")

        try:
            document = make_document("n1")
            await store.upsert_document(document)

            watermarks = await store.get_watermarks("t1", "u1")
            assert watermarks["note:n1"] == document.updated_at

            matches = await store.match_documents([1.0, 0.0, 0.0], k=1, tenant_id="t1")
            assert matches[0].source_id == "n1"

            await store.delete_document(SourceType.NOTE, "n1")
        finally:
            await store.client.delete_collection("test_documents_integration")
            await store.close()
