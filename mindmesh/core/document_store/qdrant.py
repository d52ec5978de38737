"""
Qdrant document index implementation.

One point per source item. The point ID is derived from ``type:id`` so an
upsert for the same source always overwrites the same point.
"""

from datetime import datetime
from typing import Any
from uuid import NAMESPACE_DNS, uuid5

from qdrant_client import AsyncQdrantClient
from qdrant_client.models import (
    Distance,
    FieldCondition,
    Filter,
    HnswConfigDiff,
    MatchValue,
    PointStruct,
    VectorParams,
)

from mindmesh.core.document_store.base import DocumentStore
from mindmesh.models.document import DocumentMatch, DocumentRecord, document_key
from mindmesh.models.source import SourceType
from mindmesh.utils.exceptions import DocumentStoreError, ValidationError
from mindmesh.utils.logger import get_logger

logger = get_logger(__name__)

_WATERMARK_FIELDS = ["source_type", "source_id", "updated_at"]


class QdrantDocumentStore(DocumentStore):
    """
    Qdrant-backed document index.

    Features:
    - Cosine distance, HNSW indexing
    - Keyword payload indices on tenant_id, user_id and source_type
    - Tenant filter applied inside the vector query
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6333,
        collection_name: str = "documents",
        vector_size: int = 768,
        use_grpc: bool = False,
        hnsw_m: int = 16,
        hnsw_ef_construct: int = 100,
        on_disk: bool = False,
        scroll_batch_size: int = 256,
        timeout: int = 30,
    ):
        """
        Initialize Qdrant document store.

        Args:
            host: Qdrant host
            port: Qdrant port (6333 for HTTP, 6334 for gRPC)
            collection_name: Collection name
            vector_size: Embedding dimension
            use_grpc: Use gRPC connection
            hnsw_m: HNSW M parameter (connections per node)
            hnsw_ef_construct: HNSW ef_construct parameter
            on_disk: Store vectors on disk
            scroll_batch_size: Page size when reading watermarks
            timeout: Request timeout in seconds
        """
        self.host = host
        self.port = port
        self.collection_name = collection_name
        self.vector_size = vector_size
        self.use_grpc = use_grpc
        self.hnsw_m = hnsw_m
        self.hnsw_ef_construct = hnsw_ef_construct
        self.on_disk = on_disk
        self.scroll_batch_size = scroll_batch_size
        self.timeout = timeout
        self.client: AsyncQdrantClient | None = None

    @staticmethod
    def point_id(source_type: SourceType | str, source_id: str) -> str:
        """Stable point UUID for a source item."""
        return str(uuid5(NAMESPACE_DNS, document_key(source_type, source_id)))

    async def connect(self) -> None:
        """
        Establish connection to Qdrant.

        Raises:
            DocumentStoreError: If connection fails
        """
        if self.client is None:
            try:
                self.client = AsyncQdrantClient(
                    host=self.host,
                    port=self.port,
                    prefer_grpc=self.use_grpc,
                    timeout=self.timeout,
                )
            except Exception as e:
                logger.bind(host=self.host, port=self.port).error(
                    f"Failed to connect to Qdrant: {e}"
                )
                raise DocumentStoreError(f"Failed to connect to Qdrant: {e}") from e

    async def initialize(self) -> None:
        """
        Create the collection and payload indices if missing.

        Raises:
            DocumentStoreError: If initialization fails
        """
        try:
            await self.connect()

            collections = await self.client.get_collections()
            collection_names = [col.name for col in collections.collections]

            if self.collection_name not in collection_names:
                await self.client.create_collection(
                    collection_name=self.collection_name,
                    vectors_config=VectorParams(
                        size=self.vector_size,
                        distance=Distance.COSINE,
                        hnsw_config=HnswConfigDiff(
                            m=self.hnsw_m,
                            ef_construct=self.hnsw_ef_construct,
                        ),
                        on_disk=self.on_disk,
                    ),
                )

                for field_name in ("tenant_id", "user_id", "source_type"):
                    await self.client.create_payload_index(
                        collection_name=self.collection_name,
                        field_name=field_name,
                        field_schema="keyword",
                    )
        except Exception as e:
            logger.bind(collection=self.collection_name).error(
                f"Failed to initialize Qdrant collection: {e}"
            )
            raise DocumentStoreError(f"Failed to initialize Qdrant collection: {e}") from e

    def _document_to_payload(self, document: DocumentRecord) -> dict[str, Any]:
        return {
            "source_type": document.source_type.value,
            "source_id": document.source_id,
            "tenant_id": document.tenant_id,
            "user_id": document.user_id,
            "title": document.title,
            "content": document.content,
            "tags": list(document.tags),
            "updated_at": document.updated_at.isoformat(),
        }

    def _payload_to_match(self, payload: dict[str, Any], score: float) -> DocumentMatch:
        return DocumentMatch(
            source_type=SourceType(payload["source_type"]),
            source_id=payload["source_id"],
            tenant_id=payload["tenant_id"],
            title=payload.get("title") or "",
            content=payload.get("content") or "",
            tags=payload.get("tags") or [],
            updated_at=datetime.fromisoformat(payload["updated_at"]),
            similarity=score,
        )

    @staticmethod
    def _scope_filter(tenant_id: str, user_id: str | None = None) -> Filter:
        conditions = [FieldCondition(key="tenant_id", match=MatchValue(value=tenant_id))]
        if user_id is not None:
            conditions.append(FieldCondition(key="user_id", match=MatchValue(value=user_id)))
        return Filter(must=conditions)

    async def get_watermarks(self, tenant_id: str, user_id: str) -> dict[str, datetime]:
        try:
            await self.connect()

            watermarks: dict[str, datetime] = {}
            offset = None
            while True:
                points, offset = await self.client.scroll(
                    collection_name=self.collection_name,
                    scroll_filter=self._scope_filter(tenant_id, user_id),
                    limit=self.scroll_batch_size,
                    offset=offset,
                    with_payload=_WATERMARK_FIELDS,
                    with_vectors=False,
                )
                for point in points:
                    payload = point.payload or {}
                    key = document_key(payload["source_type"], payload["source_id"])
                    watermarks[key] = datetime.fromisoformat(payload["updated_at"])
                if offset is None:
                    break

            return watermarks
        except Exception as e:
            logger.bind(tenant_id=tenant_id, user_id=user_id).error(
                f"Failed to read watermarks: {e}"
            )
            raise DocumentStoreError(
                f"Failed to read watermarks: {e}",
                context={"tenant_id": tenant_id, "user_id": user_id},
            ) from e

    async def upsert_document(self, document: DocumentRecord) -> None:
        if not document.embedding:
            raise ValidationError(
                "Document must have an embedding", context={"key": document.key}
            )

        try:
            await self.connect()

            point = PointStruct(
                id=self.point_id(document.source_type, document.source_id),
                vector=document.embedding,
                payload=self._document_to_payload(document),
            )

            await self.client.upsert(
                collection_name=self.collection_name,
                points=[point],
                wait=True,
            )
        except Exception as e:
            logger.bind(key=document.key, tenant_id=document.tenant_id).error(
                f"Failed to upsert document {document.key}: {e}"
            )
            raise DocumentStoreError(
                f"Failed to upsert document: {e}", context={"key": document.key}
            ) from e

    async def match_documents(
        self, query_vector: list[float], k: int, tenant_id: str
    ) -> list[DocumentMatch]:
        try:
            await self.connect()

            response = await self.client.query_points(
                collection_name=self.collection_name,
                query=query_vector,
                limit=k,
                query_filter=self._scope_filter(tenant_id),
                with_payload=True,
                with_vectors=False,
            )
        except Exception as e:
            logger.bind(tenant_id=tenant_id, k=k).error(
                f"Document search failed: {e}"
            )
            raise DocumentStoreError(
                f"Document search failed: {e}", context={"tenant_id": tenant_id}
            ) from e

        return [self._payload_to_match(point.payload, point.score) for point in response.points]

    async def delete_document(self, source_type: SourceType, source_id: str) -> None:
        try:
            await self.connect()

            await self.client.delete(
                collection_name=self.collection_name,
                points_selector=[self.point_id(source_type, source_id)],
                wait=True,
            )
        except Exception as e:
            key = document_key(source_type, source_id)
            logger.bind(key=key).error(f"Failed to delete document {key}: {e}")
            raise DocumentStoreError(
                f"Failed to delete document: {e}", context={"key": key}
            ) from e

    async def count_documents(self, tenant_id: str | None = None) -> int:
        await self.connect()

        response = await self.client.count(
            collection_name=self.collection_name,
            count_filter=self._scope_filter(tenant_id) if tenant_id else None,
            exact=True,
        )
        return response.count

    async def close(self) -> None:
        """Close the connection to Qdrant."""
        if self.client is not None:
            await self.client.close()
            self.client = None
