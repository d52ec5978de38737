"""
Index Synchronizer - keeps the document index in step with source records.

For each source type the synchronizer lists the caller's records, resolves
their tags in one batched lookup, and compares each record's ``updated_at``
with the watermark stored on its document. Only new or changed records are
normalized, embedded and upserted.

There is no lock and no transaction spanning a sync. Every upsert is
idempotent and keyed by (source_type, source_id), so concurrent syncs converge
and a retry after a failure re-detects the same stale items.
"""

from pydantic import BaseModel, Field

from mindmesh.core.document_store.base import DocumentStore
from mindmesh.core.embeddings.base import Embedder, EmbeddingIntent
from mindmesh.core.source_store.base import SourceStore
from mindmesh.models.document import DocumentRecord, document_key
from mindmesh.models.source import SourceType
from mindmesh.services.normalizer import MAX_CONTENT_LENGTH, document_title, normalize
from mindmesh.utils.exceptions import IndexSyncError
from mindmesh.utils.logger import get_logger, scoped

logger = get_logger(__name__)

SYNC_ORDER = (SourceType.NOTE, SourceType.TASK, SourceType.FILE, SourceType.REMINDER)


class SyncReport(BaseModel):
    """Counts for one ``sync`` call."""

    scanned: dict[str, int] = Field(default_factory=dict)
    embedded: dict[str, int] = Field(default_factory=dict)
    pruned: int = 0

    @property
    def total_scanned(self) -> int:
        return sum(self.scanned.values())

    @property
    def total_embedded(self) -> int:
        return sum(self.embedded.values())

    @property
    def total_skipped(self) -> int:
        return self.total_scanned - self.total_embedded


class IndexSynchronizer:
    """
    Reconciles the document index with a tenant+user's source records.

    Deleted sources leave their documents in place unless ``prune_deleted``
    is enabled, in which case documents of the scope whose source no longer
    exists are removed at the end of the sync.
    """

    def __init__(
        self,
        source_store: SourceStore,
        document_store: DocumentStore,
        embedder: Embedder,
        max_content_length: int = MAX_CONTENT_LENGTH,
        prune_deleted: bool = False,
    ):
        """
        Initialize synchronizer.

        Args:
            source_store: Reader for notes, tasks, files, reminders and tags
            document_store: Document index
            embedder: Embedder used with DOCUMENT intent
            max_content_length: Content cap passed to the normalizer
            prune_deleted: Delete documents whose source record is gone
        """
        self.source_store = source_store
        self.document_store = document_store
        self.embedder = embedder
        self.max_content_length = max_content_length
        self.prune_deleted = prune_deleted

    async def sync(self, tenant_id: str, user_id: str) -> SyncReport:
        """
        Bring every document of the scope up to date.

        Args:
            tenant_id: Workspace ID
            user_id: Owner ID

        Returns:
            SyncReport with per-type counts

        Raises:
            IndexSyncError: If reading, embedding or writing fails. Documents
                upserted before the failure are kept.
        """
        report = SyncReport()
        seen_keys: set[str] = set()

        try:
            for source_type in SYNC_ORDER:
                await self._sync_type(tenant_id, user_id, source_type, report, seen_keys)

            if self.prune_deleted:
                report.pruned = await self._prune(tenant_id, user_id, seen_keys)
        except IndexSyncError:
            raise
        except Exception as e:
            scoped(logger, tenant_id, user_id).bind(
                error_type=type(e).__name__,
                embedded_before_failure=report.total_embedded,
            ).error(f"Index sync failed: {e}")
            raise IndexSyncError(
                f"Index sync failed: {e}",
                context={"tenant_id": tenant_id, "user_id": user_id},
            ) from e

        scoped(logger, tenant_id, user_id).info(
            f"Index sync done: {report.total_embedded} embedded, "
            f"{report.total_skipped} unchanged, {report.pruned} pruned"
        )
        return report

    async def _sync_type(
        self,
        tenant_id: str,
        user_id: str,
        source_type: SourceType,
        report: SyncReport,
        seen_keys: set[str],
    ) -> None:
        records = await self.source_store.list_records(tenant_id, user_id, source_type)
        report.scanned[source_type.value] = len(records)
        report.embedded[source_type.value] = 0
        if not records:
            return

        tags_by_item = await self.source_store.tags_for_items(
            source_type, [record.id for record in records]
        )
        watermarks = await self.document_store.get_watermarks(tenant_id, user_id)

        for record in records:
            key = document_key(source_type, record.id)
            seen_keys.add(key)

            if watermarks.get(key) == record.updated_at:
                continue

            tags = tags_by_item.get(record.id, [])
            content = normalize(source_type, record, tags, max_length=self.max_content_length)
            embedding = await self.embedder.embed(content, EmbeddingIntent.DOCUMENT)

            await self.document_store.upsert_document(
                DocumentRecord(
                    source_type=source_type,
                    source_id=record.id,
                    tenant_id=tenant_id,
                    user_id=user_id,
                    title=document_title(record),
                    content=content,
                    tags=tags,
                    embedding=embedding,
                    updated_at=record.updated_at,
                )
            )
            report.embedded[source_type.value] += 1

            logger.bind(tenant_id=tenant_id, key=key).debug(
                f"Indexed {key}"
            )

    async def _prune(self, tenant_id: str, user_id: str, seen_keys: set[str]) -> int:
        watermarks = await self.document_store.get_watermarks(tenant_id, user_id)
        pruned = 0
        for key in watermarks:
            if key in seen_keys:
                continue
            source_type, source_id = key.split(":", 1)
            await self.document_store.delete_document(SourceType(source_type), source_id)
            pruned += 1
        return pruned
