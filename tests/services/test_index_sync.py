"""
Tests for the index synchronizer.
"""

from datetime import datetime

import pytest

from mindmesh.models.source import SourceType, TaskRecord
from mindmesh.services.index_sync import IndexSynchronizer
from mindmesh.utils.exceptions import IndexSyncError


@pytest.fixture
def synchronizer(source_store, document_store, embedder):
    return IndexSynchronizer(
        source_store=source_store,
        document_store=document_store,
        embedder=embedder,
    )


@pytest.mark.unit
@pytest.mark.asyncio
class TestIndexSynchronizer:
    """Test incremental index sync."""

    async def test_first_sync_embeds_everything(
        self, synchronizer, source_store, document_store, embedder, make_note
    ):
        """Every record is embedded and upserted on first sync."""
        source_store.add(make_note("n1", "Groceries", "milk"), tags=["home"])
        source_store.add(
            TaskRecord(
                id="k1",
                tenant_id="t1",
                user_id="u1",
                title="Report",
                updated_at=datetime(2024, 5, 1),
            )
        )

        report = await synchronizer.sync("t1", "u1")

        assert report.total_scanned == 2
        assert report.total_embedded == 2
        assert report.scanned == {"note": 1, "task": 1, "file": 0, "reminder": 0}
        assert await document_store.count_documents("t1") == 2
        stored = await document_store.get_document(SourceType.NOTE, "n1")
        assert stored.content == "Title: Groceries\nBody: milk\nTags: home"
        assert stored.tags == ["home"]
        assert stored.updated_at == datetime(2024, 5, 1, 12, 0, 0)
        assert embedder.document_calls == [
            "Title: Groceries\nBody: milk\nTags: home",
            "Title: Report",
        ]

    async def test_second_sync_is_noop(self, synchronizer, source_store, embedder, make_note):
        """Nothing changed means zero embeddings."""
        source_store.add(make_note("n1", "Groceries", "milk"))
        source_store.add(make_note("n2", "Meeting", "agenda"))
        await synchronizer.sync("t1", "u1")
        embedder.calls.clear()

        report = await synchronizer.sync("t1", "u1")

        assert embedder.calls == []
        assert report.total_embedded == 0
        assert report.total_skipped == 2

    async def test_changed_record_reembedded_once(
        self, synchronizer, source_store, document_store, embedder, make_note
    ):
        """Exactly the changed record is re-embedded with the new watermark."""
        source_store.add(make_note("n1", "Groceries", "milk"))
        source_store.add(make_note("n2", "Meeting", "agenda"))
        await synchronizer.sync("t1", "u1")
        embedder.calls.clear()

        newer = datetime(2024, 5, 2, 8, 0, 0)
        source_store.replace(make_note("n1", "Groceries", "milk, eggs", updated_at=newer))

        report = await synchronizer.sync("t1", "u1")

        assert report.total_embedded == 1
        assert embedder.document_calls == ["Title: Groceries\nBody: milk, eggs"]
        stored = await document_store.get_document(SourceType.NOTE, "n1")
        assert stored.updated_at == newer
        assert stored.content == "Title: Groceries\nBody: milk, eggs"

    async def test_older_watermark_also_reembeds(
        self, synchronizer, source_store, embedder, make_note
    ):
        """Any mismatch, not only a newer time, counts as changed."""
        source_store.add(make_note("n1", "Groceries", updated_at=datetime(2024, 5, 2)))
        await synchronizer.sync("t1", "u1")
        embedder.calls.clear()

        source_store.replace(make_note("n1", "Groceries", updated_at=datetime(2024, 4, 1)))
        report = await synchronizer.sync("t1", "u1")

        assert report.total_embedded == 1

    async def test_one_tag_lookup_per_type(self, synchronizer, source_store, make_note):
        """Tags are fetched in one batch per non-empty type."""
        for i in range(5):
            source_store.add(make_note(f"n{i}", f"Note {i}"))

        await synchronizer.sync("t1", "u1")

        assert source_store.tag_lookups == [
            (SourceType.NOTE, ["n0", "n1", "n2", "n3", "n4"])
        ]

    async def test_scope_isolation(self, synchronizer, source_store, document_store, make_note):
        """Only the caller's records are indexed."""
        source_store.add(make_note("mine", "Groceries"))
        source_store.add(make_note("other-user", "Groceries", user_id="u2"))
        source_store.add(make_note("other-tenant", "Groceries", tenant_id="t2"))

        await synchronizer.sync("t1", "u1")

        assert await document_store.get_watermarks("t1", "u1") == {
            "note:mine": datetime(2024, 5, 1, 12, 0, 0)
        }
        assert await document_store.count_documents() == 1

    async def test_embedding_failure_aborts(
        self, synchronizer, source_store, document_store, embedder, make_note
    ):
        """A failing embed aborts the sync; earlier upserts stay."""
        source_store.add(make_note("n1", "Groceries"))
        source_store.add(make_note("n2", "Broken"))
        source_store.add(make_note("n3", "Never reached"))
        embedder.fail_on = "Broken"

        with pytest.raises(IndexSyncError) as exc_info:
            await synchronizer.sync("t1", "u1")

        assert exc_info.value.__cause__ is not None
        assert await document_store.count_documents() == 1
        assert await document_store.get_document(SourceType.NOTE, "n1") is not None

    async def test_retry_after_failure_converges(
        self, synchronizer, source_store, document_store, embedder, make_note
    ):
        """A retry picks up exactly the items that were not indexed."""
        source_store.add(make_note("n1", "Groceries"))
        source_store.add(make_note("n2", "Broken"))
        embedder.fail_on = "Broken"
        with pytest.raises(IndexSyncError):
            await synchronizer.sync("t1", "u1")

        embedder.fail_on = None
        embedder.calls.clear()
        report = await synchronizer.sync("t1", "u1")

        assert report.total_embedded == 1
        assert await document_store.count_documents() == 2

    async def test_deleted_source_kept_by_default(
        self, synchronizer, source_store, document_store, make_note
    ):
        """Without pruning, documents of deleted sources stay."""
        source_store.add(make_note("n1", "Groceries"))
        await synchronizer.sync("t1", "u1")

        source_store.remove(SourceType.NOTE, "n1")
        report = await synchronizer.sync("t1", "u1")

        assert report.pruned == 0
        assert await document_store.count_documents() == 1

    async def test_deleted_source_pruned_when_enabled(
        self, source_store, document_store, embedder, make_note
    ):
        """With pruning, documents of deleted sources are removed."""
        synchronizer = IndexSynchronizer(
            source_store=source_store,
            document_store=document_store,
            embedder=embedder,
            prune_deleted=True,
        )
        source_store.add(make_note("n1", "Groceries"))
        source_store.add(make_note("n2", "Meeting"))
        await synchronizer.sync("t1", "u1")

        source_store.remove(SourceType.NOTE, "n1")
        report = await synchronizer.sync("t1", "u1")

        assert report.pruned == 1
        assert await document_store.get_document(SourceType.NOTE, "n1") is None
        assert await document_store.get_document(SourceType.NOTE, "n2") is not None

    async def test_content_cap_applied(self, source_store, document_store, embedder, make_note):
        """The configured cap bounds stored content."""
        synchronizer = IndexSynchronizer(
            source_store=source_store,
            document_store=document_store,
            embedder=embedder,
            max_content_length=50,
        )
        source_store.add(make_note("n1", "Groceries", "milk " * 100))

        await synchronizer.sync("t1", "u1")

        stored = await document_store.get_document(SourceType.NOTE, "n1")
        assert len(stored.content) == 50
        assert stored.content.endswith("...")
