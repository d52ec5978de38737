"""Fixtures for service tests.

Service tests run against in-process fakes: a dict-backed source store, a
keyword embedder and a scripted LLM. The document index is the real
InMemoryDocumentStore.
"""

from datetime import datetime

import pytest

from mindmesh.config import Config
from mindmesh.core.document_store.memory import InMemoryDocumentStore
from mindmesh.core.embeddings.base import Embedder, EmbeddingIntent
from mindmesh.core.llm.base import LLMProvider
from mindmesh.core.source_store.base import SourceStore
from mindmesh.models.document import DocumentMatch
from mindmesh.models.source import NoteRecord, SourceRecord, SourceType
from mindmesh.utils.exceptions import EmbeddingError, GenerationError

# Vocabulary of the keyword embedder, one dimension per word
KEYWORDS = ("grocer", "milk", "buy", "meeting", "report", "dentist")


class KeywordEmbedder(Embedder):
    """Embeds text as keyword counts plus a small constant component."""

    def __init__(self):
        self.calls: list[tuple[str, EmbeddingIntent]] = []
        self.fail_on: str | None = None

    async def embed(self, text: str, intent: EmbeddingIntent, **kwargs) -> list[float]:
        self.calls.append((text, intent))
        if self.fail_on and self.fail_on in text:
            raise EmbeddingError("embedding service unavailable")
        lowered = text.lower()
        return [float(lowered.count(word)) for word in KEYWORDS] + [0.05]

    @property
    def document_calls(self) -> list[str]:
        return [text for text, intent in self.calls if intent == EmbeddingIntent.DOCUMENT]

    async def close(self):
        pass


class FakeSourceStore(SourceStore):
    """Dict-backed source records and tags."""

    def __init__(self):
        self.records: dict[SourceType, list[SourceRecord]] = {t: [] for t in SourceType}
        self.tags: dict[tuple[SourceType, str], list[str]] = {}
        self.tag_lookups: list[tuple[SourceType, list[str]]] = []

    def add(self, record: SourceRecord, tags: list[str] | None = None) -> SourceRecord:
        self.records[record.source_type].append(record)
        if tags:
            self.tags[(record.source_type, record.id)] = list(tags)
        return record

    def replace(self, record: SourceRecord) -> None:
        items = self.records[record.source_type]
        self.records[record.source_type] = [r if r.id != record.id else record for r in items]

    def remove(self, source_type: SourceType, source_id: str) -> None:
        self.records[source_type] = [r for r in self.records[source_type] if r.id != source_id]

    async def initialize(self) -> None:
        pass

    async def list_records(self, tenant_id, user_id, source_type):
        return [
            record
            for record in self.records[source_type]
            if record.tenant_id == tenant_id and record.user_id == user_id
        ]

    async def tags_for_items(self, source_type, item_ids):
        self.tag_lookups.append((source_type, list(item_ids)))
        return {
            item_id: self.tags[(source_type, item_id)]
            for item_id in item_ids
            if (source_type, item_id) in self.tags
        }

    async def close(self) -> None:
        pass


class ScriptedLLM(LLMProvider):
    """
    LLM whose replies and failures are scripted per model.

    ``replies`` maps a model name to its answer text or to an exception.
    """

    def __init__(self, models: list[str] | None = None, replies: dict | None = None):
        self.models = models if models is not None else ["llama3.1:8b"]
        self.replies = replies or {}
        self.calls: list[dict] = []
        self.list_calls = 0
        self.list_error: Exception | None = None

    async def complete(self, prompt, system=None, model=None, max_tokens=1024, temperature=0.2, **kwargs):
        self.calls.append({"prompt": prompt, "system": system, "model": model})
        reply = self.replies.get(model, "I could not find anything.\nSOURCES_USED:")
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def list_models(self):
        self.list_calls += 1
        if self.list_error:
            raise self.list_error
        return list(self.models)

    async def close(self):
        pass


@pytest.fixture
def embedder():
    return KeywordEmbedder()


@pytest.fixture
def source_store():
    return FakeSourceStore()


@pytest.fixture
def document_store():
    return InMemoryDocumentStore()


@pytest.fixture
def llm():
    return ScriptedLLM()


@pytest.fixture
def make_llm():
    """Build a scripted LLM with given listed models and replies."""
    return ScriptedLLM


@pytest.fixture
def not_found_error():
    """Provider error for a model that does not exist."""

    def _make(model: str) -> GenerationError:
        return GenerationError(
            f"model {model} not found",
            context={"model": model, "response_text": f'model "{model}" not found, try pulling it first'},
        )

    return _make


@pytest.fixture
def quota_error():
    """Provider error for a spent quota."""

    def _make(model: str) -> GenerationError:
        return GenerationError(
            "quota",
            context={"model": model, "response_text": "429 RESOURCE_EXHAUSTED: Quota exceeded for metric"},
        )

    return _make


@pytest.fixture
def memory_config():
    """Default config with the in-memory document backend."""
    return Config(document_backend="memory")


@pytest.fixture
def make_note():
    """Build a note owned by t1/u1."""

    def _make(
        note_id: str,
        title: str | None,
        body: str | None = None,
        updated_at: datetime = datetime(2024, 5, 1, 12, 0, 0),
        tenant_id: str = "t1",
        user_id: str = "u1",
    ) -> NoteRecord:
        return NoteRecord(
            id=note_id,
            tenant_id=tenant_id,
            user_id=user_id,
            title=title,
            body=body,
            updated_at=updated_at,
        )

    return _make


@pytest.fixture
def make_match():
    """Build a retrieval match with a given similarity."""

    def _make(source_id: str, similarity: float, tenant_id: str = "t1", **fields) -> DocumentMatch:
        return DocumentMatch(
            source_type=fields.pop("source_type", SourceType.NOTE),
            source_id=source_id,
            tenant_id=tenant_id,
            title=fields.pop("title", f"Item {source_id}"),
            content=fields.pop("content", f"Title: Item {source_id}"),
            tags=fields.pop("tags", []),
            updated_at=fields.pop("updated_at", datetime(2024, 5, 1, 12, 0, 0)),
            similarity=similarity,
        )

    return _make
