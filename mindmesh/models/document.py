"""
Indexed document model and retrieval result shapes.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from mindmesh.models.source import SourceType


def document_key(source_type: SourceType | str, source_id: str) -> str:
    """Composite key identifying a document: ``type:id``."""
    value = source_type.value if isinstance(source_type, SourceType) else source_type
    return f"{value}:{source_id}"


class DocumentRecord(BaseModel):
    """
    Searchable projection of one source record.

    Unique on (source_type, source_id). ``updated_at`` is copied from the source
    record; the document is current only while both timestamps are equal.
    """

    source_type: SourceType
    source_id: str
    tenant_id: str
    user_id: str
    title: str = ""
    content: str = Field(..., description="Canonical text produced by the normalizer")
    tags: list[str] = Field(default_factory=list)
    embedding: list[float] = Field(default_factory=list, description="Document embedding")
    updated_at: datetime = Field(..., description="Source watermark at indexing time")

    @property
    def key(self) -> str:
        return document_key(self.source_type, self.source_id)


class DocumentMatch(BaseModel):
    """A retrieved document (without its vector) and its similarity to the query."""

    source_type: SourceType
    source_id: str
    tenant_id: str
    title: str = ""
    content: str = ""
    tags: list[str] = Field(default_factory=list)
    updated_at: datetime
    similarity: float

    @classmethod
    def from_document(cls, document: DocumentRecord, similarity: float) -> "DocumentMatch":
        return cls(
            source_type=document.source_type,
            source_id=document.source_id,
            tenant_id=document.tenant_id,
            title=document.title,
            content=document.content,
            tags=list(document.tags),
            updated_at=document.updated_at,
            similarity=similarity,
        )
