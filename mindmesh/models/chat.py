"""
Chat-facing result models.

Nothing here is persisted: sources and messages live for one request or one
client session.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from mindmesh.models.document import DocumentMatch
from mindmesh.models.source import SourceType


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ChatSource(BaseModel):
    """A source the model cited in its answer."""

    source_type: SourceType
    source_id: str
    title: str
    tags: list[str] = Field(default_factory=list)
    updated_at: datetime
    similarity: float

    @classmethod
    def from_match(cls, match: DocumentMatch) -> "ChatSource":
        return cls(
            source_type=match.source_type,
            source_id=match.source_id,
            title=match.title,
            tags=list(match.tags),
            updated_at=match.updated_at,
            similarity=match.similarity,
        )


class ChatMessage(BaseModel):
    """One turn of a client-side conversation."""

    role: ChatRole
    content: str
    sources: list[ChatSource] | None = None


class AssistantAnswer(BaseModel):
    """Result of one ``ask`` call."""

    answer: str
    sources: list[ChatSource] = Field(default_factory=list)
    model: str | None = Field(default=None, description="Chat model that produced the answer")

    def to_message(self) -> ChatMessage:
        return ChatMessage(role=ChatRole.ASSISTANT, content=self.answer, sources=self.sources)
