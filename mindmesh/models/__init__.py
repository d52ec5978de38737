"""
Data models for MindMesh.

- Source records: NoteRecord, TaskRecord, FileRecord, ReminderRecord
- DocumentRecord: indexed projection of a source record
- DocumentMatch: retrieval result with similarity
- ChatSource, ChatMessage, AssistantAnswer: answer shapes returned to callers
"""

from mindmesh.models.chat import AssistantAnswer, ChatMessage, ChatRole, ChatSource
from mindmesh.models.document import DocumentMatch, DocumentRecord, document_key
from mindmesh.models.source import (
    RECORD_TYPES,
    FileRecord,
    NoteRecord,
    ReminderRecord,
    SourceRecord,
    SourceType,
    TaskRecord,
)

__all__ = [
    # Sources
    "SourceType",
    "SourceRecord",
    "NoteRecord",
    "TaskRecord",
    "FileRecord",
    "ReminderRecord",
    "RECORD_TYPES",
    # Documents
    "DocumentRecord",
    "DocumentMatch",
    "document_key",
    # Chat
    "ChatRole",
    "ChatSource",
    "ChatMessage",
    "AssistantAnswer",
]
