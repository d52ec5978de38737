"""
Source records read from the application's item tables.

Each record is owned by exactly one (tenant, user) pair. ``updated_at`` is the
watermark compared against the indexed document to detect changes.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class SourceType(str, Enum):
    """Item collections that feed the document index."""

    NOTE = "note"
    TASK = "task"
    FILE = "file"
    REMINDER = "reminder"


class SourceRecord(BaseModel, ABC):
    """Fields shared by every source record. Only the concrete types are instantiable."""

    id: str = Field(..., description="Item ID within its collection")
    tenant_id: str = Field(..., description="Workspace the item belongs to")
    user_id: str = Field(..., description="Owner of the item")
    title: str | None = None
    updated_at: datetime = Field(..., description="Last modification time (sync watermark)")

    @property
    @abstractmethod
    def source_type(self) -> SourceType:
        """Collection this record comes from."""


class NoteRecord(SourceRecord):
    """Free-form note."""

    body: str | None = None

    @property
    def source_type(self) -> SourceType:
        return SourceType.NOTE


class TaskRecord(SourceRecord):
    """To-do item."""

    description: str | None = None
    status: str | None = None
    due_date: date | None = None

    @property
    def source_type(self) -> SourceType:
        return SourceType.TASK


class FileRecord(SourceRecord):
    """Uploaded file or saved link."""

    description: str | None = None
    file_type: str | None = None
    mime_type: str | None = None
    url: str | None = None
    original_name: str | None = None

    @property
    def source_type(self) -> SourceType:
        return SourceType.FILE


class ReminderRecord(SourceRecord):
    """Timed reminder."""

    remind_at: datetime | None = None

    @property
    def source_type(self) -> SourceType:
        return SourceType.REMINDER


RECORD_TYPES: dict[SourceType, type[SourceRecord]] = {
    SourceType.NOTE: NoteRecord,
    SourceType.TASK: TaskRecord,
    SourceType.FILE: FileRecord,
    SourceType.REMINDER: ReminderRecord,
}
