"""
SQLite source store using aiosqlite.

Reads notes, tasks, files and reminders plus the item_tags relation from the
application's database.
"""

from pathlib import Path

import aiosqlite

from mindmesh.core.source_store.base import SourceStore
from mindmesh.models.source import RECORD_TYPES, SourceRecord, SourceType
from mindmesh.utils.exceptions import SourceStoreError
from mindmesh.utils.logger import get_logger

logger = get_logger(__name__)

# Table and selected columns per source type
_TABLES: dict[SourceType, tuple[str, tuple[str, ...]]] = {
    SourceType.NOTE: ("notes", ("id", "tenant_id", "user_id", "title", "body", "updated_at")),
    SourceType.TASK: (
        "tasks",
        ("id", "tenant_id", "user_id", "title", "description", "status", "due_date", "updated_at"),
    ),
    SourceType.FILE: (
        "files",
        (
            "id",
            "tenant_id",
            "user_id",
            "title",
            "description",
            "file_type",
            "mime_type",
            "url",
            "original_name",
            "updated_at",
        ),
    ),
    SourceType.REMINDER: (
        "reminders",
        ("id", "tenant_id", "user_id", "title", "remind_at", "updated_at"),
    ),
}

# SQLite caps bound parameters per statement
_MAX_IDS_PER_QUERY = 500

_SCHEMA = """
CREATE TABLE IF NOT EXISTS notes (
    id TEXT PRIMARY KEY,
    tenant_id TEXT NOT NULL,
    user_id TEXT NOT NULL,
    title TEXT,
    body TEXT,
    updated_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS tasks (
    id TEXT PRIMARY KEY,
    tenant_id TEXT NOT NULL,
    user_id TEXT NOT NULL,
    title TEXT,
    description TEXT,
    status TEXT,
    due_date TEXT,
    updated_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS files (
    id TEXT PRIMARY KEY,
    tenant_id TEXT NOT NULL,
    user_id TEXT NOT NULL,
    title TEXT,
    description TEXT,
    file_type TEXT,
    mime_type TEXT,
    url TEXT,
    original_name TEXT,
    updated_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS reminders (
    id TEXT PRIMARY KEY,
    tenant_id TEXT NOT NULL,
    user_id TEXT NOT NULL,
    title TEXT,
    remind_at TEXT,
    updated_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS tags (
    id TEXT PRIMARY KEY,
    tenant_id TEXT NOT NULL,
    name TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS item_tags (
    tag_id TEXT NOT NULL REFERENCES tags(id) ON DELETE CASCADE,
    item_type TEXT NOT NULL,
    item_id TEXT NOT NULL,
    PRIMARY KEY (tag_id, item_type, item_id)
);
CREATE INDEX IF NOT EXISTS idx_notes_scope ON notes(tenant_id, user_id);
CREATE INDEX IF NOT EXISTS idx_tasks_scope ON tasks(tenant_id, user_id);
CREATE INDEX IF NOT EXISTS idx_files_scope ON files(tenant_id, user_id);
CREATE INDEX IF NOT EXISTS idx_reminders_scope ON reminders(tenant_id, user_id);
CREATE INDEX IF NOT EXISTS idx_item_tags_item ON item_tags(item_type, item_id);
"""


class SQLiteSourceStore(SourceStore):
    """
    SQLite-backed reader for source records.

    ``initialize`` creates the tables when they are missing so a fresh
    database can be used for local development.
    """

    def __init__(self, db_path: str = "data/mindmesh.db"):
        """
        Initialize SQLite source store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        self.connection: aiosqlite.Connection | None = None

        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    async def connect(self) -> None:
        """Establish connection to SQLite."""
        if self.connection is None:
            self.connection = await aiosqlite.connect(self.db_path)
            await self.connection.execute("PRAGMA foreign_keys = ON")
            await self.connection.commit()

    async def initialize(self) -> None:
        """Initialize database schema."""
        await self.connect()
        await self.connection.executescript(_SCHEMA)
        await self.connection.commit()

    async def list_records(
        self, tenant_id: str, user_id: str, source_type: SourceType
    ) -> list[SourceRecord]:
        table, columns = _TABLES[source_type]
        record_cls = RECORD_TYPES[source_type]

        try:
            await self.connect()
            cursor = await self.connection.execute(
                f"SELECT {', '.join(columns)} FROM {table} "
                "WHERE tenant_id = ? AND user_id = ? ORDER BY id",
                (tenant_id, user_id),
            )
            rows = await cursor.fetchall()
            await cursor.close()
        except Exception as e:
            logger.bind(tenant_id=tenant_id, user_id=user_id).error(
                f"Failed to list {table}: {e}"
            )
            raise SourceStoreError(
                f"Failed to list {table}: {e}",
                context={"tenant_id": tenant_id, "source_type": source_type.value},
            ) from e

        return [record_cls(**dict(zip(columns, row))) for row in rows]

    async def tags_for_items(
        self, source_type: SourceType, item_ids: list[str]
    ) -> dict[str, list[str]]:
        tags: dict[str, list[str]] = {}
        if not item_ids:
            return tags

        try:
            await self.connect()
            for i in range(0, len(item_ids), _MAX_IDS_PER_QUERY):
                batch = item_ids[i : i + _MAX_IDS_PER_QUERY]
                placeholders = ", ".join("?" for _ in batch)
                cursor = await self.connection.execute(
                    "SELECT item_tags.item_id, tags.name FROM item_tags "
                    "JOIN tags ON tags.id = item_tags.tag_id "
                    f"WHERE item_tags.item_type = ? AND item_tags.item_id IN ({placeholders}) "
                    "ORDER BY item_tags.rowid",
                    (source_type.value, *batch),
                )
                rows = await cursor.fetchall()
                await cursor.close()

                for item_id, name in rows:
                    if name:
                        tags.setdefault(item_id, []).append(name)
        except Exception as e:
            logger.bind(source_type=source_type.value, items=len(item_ids)).error(
                f"Failed to load tags: {e}"
            )
            raise SourceStoreError(
                f"Failed to load tags: {e}", context={"source_type": source_type.value}
            ) from e

        return tags

    async def close(self) -> None:
        """Close the SQLite connection."""
        if self.connection is not None:
            await self.connection.close()
            self.connection = None
