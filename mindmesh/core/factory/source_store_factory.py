"""
Factory for creating source record stores.
"""

from mindmesh.config import SourceStoreConfig
from mindmesh.core.source_store.base import SourceStore
from mindmesh.core.source_store.sqlite_store import SQLiteSourceStore


class SourceStoreFactory:
    """Factory for creating source stores from configuration."""

    @staticmethod
    def create(config: SourceStoreConfig) -> SourceStore:
        return SQLiteSourceStore(db_path=config.db_path)
