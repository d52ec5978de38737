"""
Source record readers for MindMesh.
"""

from mindmesh.core.source_store.base import SourceStore
from mindmesh.core.source_store.sqlite_store import SQLiteSourceStore

__all__ = [
    "SourceStore",
    "SQLiteSourceStore",
]
