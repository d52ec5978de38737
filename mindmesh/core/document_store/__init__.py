"""
Document index implementations for MindMesh.

Provides abstract base and concrete implementations for the searchable index.
"""

from mindmesh.core.document_store.base import DocumentStore
from mindmesh.core.document_store.memory import InMemoryDocumentStore
from mindmesh.core.document_store.qdrant import QdrantDocumentStore

__all__ = [
    "DocumentStore",
    "InMemoryDocumentStore",
    "QdrantDocumentStore",
]
