"""
Factory modules for creating MindMesh components.

Provides modular factories for LLM, Embedder, Document Store and Source Store.
"""

from mindmesh.core.factory.document_store_factory import DocumentStoreFactory
from mindmesh.core.factory.embedder_factory import EmbedderFactory
from mindmesh.core.factory.llm_factory import LLMFactory
from mindmesh.core.factory.source_store_factory import SourceStoreFactory

__all__ = [
    "LLMFactory",
    "EmbedderFactory",
    "DocumentStoreFactory",
    "SourceStoreFactory",
]
