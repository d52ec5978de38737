"""
Embedder abstraction layer for text embeddings.

Supported providers:
- Ollama (native SDK)
- OpenAI (official SDK)
"""
from mindmesh.core.embeddings.base import Embedder, EmbeddingIntent
from mindmesh.core.embeddings.ollama import OllamaEmbedder
from mindmesh.core.embeddings.openai import OpenAIEmbedder

__all__ = [
    "Embedder",
    "EmbeddingIntent",
    "OllamaEmbedder",
    "OpenAIEmbedder",
]
