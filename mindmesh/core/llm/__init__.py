"""
LLM provider abstraction layer for text generation.

Supported providers:
- Ollama (native SDK)
- OpenAI (official SDK)
"""
from mindmesh.core.llm.base import LLMProvider
from mindmesh.core.llm.ollama import OllamaLLM
from mindmesh.core.llm.openai import OpenAILLM

__all__ = [
    "LLMProvider",
    "OllamaLLM",
    "OpenAILLM",
]
