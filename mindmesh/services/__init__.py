"""
Services for MindMesh.

Answering pipeline, leaves first:
- normalize: Source record to canonical document text
- IndexSynchronizer: Keeps the document index in step with source records
- Retriever: Tenant-scoped similarity search
- SelectionPolicy: Threshold, cap and fallback over candidates
- build_prompt: Numbered context and citation instructions
- GenerationClient: Model resolution and fallback around the chat provider
- parse_answer: Citation extraction
- AssistantService: End-to-end ``ask``
"""

from mindmesh.services.answer_parser import ParsedAnswer, parse_answer
from mindmesh.services.assistant import AssistantService
from mindmesh.services.generation import (
    GenerationClient,
    GenerationFailure,
    GenerationResult,
    ModelCache,
    ModelResolver,
    classify_generation_failure,
)
from mindmesh.services.index_sync import IndexSynchronizer, SyncReport
from mindmesh.services.normalizer import normalize
from mindmesh.services.prompt_builder import build_prompt, format_sources_used
from mindmesh.services.retriever import Retriever
from mindmesh.services.selection import SelectionPolicy

__all__ = [
    "AssistantService",
    "GenerationClient",
    "GenerationFailure",
    "GenerationResult",
    "IndexSynchronizer",
    "ModelCache",
    "ModelResolver",
    "ParsedAnswer",
    "Retriever",
    "SelectionPolicy",
    "SyncReport",
    "build_prompt",
    "classify_generation_failure",
    "format_sources_used",
    "normalize",
    "parse_answer",
]
