"""Utility modules for MindMesh."""

from mindmesh.utils.exceptions import (
    ConfigurationError,
    DocumentStoreError,
    EmbeddingError,
    EmptyQuestionError,
    GenerationError,
    IndexSyncError,
    MindMeshError,
    SourceStoreError,
    StoreError,
    UnauthenticatedError,
    ValidationError,
)
from mindmesh.utils.logger import get_logger, scoped, setup_logging

__all__ = [
    # Logging
    "get_logger",
    "scoped",
    "setup_logging",
    # Exceptions
    "MindMeshError",
    "UnauthenticatedError",
    "ValidationError",
    "EmptyQuestionError",
    "ConfigurationError",
    "EmbeddingError",
    "GenerationError",
    "StoreError",
    "SourceStoreError",
    "DocumentStoreError",
    "IndexSyncError",
]
