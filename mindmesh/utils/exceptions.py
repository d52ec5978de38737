"""
Custom exception hierarchy for MindMesh.

Provides structured error types for the answering pipeline.
All exceptions inherit from MindMeshError for easy catching.
"""


class MindMeshError(Exception):
    """
    Base exception for all MindMesh errors.
    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize MindMesh error.
        Args:
            message: Error message
            context: Optional context dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class UnauthenticatedError(MindMeshError):
    """
    Raised when an operation requires a caller identity and none is present.
    """

    pass


class ValidationError(MindMeshError):
    """
    Validation errors.
    Raised when input validation fails or data is invalid.
    """

    pass


class EmptyQuestionError(ValidationError):
    """
    Raised when the assistant is asked a blank question.
    """

    pass


class ConfigurationError(MindMeshError):
    """
    Configuration errors.
    Raised when configuration is invalid or missing required values.
    """

    pass


class EmbeddingError(MindMeshError):
    """
    Embedding generation errors.
    Raised when the provider is unreachable, misconfigured or returns no vector.
    """

    pass


class GenerationError(MindMeshError):
    """
    Text generation errors.
    Raised when the chat model call fails and no fallback model succeeds.
    """

    pass


class StoreError(MindMeshError):
    """
    Base exception for store operations.
    """

    pass


class SourceStoreError(StoreError):
    """
    Source record store errors.
    Raised when notes, tasks, files, reminders or tags cannot be read.
    """

    pass


class DocumentStoreError(StoreError):
    """
    Document index errors.
    Raised when the document index cannot be read, written or searched.
    """

    pass


class IndexSyncError(StoreError):
    """
    Synchronization errors between source records and the document index.
    """

    pass
