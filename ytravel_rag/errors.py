"""
Exception hierarchy for the RAG backend.

Build-time errors (SourceReadError, EmbeddingBatchError, CacheCorruptError) are
logged and never crash the process. Request-time errors are translated by the
HTTP layer into distinct responses.
"""

from typing import Any, Dict, Optional


class TravelRagError(Exception):
    """Base exception carrying a details dict for logging and responses."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class SourceReadError(TravelRagError):
    """A corpus source file is unreadable or unparsable."""
    pass


class EmbeddingBatchError(TravelRagError):
    """An embedding batch failed during a corpus build."""

    def __init__(self, message: str, batch_index: int, total_batches: int, embedded_count: int):
        super().__init__(message, {
            'batch_index': batch_index,
            'total_batches': total_batches,
            'embedded_count': embedded_count,
        })
        self.batch_index = batch_index
        self.total_batches = total_batches
        self.embedded_count = embedded_count


class CacheCorruptError(TravelRagError):
    """The persisted embedding cache exists but cannot be trusted."""
    pass


class DimensionMismatchError(TravelRagError):
    """Query vector dimensionality differs from the corpus."""
    pass


class NotReadyError(TravelRagError):
    """The corpus has not been built or loaded yet."""
    pass


class UserInputError(TravelRagError):
    """A required request field is missing or empty."""
    pass


class UpstreamDependencyError(TravelRagError):
    """An external provider call failed while serving a request."""
    pass
