"""
Error kinds raised by the ingest and generation pipelines.

Only document/content level errors are surfaced to callers. Generation errors
are contained per batch and compensated by fallback synthesis.
"""

from __future__ import annotations


class PathgenError(Exception):
    """Base class for pipeline errors."""
    pass


class DocumentNotFound(PathgenError):
    """Raised when a document id does not resolve to a stored document."""

    def __init__(self, document_id):
        self.document_id = document_id
        super().__init__(f"Document not found: {document_id}")


class EmptyContent(PathgenError):
    """Raised when a document yields no sections at all."""
    pass


class InsufficientContent(EmptyContent):
    """Raised when no section meets the minimum content length."""
    pass


class IngestFailure(PathgenError):
    """Raised when embedding or writing a section fails during ingest."""
    pass


class GenerationError(PathgenError):
    """Raised by a generation client on transport or parse failure."""
    pass


class GenerationBatchFailure(PathgenError):
    """A single generation batch failed; handled internally by fallback synthesis."""
    pass


class PersistenceFailure(PathgenError):
    """Raised by the document store when a write fails."""
    pass


class EmbeddingError(PathgenError):
    """Raised when the embedding model returns a vector of the wrong dimension."""
    pass
