"""
Embedding Service - Generate semantic embeddings using sentence-transformers.

Uses all-MiniLM-L6-v2 model (384 dimensions) by default. Each stored section
carries its embedding as an opaque float32 buffer plus the token count the
model's tokenizer reports for the chunk text.

References:
- https://www.sbert.net/docs/pretrained_models.html
- https://huggingface.co/sentence-transformers/all-MiniLM-L6-v2
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import numpy as np
from loguru import logger
from sentence_transformers import SentenceTransformer

from config import get_settings
from pathgen.exceptions import EmbeddingError


@dataclass
class EmbeddingResult:
    """Result of embedding generation for a single text."""

    text: str
    embedding: np.ndarray
    token_count: int
    model_name: str
    generated_at: datetime

    def to_bytes(self) -> bytes:
        """Convert embedding to bytes for binary database storage."""
        return self.embedding.astype(np.float32).tobytes()

    @staticmethod
    def from_bytes(data: bytes) -> np.ndarray:
        """Deserialize embedding from binary database storage."""
        return np.frombuffer(data, dtype=np.float32)

    @property
    def dimension(self) -> int:
        """Get embedding dimension."""
        return len(self.embedding)


class EmbeddingService:
    """
    Generate semantic embeddings for document chunks.

    The model is lazy-loaded on first use to avoid startup delays. A model
    object can be injected for tests.

    Example:
        >>> service = EmbeddingService()
        >>> result = service.embed("Routers forward packets between networks.")
        >>> result.embedding.shape, result.token_count
        ((384,), 9)
    """

    def __init__(
        self,
        model_name: str | None = None,
        model: SentenceTransformer | None = None,
        dimension: int | None = None,
    ):
        """
        Initialize the embedding service.

        Args:
            model_name: Sentence transformer model to use.
                        Defaults to config value (all-MiniLM-L6-v2).
            model: Preloaded model (skips lazy loading).
            dimension: Expected vector dimension.
                       Defaults to config value (384).
        """
        settings = get_settings()
        self.model_name = model_name or settings.embedding_model
        self.expected_dimension = dimension or settings.embedding_dimension
        self._model = model

    @property
    def model(self) -> SentenceTransformer:
        """
        Lazy load the model on first use.

        The model is downloaded from HuggingFace Hub on first run (~90MB).
        Subsequent runs use the cached version.
        """
        if self._model is None:
            logger.info(f"Loading embedding model: {self.model_name}")
            self._model = SentenceTransformer(self.model_name)
            logger.info(
                f"Embedding model loaded: {self.model_name} ({self.expected_dimension}-dim)"
            )
        return self._model

    def count_tokens(self, text: str) -> int:
        """Count tokens the way the model's tokenizer sees the text."""
        return len(self.model.tokenizer.encode(text, add_special_tokens=True))

    def embed(self, text: str) -> EmbeddingResult:
        """
        Generate the embedding and token count for a single text.

        Args:
            text: The text to generate an embedding for.

        Returns:
            EmbeddingResult containing the vector, token count and metadata.

        Raises:
            EmbeddingError: The model produced a vector of another dimension.
        """
        embedding = self.model.encode(text, convert_to_numpy=True)

        result = EmbeddingResult(
            text=text,
            embedding=embedding,
            token_count=self.count_tokens(text),
            model_name=self.model_name,
            generated_at=datetime.utcnow(),
        )
        if result.dimension != self.expected_dimension:
            raise EmbeddingError(
                f"{self.model_name} produced {result.dimension}-dim vectors, "
                f"expected {self.expected_dimension}"
            )
        return result

    @staticmethod
    def cosine_similarity(emb1: np.ndarray, emb2: np.ndarray) -> float:
        """
        Calculate cosine similarity between two embeddings.

        Returns:
            Cosine similarity score between -1 and 1.
        """
        dot_product = np.dot(emb1, emb2)
        norm1 = np.linalg.norm(emb1)
        norm2 = np.linalg.norm(emb2)

        if norm1 == 0 or norm2 == 0:
            return 0.0

        return float(dot_product / (norm1 * norm2))

