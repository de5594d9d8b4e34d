"""
Unit tests for the Embedding Service.

A stub model stands in for SentenceTransformer so the tests do not download
weights. Tests cover token counting, binary round trips and similarity.
"""
import numpy as np
import pytest

from pathgen.exceptions import EmbeddingError
from pathgen.semantic.embedding_service import EmbeddingResult, EmbeddingService


class StubTokenizer:
    def encode(self, text, add_special_tokens=True):
        tokens = text.split()
        return ["[CLS]", *tokens, "[SEP]"] if add_special_tokens else tokens


class StubModel:
    tokenizer = StubTokenizer()

    def encode(self, text, convert_to_numpy=True):
        return np.array([len(text), text.count(" "), 1.0], dtype=np.float32)


class TestEmbeddingService:
    """Tests for EmbeddingService class."""

    @pytest.fixture
    def service(self):
        """Create embedding service instance with a stub model."""
        return EmbeddingService(model=StubModel(), dimension=3)

    def test_embed_returns_result(self, service):
        result = service.embed("What is TCP?")

        assert isinstance(result, EmbeddingResult)
        assert result.dimension == 3
        assert result.model_name == "all-MiniLM-L6-v2"
        assert result.text == "What is TCP?"

    def test_token_count_includes_special_tokens(self, service):
        assert service.embed("What is TCP?").token_count == 5

    def test_dimension_defaults_to_settings(self):
        assert EmbeddingService(model=StubModel()).expected_dimension == 384

    def test_wrong_dimension_rejected(self):
        """A model producing other than the configured dimension is refused."""
        service = EmbeddingService(model=StubModel())

        with pytest.raises(EmbeddingError) as exc_info:
            service.embed("What is TCP?")

        assert "expected 384" in str(exc_info.value)


class TestEmbeddingResult:

    def test_bytes_round_trip(self):
        vector = np.array([0.5, -1.25, 3.0], dtype=np.float32)
        result = EmbeddingResult("t", vector, 1, "m", None)
        np.testing.assert_array_equal(EmbeddingResult.from_bytes(result.to_bytes()), vector)

    def test_float64_stored_as_float32(self):
        result = EmbeddingResult("t", np.array([1.0, 2.0], dtype=np.float64), 1, "m", None)
        assert len(result.to_bytes()) == 8


class TestCosineSimilarity:

    def test_identical_vectors(self):
        v = np.array([1.0, 2.0, 3.0])
        assert EmbeddingService.cosine_similarity(v, v) == pytest.approx(1.0)

    def test_orthogonal_vectors(self):
        assert EmbeddingService.cosine_similarity(np.array([1.0, 0.0]), np.array([0.0, 1.0])) == 0.0

    def test_zero_vector(self):
        assert EmbeddingService.cosine_similarity(np.zeros(3), np.ones(3)) == 0.0
