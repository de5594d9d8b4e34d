"""
Semantic module: section embeddings and similarity search.

Technology:
- sentence-transformers (all-MiniLM-L6-v2, 384-dim)
- numpy cosine similarity over stored float32 buffers
"""

from pathgen.semantic.embedding_service import EmbeddingResult, EmbeddingService
from pathgen.semantic.section_search import SectionMatch, SectionSearch

__all__ = [
    "EmbeddingService",
    "EmbeddingResult",
    "SectionSearch",
    "SectionMatch",
]
