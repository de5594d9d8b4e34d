"""
Section Search - rank stored sections against a free-text query.

Embeds the query with the same model used at ingest and scores each stored
section by cosine similarity. Sections without an embedding are skipped.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from loguru import logger

from config import get_settings
from pathgen.db.models import Section
from pathgen.db.store import DocumentStore
from pathgen.semantic.embedding_service import EmbeddingResult, EmbeddingService


@dataclass
class SectionMatch:
    """A stored section and its similarity to the query."""

    section: Section
    similarity: float


class SectionSearch:
    """Cosine-similarity search over stored section embeddings."""

    def __init__(self, store: DocumentStore, embedder: EmbeddingService):
        self.store = store
        self.embedder = embedder

    def search(
        self,
        query: str,
        document_id: UUID | None = None,
        limit: int | None = None,
        threshold: float | None = None,
    ) -> list[SectionMatch]:
        """
        Find the sections most similar to a query.

        Args:
            query: Free-text query
            document_id: Restrict to one document (all documents if None)
            limit: Maximum results (settings default if None)
            threshold: Minimum similarity (settings default if None)

        Returns:
            Matches above the threshold, most similar first
        """
        settings = get_settings()
        limit = limit if limit is not None else settings.search_match_count
        threshold = threshold if threshold is not None else settings.search_match_threshold

        sections = self.store.list_sections(document_id)
        if not sections:
            return []

        query_vector = self.embedder.embed(query).embedding
        matches = []
        for section in sections:
            if not section.embedding:
                continue
            vector = EmbeddingResult.from_bytes(section.embedding)
            if vector.shape != query_vector.shape:
                logger.warning(f"Skipping section {section.id}: embedding dimension mismatch")
                continue
            similarity = EmbeddingService.cosine_similarity(query_vector, vector)
            if similarity >= threshold:
                matches.append(SectionMatch(section=section, similarity=similarity))

        matches.sort(key=lambda m: m.similarity, reverse=True)
        logger.debug(f"Section search matched {len(matches)} sections for {query!r}")
        return matches[:limit]
