"""
Section Store Gateway.

Embeds each packed chunk and persists it as a Section row. Any embedding or
write failure aborts the ingest with IngestFailure; sections already written
by the same ingest are left in place.
"""

from __future__ import annotations

import re
from typing import Protocol
from uuid import UUID

from loguru import logger

from pathgen.db.models import Section
from pathgen.db.store import DocumentStore
from pathgen.exceptions import IngestFailure
from pathgen.processing.chunk_packer import PackedChunks

_NON_WORD = re.compile(r"[^\w\s-]")
_SEPARATORS = re.compile(r"[\s_-]+")


def slugify(text: str) -> str:
    """
    Derive a URL-safe slug from a heading.

    >>> slugify("Hello, World!  Foo")
    'hello-world-foo'
    """
    slug = _NON_WORD.sub("", text.lower())
    slug = _SEPARATORS.sub("-", slug)
    return slug.strip("-")


class EmbeddedText(Protocol):
    token_count: int

    def to_bytes(self) -> bytes: ...


class Embedder(Protocol):
    """Anything that can embed a text (see EmbeddingService)."""

    def embed(self, text: str) -> EmbeddedText: ...


class SectionStoreGateway:
    """Persists packed chunks with their embeddings."""

    def __init__(self, store: DocumentStore, embedder: Embedder):
        self.store = store
        self.embedder = embedder

    def store_chunks(self, document_id: UUID, packed: PackedChunks) -> list[Section]:
        """
        Embed and persist every chunk, in order.

        Raises:
            IngestFailure: on the first embedding or write failure
        """
        sections: list[Section] = []
        for index, (text, heading) in enumerate(packed):
            try:
                result = self.embedder.embed(text)
            except Exception as e:
                logger.error(f"Embedding failed for chunk {index} ({heading!r}): {e}")
                raise IngestFailure(f"Embedding failed for chunk {index}") from e

            try:
                section = self.store.add_section(
                    document_id=document_id,
                    heading=heading,
                    content=text,
                    slug=slugify(heading),
                    token_count=result.token_count,
                    embedding=result.to_bytes(),
                    chunk_index=index,
                )
            except Exception as e:
                logger.error(f"Section write failed for chunk {index} ({heading!r}): {e}")
                raise IngestFailure(f"Section write failed for chunk {index}") from e

            sections.append(section)

        logger.info(f"Stored {len(sections)} sections for document {document_id}")
        return sections
