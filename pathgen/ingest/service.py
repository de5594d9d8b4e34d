"""
Document ingest: raw text -> heading sections -> packed chunks -> stored sections.
"""

from __future__ import annotations

from pathlib import PurePath

from loguru import logger

from config import get_settings
from pathgen.db.models import Document
from pathgen.db.store import DocumentStore
from pathgen.exceptions import EmptyContent, IngestFailure, PersistenceFailure
from pathgen.ingest.section_store import Embedder, SectionStoreGateway
from pathgen.processing.chunk_packer import pack_sections
from pathgen.processing.heading_segmenter import segment_headings

DOCUMENT_TYPES = {
    ".pdf": "pdf",
    ".docx": "docx",
    ".doc": "doc",
    ".txt": "txt",
    ".md": "md",
    ".markdown": "md",
}


def detect_document_type(path: str | None) -> str:
    """Map a document path to its type tag by file extension."""
    if not path:
        return "text"
    return DOCUMENT_TYPES.get(PurePath(path).suffix.lower(), "unknown")


class IngestService:
    """Creates a Document and its Sections from raw text."""

    def __init__(
        self,
        store: DocumentStore,
        embedder: Embedder,
        max_chunk_size: int | None = None,
    ):
        self.store = store
        self.gateway = SectionStoreGateway(store, embedder)
        self.max_chunk_size = max_chunk_size or get_settings().get_ingest_config()["max_chunk_size"]

    def ingest_document(
        self,
        raw_text: str,
        path: str | None = None,
        source: str = "upload",
    ) -> Document:
        """
        Ingest a document.

        Args:
            raw_text: Full document text
            path: Original file path or name, used for the document type
            source: Where the document came from

        Returns:
            The created Document

        Raises:
            EmptyContent: the text is blank or yields no sections
            IngestFailure: an embedding or section write failed
        """
        if not raw_text or not raw_text.strip():
            raise EmptyContent("Document text is empty")

        headings = segment_headings(raw_text)
        if not headings:
            raise EmptyContent("Document has no sections")

        packed = pack_sections(headings, self.max_chunk_size)
        logger.info(
            f"Segmented {len(headings)} sections into {len(packed)} chunks "
            f"(max {self.max_chunk_size} chars)"
        )

        try:
            document = self.store.create_document(
                path=path,
                doc_type=detect_document_type(path),
                source=source,
            )
        except PersistenceFailure as e:
            raise IngestFailure("Document write failed") from e

        self.gateway.store_chunks(document.id, packed)
        return document
