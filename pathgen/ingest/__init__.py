"""Ingest path: segmentation, packing and section storage."""

from .section_store import SectionStoreGateway, slugify
from .service import IngestService, detect_document_type

__all__ = [
    "IngestService",
    "SectionStoreGateway",
    "detect_document_type",
    "slugify",
]
