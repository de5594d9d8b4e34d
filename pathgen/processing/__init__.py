"""
Processing module for document segmentation and chunk packing.

Turns raw document text into heading sections, then packs those sections into
size-bounded chunks that are embedded and stored as Section records.
"""

from .chunk_packer import (
    DEFAULT_MAX_CHUNK_SIZE,
    PackedChunks,
    pack_sections,
)
from .heading_segmenter import (
    HeadingSection,
    HeadingSegmenter,
    segment_headings,
)

__all__ = [
    "DEFAULT_MAX_CHUNK_SIZE",
    "HeadingSection",
    "HeadingSegmenter",
    "PackedChunks",
    "pack_sections",
    "segment_headings",
]
