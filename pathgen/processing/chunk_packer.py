"""
Chunk Packer - merge heading sections into size-bounded chunks for storage.

Packing order: sections are stable-sorted by descending heading level and the
sorted list is then walked from its tail toward its head, so shallow headings
are packed first and, within one level, later sections come first.

A section is never split. A chunk is larger than the bound only when a single
section on its own is larger than the bound.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from .heading_segmenter import HeadingSection

DEFAULT_MAX_CHUNK_SIZE = 1500
SECTION_SEPARATOR = "\n\n"


@dataclass
class PackedChunks:
    """
    Parallel lists describing packed chunks.

    Attributes:
        chunks: Chunk text, one entry per chunk
        headings: Representative heading (first packed section's title) per chunk
        members: Indices into the input section list, per chunk
    """
    chunks: list[str] = field(default_factory=list)
    headings: list[str] = field(default_factory=list)
    members: list[list[int]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.chunks)

    def __iter__(self):
        return iter(zip(self.chunks, self.headings))


def render_section(section: HeadingSection) -> str:
    """Render a section as "title\\ncontent" for packing."""
    return f"{section.title}\n{section.content.strip()}"


def pack_sections(
    sections: list[HeadingSection],
    max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE,
) -> PackedChunks:
    """
    Pack sections into chunks of at most max_chunk_size characters.

    Args:
        sections: Sections from the heading segmenter
        max_chunk_size: Character bound per chunk

    Returns:
        PackedChunks with one entry per chunk
    """
    if max_chunk_size <= 0:
        raise ValueError(f"max_chunk_size must be positive, got {max_chunk_size}")

    ordered = sorted(range(len(sections)), key=lambda i: -sections[i].level)

    packed = PackedChunks()
    accumulator = ""
    heading = ""
    members: list[int] = []

    for index in reversed(ordered):
        section = sections[index]
        piece = render_section(section)

        if not members:
            accumulator, heading, members = piece, section.title, [index]
        elif len(accumulator) + len(SECTION_SEPARATOR) + len(piece) > max_chunk_size:
            packed.chunks.append(accumulator)
            packed.headings.append(heading)
            packed.members.append(members)
            accumulator, heading, members = piece, section.title, [index]
        else:
            accumulator += SECTION_SEPARATOR + piece
            members.append(index)

    if members:
        packed.chunks.append(accumulator)
        packed.headings.append(heading)
        packed.members.append(members)

    return packed
