"""
Heading Segmenter for free-text documents.

Splits a document into ordered sections on markdown-style heading markers
(`#` through `######`). Text that precedes the first heading becomes a
synthetic level-0 "Introduction" section.

Sections are contiguous and non-overlapping: joining every section's heading
line (`marker`) and `content` reproduces the source text, except for a
whitespace-only preamble which is dropped.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

INTRODUCTION_TITLE = "Introduction"


@dataclass
class HeadingSection:
    """
    A span of the source text owned by one heading.

    Attributes:
        level: Heading depth (1-6), or 0 for the implicit introduction
        title: Heading text without the marker characters
        content: Text between the heading line and the next heading
        position: Character offset where the section starts in the source
        marker: The verbatim heading line including its newline ("" for the introduction)
    """
    level: int
    title: str
    content: str
    position: int
    marker: str = ""

    @property
    def is_introduction(self) -> bool:
        return self.level == 0


class HeadingSegmenter:
    """Parses raw text into HeadingSection objects in document order."""

    HEADING_PATTERN = re.compile(r"^(#{1,6})[ \t]+(.+?)[ \t]*$", re.MULTILINE)

    def segment(self, text: str) -> list[HeadingSection]:
        """
        Segment text on heading markers.

        Args:
            text: Full document text

        Returns:
            Ordered list of HeadingSection objects
        """
        if not text:
            return []

        matches = list(self.HEADING_PATTERN.finditer(text))
        sections: list[HeadingSection] = []

        preamble_end = matches[0].start() if matches else len(text)
        preamble = text[:preamble_end]
        if preamble.strip():
            sections.append(HeadingSection(
                level=0,
                title=INTRODUCTION_TITLE,
                content=preamble,
                position=0,
            ))

        for i, match in enumerate(matches):
            content_start = self._line_end(text, match.end())
            content_end = matches[i + 1].start() if i + 1 < len(matches) else len(text)

            sections.append(HeadingSection(
                level=len(match.group(1)),
                title=match.group(2).strip(),
                content=text[content_start:content_end],
                position=match.start(),
                marker=text[match.start():content_start],
            ))

        return sections

    @staticmethod
    def _line_end(text: str, index: int) -> int:
        """Return the offset just past the newline that ends the heading line."""
        if text.startswith("\n", index):
            return index + 1
        return index


def segment_headings(text: str) -> list[HeadingSection]:
    """Convenience wrapper around HeadingSegmenter.segment."""
    return HeadingSegmenter().segment(text)
