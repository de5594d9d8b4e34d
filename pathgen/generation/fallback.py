"""
Fallback Synthesizer - deterministic activities when generation fails.

Each section gets two distinct activity types picked by its index in the full
qualifying-section list (index % 6 and (index + 3) % 6), so consecutive
sections rotate through all six types without any randomness. Configs are
built by the normalizer from an empty config, i.e. purely from the section
content.
"""

from __future__ import annotations

from collections.abc import Sequence

from .normalizer import normalize_activity
from .schemas import ACTIVITY_TYPES, ActivityType, GeneratedActivity, SectionLike

DESCRIPTION_CHARS = 100


def fallback_types(index: int) -> tuple[ActivityType, ActivityType]:
    """The two activity types assigned to the section at a global index."""
    count = len(ACTIVITY_TYPES)
    return ACTIVITY_TYPES[index % count], ACTIVITY_TYPES[(index + 3) % count]


def fallback_title(activity_type: ActivityType, section: SectionLike, index: int) -> str:
    heading = (section.heading or "").strip() or f"Section {index + 1}"
    return f"{activity_type.value.capitalize()}: {heading}"


def fallback_description(section: SectionLike) -> str:
    return f"{(section.content or '')[:DESCRIPTION_CHARS]}..."


def synthesize_fallback(
    sections: Sequence[SectionLike],
    start_index: int = 0,
) -> list[GeneratedActivity]:
    """
    Build two activities for every section of a failed batch.

    Args:
        sections: Sections of the failed batch, in order
        start_index: Index of the batch's first section in the qualifying list

    Returns:
        Exactly 2 * len(sections) activities
    """
    activities = []
    for offset, section in enumerate(sections):
        index = start_index + offset
        for activity_type in fallback_types(index):
            resolved, config = normalize_activity(activity_type, {}, section)
            activities.append(GeneratedActivity(
                title=fallback_title(resolved, section, index),
                description=fallback_description(section),
                type=resolved,
                config=config,
                section_id=section.id,
                from_fallback=True,
            ))
    return activities
