"""
Batch Orchestrator - drive generation over the qualifying sections.

Sections are processed in consecutive batches, strictly in order, with a
blocking pause between batches. A batch either yields exactly two normalized
activities per section or is replaced wholesale by fallback synthesis, so the
output always holds 2 * len(sections) activities.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence

from loguru import logger

from config import get_settings

from ..exceptions import GenerationBatchFailure, InsufficientContent
from .client import GenerationClient
from .fallback import fallback_description, fallback_title, synthesize_fallback
from .normalizer import normalize_activity
from .schemas import GeneratedActivity, SectionLike


def select_qualifying_sections(
    sections: Sequence[SectionLike],
    min_chars: int = 50,
) -> list[SectionLike]:
    """
    Keep sections with enough content to generate from.

    Raises:
        InsufficientContent: No section has at least min_chars characters
    """
    qualifying = [s for s in sections if len(s.content or "") >= min_chars]
    if not qualifying:
        raise InsufficientContent(
            f"No section has at least {min_chars} characters of content"
        )
    return qualifying


def _text(value) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


class BatchOrchestrator:
    """Sequential batch generation with per-batch fallback."""

    def __init__(
        self,
        client: GenerationClient,
        batch_size: int | None = None,
        activities_per_section: int | None = None,
        pause_seconds: float | None = None,
        excerpt_chars: int | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        config = get_settings().get_generation_config()
        self.client = client
        self.batch_size = batch_size or config["batch_size"]
        self.activities_per_section = activities_per_section or config["activities_per_section"]
        self.pause_seconds = config["batch_pause_seconds"] if pause_seconds is None else pause_seconds
        self.excerpt_chars = excerpt_chars or config["excerpt_chars"]
        self.sleep = sleep
        self.last_run_fallback_batches = 0

    def batches(self, sections: Sequence[SectionLike]) -> list[Sequence[SectionLike]]:
        return [
            sections[i:i + self.batch_size]
            for i in range(0, len(sections), self.batch_size)
        ]

    def build_contexts(self, batch: Sequence[SectionLike]) -> list[dict]:
        return [
            {
                "id": str(section.id),
                "heading": section.heading,
                "excerpt": (section.content or "")[:self.excerpt_chars],
            }
            for section in batch
        ]

    def generate(
        self,
        sections: Sequence[SectionLike],
        system_context: str = "",
    ) -> list[GeneratedActivity]:
        """
        Generate activities for every section.

        Args:
            sections: Qualifying sections, in document order
            system_context: Document-level context passed with every batch

        Returns:
            Exactly activities_per_section * len(sections) activities
        """
        context = system_context or ""
        activities: list[GeneratedActivity] = []
        self.last_run_fallback_batches = 0
        batches = self.batches(sections)

        for number, batch in enumerate(batches):
            if number > 0 and self.pause_seconds > 0:
                self.sleep(self.pause_seconds)

            start_index = number * self.batch_size
            logger.info(
                f"Generating batch {number + 1}/{len(batches)} ({len(batch)} sections)"
            )
            try:
                activities.extend(self._generate_batch(batch, start_index, context))
            except Exception as e:  # Any batch failure - replace the batch with fallback
                logger.warning(f"Batch {number + 1} failed, using fallback activities: {e}")
                self.last_run_fallback_batches += 1
                activities.extend(synthesize_fallback(batch, start_index))

        return activities

    def _generate_batch(
        self,
        batch: Sequence[SectionLike],
        start_index: int,
        system_context: str,
    ) -> list[GeneratedActivity]:
        expected = self.activities_per_section * len(batch)
        raw = self.client.generate(system_context, self.build_contexts(batch))

        if not isinstance(raw, list):
            raise GenerationBatchFailure(f"Expected a list of activities, got {type(raw).__name__}")
        if len(raw) < expected:
            raise GenerationBatchFailure(f"Expected {expected} activities, got {len(raw)}")
        if len(raw) > expected:
            logger.warning(f"Dropping {len(raw) - expected} extra activities")
            raw = raw[:expected]

        activities = []
        for i, item in enumerate(raw):
            offset = min(i // self.activities_per_section, len(batch) - 1)
            section = batch[offset]
            item = item if isinstance(item, dict) else {}
            activity_type, config = normalize_activity(item.get("type"), item.get("config"), section)
            activities.append(GeneratedActivity(
                title=_text(item.get("title"))
                or fallback_title(activity_type, section, start_index + offset),
                description=_text(item.get("description")) or fallback_description(section),
                type=activity_type,
                config=config,
                section_id=section.id,
            ))
        return activities
