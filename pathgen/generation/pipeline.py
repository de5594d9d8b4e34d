"""
Learning-path pipeline.

document -> sections -> qualifying sections -> LearningPath -> batched
generation -> persisted activities -> duration estimate.

Only missing documents and missing or too-short content abort a run. Batch
failures are compensated by fallback synthesis and a failed activity insert is
reported as zero activities created.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePath
from uuid import UUID

from loguru import logger

from config import get_settings
from pathgen.db.models import Document, LearningPath
from pathgen.db.store import DocumentStore
from pathgen.exceptions import DocumentNotFound, EmptyContent

from .client import GenerationClient
from .orchestrator import BatchOrchestrator, select_qualifying_sections
from .persistence import persist_activities
from .schemas import GeneratedActivity


@dataclass
class LearningPathResult:
    """Outcome of one learning-path generation run."""

    learning_path: LearningPath
    activities: list[GeneratedActivity] = field(default_factory=list)
    activities_created: int = 0
    used_fallback_batches: int = 0


def document_stem(document: Document) -> str:
    if not document.path:
        return "Untitled"
    return PurePath(document.path).stem or "Untitled"


class LearningPathGenerator:
    """Generate a learning path for a stored document."""

    def __init__(
        self,
        store: DocumentStore,
        client: GenerationClient,
        orchestrator: BatchOrchestrator | None = None,
        min_section_chars: int | None = None,
    ):
        self.store = store
        self.orchestrator = orchestrator or BatchOrchestrator(client)
        self.min_section_chars = min_section_chars or get_settings().min_section_chars

    def generate_learning_path(self, document_id: UUID) -> LearningPathResult:
        """
        Run the full pipeline for one document.

        Raises:
            DocumentNotFound: the document id does not exist
            EmptyContent: the document has no sections
            InsufficientContent: no section is long enough to generate from
        """
        document = self.store.get_document(document_id)
        if document is None:
            raise DocumentNotFound(document_id)

        sections = self.store.list_sections(document_id)
        if not sections:
            raise EmptyContent(f"Document {document_id} has no sections")

        qualifying = select_qualifying_sections(sections, self.min_section_chars)
        logger.info(
            f"Generating learning path for {document_id}: "
            f"{len(qualifying)}/{len(sections)} sections qualify"
        )

        stem = document_stem(document)
        learning_path = self.store.create_learning_path(
            document_id=document.id,
            title=f"Learning Path: {stem}",
            description=f"Generated from {document.path or stem}",
        )

        activities = self.orchestrator.generate(
            qualifying, system_context=f"Document: {document.path or stem}"
        )
        outcome = persist_activities(self.store, learning_path.id, activities)

        refreshed = self.store.get_learning_path(learning_path.id)
        return LearningPathResult(
            learning_path=refreshed or learning_path,
            activities=activities,
            activities_created=outcome.created,
            used_fallback_batches=self.orchestrator.last_run_fallback_batches,
        )
