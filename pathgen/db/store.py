"""
Document store gateway.

The only query shapes used by the pipelines: insert, select by id, select the
sections of a document, select activities of a path, and the one-off duration
update. Every method runs in its own session scope, so writes are committed
independently and nothing is rolled back across calls. Database errors on any
call, read or write, surface as PersistenceFailure.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from pathgen.db.database import get_session_factory, session_scope
from pathgen.db.models import Activity, Document, LearningPath, Section
from pathgen.exceptions import PersistenceFailure


class DocumentStore:
    """Thin persistence gateway over SQLAlchemy sessions."""

    def __init__(self, session_factory: sessionmaker[Session] | None = None):
        self._session_factory = session_factory

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._session_factory is None:
            self._session_factory = get_session_factory()
        return self._session_factory

    def _run(self, description: str, fn):
        try:
            with session_scope(self.session_factory) as session:
                return fn(session)
        except SQLAlchemyError as e:
            logger.error(f"Failed to {description}: {e}")
            raise PersistenceFailure(f"Failed to {description}") from e

    # ========================================
    # Documents & Sections
    # ========================================

    def create_document(self, path: str | None, doc_type: str, source: str) -> Document:
        def _insert(session: Session) -> Document:
            document = Document(path=path, type=doc_type, source=source)
            session.add(document)
            session.flush()
            session.refresh(document)
            return document

        return self._run("insert document", _insert)

    def get_document(self, document_id: UUID) -> Document | None:
        return self._run("load document", lambda session: session.get(Document, document_id))

    def add_section(
        self,
        document_id: UUID,
        heading: str,
        content: str,
        slug: str,
        token_count: int,
        embedding: bytes | None,
        chunk_index: int = 0,
    ) -> Section:
        def _insert(session: Session) -> Section:
            section = Section(
                document_id=document_id,
                heading=heading,
                content=content,
                slug=slug,
                token_count=token_count,
                embedding=embedding,
                chunk_index=chunk_index,
            )
            session.add(section)
            session.flush()
            session.refresh(section)
            return section

        return self._run("insert section", _insert)

    def list_sections(self, document_id: UUID | None = None) -> list[Section]:
        """Sections of one document in chunk order, or of all documents."""
        stmt = select(Section).order_by(Section.document_id, Section.chunk_index)
        if document_id is not None:
            stmt = stmt.where(Section.document_id == document_id)
        return self._run("list sections", lambda session: list(session.scalars(stmt)))

    # ========================================
    # Learning Paths & Activities
    # ========================================

    def create_learning_path(
        self,
        document_id: UUID,
        title: str,
        description: str | None = None,
    ) -> LearningPath:
        def _insert(session: Session) -> LearningPath:
            path = LearningPath(
                title=title,
                description=description,
                document_id=document_id,
                duration_estimate_hours=0,
            )
            session.add(path)
            session.flush()
            session.refresh(path)
            return path

        return self._run("insert learning path", _insert)

    def get_learning_path(self, path_id: UUID) -> LearningPath | None:
        return self._run("load learning path", lambda session: session.get(LearningPath, path_id))

    def add_activities(self, path_id: UUID, rows: list[dict[str, Any]]) -> list[Activity]:
        """Bulk insert activities for a learning path in a single transaction."""

        def _insert(session: Session) -> list[Activity]:
            activities = [
                Activity(
                    title=row["title"],
                    description=row.get("description"),
                    type=row["type"],
                    config=row["config"],
                    path_id=path_id,
                )
                for row in rows
            ]
            session.add_all(activities)
            session.flush()
            for activity in activities:
                session.refresh(activity)
            return activities

        return self._run("insert activities", _insert)

    def list_activities(self, path_id: UUID) -> list[Activity]:
        stmt = select(Activity).where(Activity.path_id == path_id)
        return self._run("list activities", lambda session: list(session.scalars(stmt)))

    def set_duration_estimate(self, path_id: UUID, hours: int) -> None:
        def _update(session: Session) -> None:
            session.execute(
                update(LearningPath)
                .where(LearningPath.id == path_id)
                .values(duration_estimate_hours=hours)
            )

        self._run("update learning path duration", _update)
