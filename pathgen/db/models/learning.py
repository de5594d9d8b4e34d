"""
Document store models for the ingest and generation pipelines.

Document and Section rows are written once at ingest and never updated.
LearningPath rows are written when generation starts; only the duration
estimate changes afterwards. Activity rows are bulk-written once per
generation run.

Column types are dialect-neutral so the same models run on PostgreSQL and
SQLite.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import JSON, ForeignKey, Integer, LargeBinary, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

# ========================================
# INGEST
# ========================================


class Document(Base):
    """An ingested source document."""

    __tablename__ = "documents"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    path: Mapped[str | None] = mapped_column(Text)
    type: Mapped[str] = mapped_column(Text, nullable=False, default="text")
    source: Mapped[str] = mapped_column(Text, nullable=False, default="upload")
    created_at: Mapped[datetime] = mapped_column(default=func.now())

    # Relationships
    sections: Mapped[list[Section]] = relationship(back_populates="document")


class Section(Base):
    """One stored chunk of a document, with its embedding."""

    __tablename__ = "sections"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    document_id: Mapped[UUID] = mapped_column(
        ForeignKey("documents.id", ondelete="CASCADE"), nullable=False, index=True
    )
    heading: Mapped[str] = mapped_column(Text, nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str] = mapped_column(Text, nullable=False, default="")
    chunk_index: Mapped[int] = mapped_column(Integer, default=0)
    token_count: Mapped[int] = mapped_column(Integer, default=0)
    # Opaque float32 buffer (see EmbeddingResult.to_bytes)
    embedding: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=func.now())

    # Relationships
    document: Mapped[Document] = relationship(back_populates="sections")


# ========================================
# GENERATION
# ========================================


class LearningPath(Base):
    """A generated learning path for one document."""

    __tablename__ = "learning_paths"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    duration_estimate_hours: Mapped[int] = mapped_column(Integer, default=0)
    document_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("documents.id", ondelete="SET NULL"), index=True
    )
    created_at: Mapped[datetime] = mapped_column(default=func.now())

    # Relationships
    activities: Mapped[list[Activity]] = relationship(back_populates="learning_path")


class Activity(Base):
    """A typed learning activity (slide, quiz, flashcard, embed, fill_blanks, matching)."""

    __tablename__ = "activities"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    type: Mapped[str] = mapped_column(Text, nullable=False)
    config: Mapped[dict] = mapped_column(JSON, nullable=False)
    path_id: Mapped[UUID] = mapped_column(
        ForeignKey("learning_paths.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(default=func.now())

    # Relationships
    learning_path: Mapped[LearningPath] = relationship(back_populates="activities")
