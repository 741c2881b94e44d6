from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from classduel.db.models.base import Base


class Quiz(Base):
    __tablename__ = "quizzes"
    __table_args__ = (
        Index("idx_quizzes_subject_published", "subject_id", "is_published"),
        Index("idx_quizzes_level", "level_id"),
        Index("idx_quizzes_class", "class_id"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    subject_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("subjects.id"), nullable=False)
    topic_id: Mapped[UUID | None] = mapped_column(Uuid, ForeignKey("topics.id"), nullable=True)
    level_id: Mapped[UUID | None] = mapped_column(Uuid, ForeignKey("levels.id"), nullable=True)
    class_id: Mapped[UUID | None] = mapped_column(Uuid, ForeignKey("classes.id"), nullable=True)
    title: Mapped[str] = mapped_column(String(256), nullable=False)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
