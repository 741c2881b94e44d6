from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Index, Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from classduel.db.models.base import Base


class UserProgress(Base):
    __tablename__ = "user_progress"
    __table_args__ = (
        CheckConstraint("xp >= 0", name="ck_user_progress_xp_non_negative"),
        Index("idx_user_progress_user_subject", "user_id", "subject_id"),
        Index("idx_user_progress_user_level", "user_id", "level_id"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    user_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    subject_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("subjects.id"), nullable=False)
    topic_id: Mapped[UUID | None] = mapped_column(Uuid, ForeignKey("topics.id"), nullable=True)
    level_id: Mapped[UUID | None] = mapped_column(Uuid, ForeignKey("levels.id"), nullable=True)
    xp: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    has_read_study_text: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_activity_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
