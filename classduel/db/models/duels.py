from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from classduel.db.models.base import Base


class Duel(Base):
    __tablename__ = "duels"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending','active','completed')",
            name="ck_duels_status",
        ),
        CheckConstraint("best_of >= 1 AND best_of % 2 = 1", name="ck_duels_best_of_odd_positive"),
        Index("idx_duels_subject_status", "subject_id", "status"),
        Index("idx_duels_status_created", "status", "created_at"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    subject_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("subjects.id"), nullable=False)
    level_id: Mapped[UUID | None] = mapped_column(Uuid, ForeignKey("levels.id"), nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    best_of: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
