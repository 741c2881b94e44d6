from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from classduel.db.models.base import Base


class DuelParticipant(Base):
    __tablename__ = "duel_participants"
    __table_args__ = (
        CheckConstraint(
            "result IS NULL OR result IN ('win','lose','draw')",
            name="ck_duel_participants_result",
        ),
        CheckConstraint("score >= 0", name="ck_duel_participants_score_non_negative"),
        UniqueConstraint("duel_id", "user_id", name="uq_duel_participants_duel_user"),
        Index("idx_duel_participants_user", "user_id"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    duel_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("duels.id"), nullable=False)
    user_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    invited_by_user_id: Mapped[UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=True
    )
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    result: Mapped[str | None] = mapped_column(String(8), nullable=True)
    joined_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    accepted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
