from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from classduel.db.models.base import Base, PortableJSON


class DuelRound(Base):
    __tablename__ = "duel_rounds"
    __table_args__ = (
        CheckConstraint("round_number >= 1", name="ck_duel_rounds_round_number_positive"),
        CheckConstraint("time_limit_seconds >= 1", name="ck_duel_rounds_time_limit_positive"),
        CheckConstraint(
            "correct_index_snapshot >= -1",
            name="ck_duel_rounds_correct_index_range",
        ),
        UniqueConstraint("duel_id", "round_number", name="uq_duel_rounds_duel_round_number"),
        UniqueConstraint("duel_id", "question_id", name="uq_duel_rounds_duel_question"),
        Index("idx_duel_rounds_duel_open", "duel_id", "ended_at"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    duel_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("duels.id"), nullable=False)
    round_number: Mapped[int] = mapped_column(Integer, nullable=False)
    question_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("questions.id"), nullable=False)
    question_text_snapshot: Mapped[str] = mapped_column(Text, nullable=False)
    options_snapshot: Mapped[list[str]] = mapped_column(PortableJSON, nullable=False)
    # Source option ids in snapshot order; maps a submitted option id to its index.
    option_ids_snapshot: Mapped[list[str]] = mapped_column(PortableJSON, nullable=False)
    correct_index_snapshot: Mapped[int] = mapped_column(Integer, nullable=False)
    time_limit_seconds: Mapped[int] = mapped_column(Integer, nullable=False)
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
