from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from classduel.db.models.base import Base


class DuelAnswer(Base):
    __tablename__ = "duel_answers"
    __table_args__ = (
        CheckConstraint("selected_index >= -1", name="ck_duel_answers_selected_index_range"),
        CheckConstraint(
            "response_time_ms >= 0",
            name="ck_duel_answers_response_time_non_negative",
        ),
        CheckConstraint("answer_seq >= 1", name="ck_duel_answers_answer_seq_positive"),
        UniqueConstraint("round_id", "user_id", name="uq_duel_answers_round_user"),
        UniqueConstraint("round_id", "answer_seq", name="uq_duel_answers_round_seq"),
        Index("idx_duel_answers_duel_user", "duel_id", "user_id"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    round_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("duel_rounds.id"), nullable=False)
    duel_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("duels.id"), nullable=False)
    user_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    # 1-based submission order within the round, assigned under the duel row lock.
    answer_seq: Mapped[int] = mapped_column(Integer, nullable=False)
    selected_index: Mapped[int] = mapped_column(Integer, nullable=False)
    is_correct: Mapped[bool] = mapped_column(Boolean, nullable=False)
    response_time_ms: Mapped[int] = mapped_column(Integer, nullable=False)
    answered_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
