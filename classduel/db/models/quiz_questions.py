from __future__ import annotations

from uuid import UUID

from sqlalchemy import ForeignKey, Integer, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from classduel.db.models.base import Base


class QuizQuestion(Base):
    __tablename__ = "quiz_questions"
    __table_args__ = (
        UniqueConstraint("quiz_id", "question_id", name="uq_quiz_questions_quiz_question"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    quiz_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("quizzes.id"), nullable=False)
    question_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("questions.id"), nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
