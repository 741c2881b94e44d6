from __future__ import annotations

from collections.abc import Collection, Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from classduel.db.models.question_options import QuestionOption
from classduel.db.models.questions import Question
from classduel.db.models.quiz_questions import QuizQuestion
from classduel.db.models.quizzes import Quiz


class QuestionBankRepo:
    """Read-only access to published quiz content owned by the quiz subsystem."""

    @staticmethod
    async def get_question(session: AsyncSession, question_id: UUID) -> Question | None:
        return await session.get(Question, question_id)

    @staticmethod
    async def list_pool_question_ids(
        session: AsyncSession,
        *,
        subject_id: UUID,
        level_id: UUID | None = None,
        exclude_question_ids: Sequence[UUID] | None = None,
    ) -> list[UUID]:
        stmt = (
            select(QuizQuestion.question_id)
            .join(Quiz, Quiz.id == QuizQuestion.quiz_id)
            .where(
                Quiz.subject_id == subject_id,
                Quiz.is_published.is_(True),
            )
            .distinct()
            .order_by(QuizQuestion.question_id.asc())
        )
        if level_id is not None:
            stmt = stmt.where(Quiz.level_id == level_id)
        if exclude_question_ids:
            stmt = stmt.where(QuizQuestion.question_id.not_in(tuple(exclude_question_ids)))
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_options(session: AsyncSession, *, question_id: UUID) -> list[QuestionOption]:
        stmt = (
            select(QuestionOption)
            .where(QuestionOption.question_id == question_id)
            .order_by(QuestionOption.sort_order.asc(), QuestionOption.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def subject_has_quiz_for_classes(
        session: AsyncSession,
        *,
        subject_id: UUID,
        class_ids: Collection[UUID],
    ) -> bool:
        if not class_ids:
            return False
        stmt = select(func.count(Quiz.id)).where(
            Quiz.subject_id == subject_id,
            Quiz.class_id.in_(tuple(class_ids)),
        )
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0) > 0
