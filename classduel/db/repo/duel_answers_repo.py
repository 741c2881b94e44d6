from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from classduel.db.models.duel_answers import DuelAnswer


class DuelAnswersRepo:
    @staticmethod
    async def create(session: AsyncSession, *, answer: DuelAnswer) -> DuelAnswer:
        session.add(answer)
        await session.flush()
        return answer

    @staticmethod
    async def get_for_round_user(
        session: AsyncSession,
        *,
        round_id: UUID,
        user_id: UUID,
    ) -> DuelAnswer | None:
        stmt = select(DuelAnswer).where(
            DuelAnswer.round_id == round_id,
            DuelAnswer.user_id == user_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def count_for_round(session: AsyncSession, *, round_id: UUID) -> int:
        stmt = select(func.count(DuelAnswer.id)).where(DuelAnswer.round_id == round_id)
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)

    @staticmethod
    async def list_for_round(session: AsyncSession, *, round_id: UUID) -> list[DuelAnswer]:
        stmt = (
            select(DuelAnswer)
            .where(DuelAnswer.round_id == round_id)
            .order_by(DuelAnswer.answer_seq.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_for_rounds(
        session: AsyncSession,
        *,
        round_ids: Sequence[UUID],
    ) -> dict[UUID, list[DuelAnswer]]:
        grouped: dict[UUID, list[DuelAnswer]] = {round_id: [] for round_id in round_ids}
        if not round_ids:
            return grouped
        stmt = (
            select(DuelAnswer)
            .where(DuelAnswer.round_id.in_(tuple(round_ids)))
            .order_by(DuelAnswer.round_id.asc(), DuelAnswer.answer_seq.asc())
        )
        result = await session.execute(stmt)
        for answer in result.scalars().all():
            grouped.setdefault(answer.round_id, []).append(answer)
        return grouped
