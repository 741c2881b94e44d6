from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from classduel.db.models.duel_rounds import DuelRound


class DuelRoundsRepo:
    @staticmethod
    async def create(session: AsyncSession, *, duel_round: DuelRound) -> DuelRound:
        session.add(duel_round)
        await session.flush()
        return duel_round

    @staticmethod
    async def list_for_duel(session: AsyncSession, *, duel_id: UUID) -> list[DuelRound]:
        stmt = (
            select(DuelRound)
            .where(DuelRound.duel_id == duel_id)
            .order_by(DuelRound.round_number.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def get_open_for_duel_for_update(
        session: AsyncSession,
        *,
        duel_id: UUID,
    ) -> DuelRound | None:
        stmt = (
            select(DuelRound)
            .where(
                DuelRound.duel_id == duel_id,
                DuelRound.ended_at.is_(None),
            )
            .order_by(DuelRound.round_number.desc())
            .limit(1)
            .with_for_update()
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_question_ids_for_duel(session: AsyncSession, *, duel_id: UUID) -> list[UUID]:
        stmt = (
            select(DuelRound.question_id)
            .where(DuelRound.duel_id == duel_id)
            .order_by(DuelRound.round_number.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def count_for_duel(session: AsyncSession, *, duel_id: UUID) -> int:
        stmt = select(func.count(DuelRound.id)).where(DuelRound.duel_id == duel_id)
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)
