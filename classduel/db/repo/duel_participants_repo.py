from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from classduel.db.models.duel_participants import DuelParticipant


class DuelParticipantsRepo:
    @staticmethod
    async def create(session: AsyncSession, *, participant: DuelParticipant) -> DuelParticipant:
        session.add(participant)
        await session.flush()
        return participant

    @staticmethod
    async def delete(session: AsyncSession, *, participant: DuelParticipant) -> None:
        await session.delete(participant)
        await session.flush()

    @staticmethod
    async def list_for_duel(session: AsyncSession, *, duel_id: UUID) -> list[DuelParticipant]:
        # Creator first, then invitees in join order.
        stmt = (
            select(DuelParticipant)
            .where(DuelParticipant.duel_id == duel_id)
            .order_by(
                DuelParticipant.invited_by_user_id.is_not(None).asc(),
                DuelParticipant.joined_at.asc(),
                DuelParticipant.id.asc(),
            )
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_for_duels(
        session: AsyncSession,
        *,
        duel_ids: Sequence[UUID],
    ) -> dict[UUID, list[DuelParticipant]]:
        grouped: dict[UUID, list[DuelParticipant]] = {duel_id: [] for duel_id in duel_ids}
        if not duel_ids:
            return grouped
        stmt = (
            select(DuelParticipant)
            .where(DuelParticipant.duel_id.in_(tuple(duel_ids)))
            .order_by(
                DuelParticipant.duel_id.asc(),
                DuelParticipant.invited_by_user_id.is_not(None).asc(),
                DuelParticipant.joined_at.asc(),
                DuelParticipant.id.asc(),
            )
        )
        result = await session.execute(stmt)
        for participant in result.scalars().all():
            grouped.setdefault(participant.duel_id, []).append(participant)
        return grouped

    @staticmethod
    async def get_for_duel_user(
        session: AsyncSession,
        *,
        duel_id: UUID,
        user_id: UUID,
    ) -> DuelParticipant | None:
        stmt = select(DuelParticipant).where(
            DuelParticipant.duel_id == duel_id,
            DuelParticipant.user_id == user_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def count_for_duel(session: AsyncSession, *, duel_id: UUID) -> int:
        stmt = select(func.count(DuelParticipant.id)).where(DuelParticipant.duel_id == duel_id)
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)
