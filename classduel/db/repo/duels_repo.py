from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from classduel.db.models.duel_participants import DuelParticipant
from classduel.db.models.duels import Duel


class DuelsRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, duel_id: UUID) -> Duel | None:
        return await session.get(Duel, duel_id)

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, duel_id: UUID) -> Duel | None:
        stmt = select(Duel).where(Duel.id == duel_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create(session: AsyncSession, *, duel: Duel) -> Duel:
        session.add(duel)
        await session.flush()
        return duel

    @staticmethod
    async def list_for_user(
        session: AsyncSession,
        *,
        user_id: UUID,
        status: str | None = None,
        limit: int = 50,
    ) -> list[Duel]:
        resolved_limit = max(1, int(limit))
        stmt = (
            select(Duel)
            .join(DuelParticipant, DuelParticipant.duel_id == Duel.id)
            .where(DuelParticipant.user_id == user_id)
            .order_by(func.coalesce(Duel.started_at, Duel.created_at).desc(), Duel.id.asc())
            .limit(resolved_limit)
        )
        if status is not None:
            stmt = stmt.where(Duel.status == status)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_pending_invitations_for_user(
        session: AsyncSession,
        *,
        user_id: UUID,
        pending_status: str,
    ) -> list[Duel]:
        stmt = (
            select(Duel)
            .join(DuelParticipant, DuelParticipant.duel_id == Duel.id)
            .where(
                Duel.status == pending_status,
                DuelParticipant.user_id == user_id,
                DuelParticipant.invited_by_user_id.is_not(None),
                DuelParticipant.accepted_at.is_(None),
            )
            .order_by(Duel.created_at.desc(), Duel.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_completed_participations(
        session: AsyncSession,
        *,
        user_id: UUID,
        completed_status: str,
        subject_id: UUID | None = None,
    ) -> list[tuple[DuelParticipant, Duel]]:
        stmt = (
            select(DuelParticipant, Duel)
            .join(Duel, Duel.id == DuelParticipant.duel_id)
            .where(
                DuelParticipant.user_id == user_id,
                Duel.status == completed_status,
            )
            .order_by(Duel.ended_at.desc(), Duel.id.asc())
        )
        if subject_id is not None:
            stmt = stmt.where(Duel.subject_id == subject_id)
        result = await session.execute(stmt)
        return [(participant, duel) for participant, duel in result.all()]

    @staticmethod
    async def list_user_ids_in_status(
        session: AsyncSession,
        *,
        user_ids: list[UUID],
        status: str,
    ) -> set[UUID]:
        if not user_ids:
            return set()
        stmt = (
            select(DuelParticipant.user_id)
            .join(Duel, Duel.id == DuelParticipant.duel_id)
            .where(
                DuelParticipant.user_id.in_(tuple(user_ids)),
                Duel.status == status,
            )
            .distinct()
        )
        result = await session.execute(stmt)
        return set(result.scalars().all())
