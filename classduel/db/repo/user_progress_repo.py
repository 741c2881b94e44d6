from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from classduel.db.models.user_progress import UserProgress


class UserProgressRepo:
    @staticmethod
    async def has_any_for_subject(
        session: AsyncSession,
        *,
        user_id: UUID,
        subject_id: UUID,
    ) -> bool:
        stmt = select(func.count(UserProgress.id)).where(
            UserProgress.user_id == user_id,
            UserProgress.subject_id == subject_id,
        )
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0) > 0

    @staticmethod
    async def list_cleared_level_ids(
        session: AsyncSession,
        *,
        user_id: UUID,
        subject_id: UUID,
    ) -> set[UUID]:
        stmt = select(UserProgress.level_id).where(
            UserProgress.user_id == user_id,
            UserProgress.subject_id == subject_id,
            UserProgress.level_id.is_not(None),
            or_(
                UserProgress.has_read_study_text.is_(True),
                UserProgress.completed_at.is_not(None),
            ),
        )
        result = await session.execute(stmt)
        return {level_id for level_id in result.scalars().all() if level_id is not None}
