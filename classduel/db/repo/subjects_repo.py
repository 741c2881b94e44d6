from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from classduel.db.models.levels import Level
from classduel.db.models.subjects import Subject
from classduel.db.models.topics import Topic


class SubjectsRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, subject_id: UUID) -> Subject | None:
        return await session.get(Subject, subject_id)

    @staticmethod
    async def get_level_by_id(session: AsyncSession, level_id: UUID) -> Level | None:
        return await session.get(Level, level_id)

    @staticmethod
    async def get_level_subject_id(session: AsyncSession, *, level_id: UUID) -> UUID | None:
        stmt = (
            select(Topic.subject_id)
            .join(Level, Level.topic_id == Topic.id)
            .where(Level.id == level_id)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_level_ids_for_subject(session: AsyncSession, *, subject_id: UUID) -> list[UUID]:
        stmt = (
            select(Level.id)
            .join(Topic, Topic.id == Level.topic_id)
            .where(Topic.subject_id == subject_id)
            .order_by(Topic.sort_order.asc(), Level.level_number.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
