from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from classduel.db.models.class_memberships import ClassMembership
from classduel.db.models.users import User


class ClassMembershipsRepo:
    @staticmethod
    async def list_class_ids_for_user(session: AsyncSession, *, user_id: UUID) -> set[UUID]:
        stmt = select(ClassMembership.class_id).where(ClassMembership.user_id == user_id)
        result = await session.execute(stmt)
        return set(result.scalars().all())

    @staticmethod
    async def users_share_class(
        session: AsyncSession,
        *,
        user_a_id: UUID,
        user_b_id: UUID,
    ) -> bool:
        user_a_classes = await ClassMembershipsRepo.list_class_ids_for_user(
            session, user_id=user_a_id
        )
        if not user_a_classes:
            return False
        user_b_classes = await ClassMembershipsRepo.list_class_ids_for_user(
            session, user_id=user_b_id
        )
        return not user_a_classes.isdisjoint(user_b_classes)

    @staticmethod
    async def list_classmates(session: AsyncSession, *, user_id: UUID) -> list[User]:
        own_classes = (
            select(ClassMembership.class_id)
            .where(ClassMembership.user_id == user_id)
            .scalar_subquery()
        )
        classmate_ids = (
            select(ClassMembership.user_id)
            .where(
                ClassMembership.class_id.in_(own_classes),
                ClassMembership.user_id != user_id,
            )
            .distinct()
        )
        stmt = (
            select(User)
            .where(User.id.in_(classmate_ids))
            .order_by(User.full_name.asc(), User.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
