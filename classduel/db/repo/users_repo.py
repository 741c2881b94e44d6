from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from classduel.db.models.users import User


class UsersRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, user_id: UUID) -> User | None:
        return await session.get(User, user_id)

    @staticmethod
    async def list_by_ids(session: AsyncSession, *, user_ids: Sequence[UUID]) -> dict[UUID, User]:
        if not user_ids:
            return {}
        stmt = select(User).where(User.id.in_(tuple(set(user_ids))))
        result = await session.execute(stmt)
        return {user.id: user for user in result.scalars().all()}

    @staticmethod
    async def create(
        session: AsyncSession,
        *,
        full_name: str,
        avatar_url: str | None,
        created_at: datetime,
    ) -> User:
        user = User(
            id=uuid4(),
            full_name=full_name,
            avatar_url=avatar_url,
            created_at=created_at,
        )
        session.add(user)
        await session.flush()
        return user
