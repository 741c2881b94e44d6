from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from classduel.game.duels.answers import submit_duel_answer
from classduel.game.duels.lifecycle import (
    accept_duel_invitation,
    create_duel,
    decline_duel_invitation,
    force_complete_duel,
    invite_to_duel,
    start_duel,
)
from classduel.game.duels.queries import (
    build_duel_snapshot,
    get_duel_for_user,
    list_classmates_for_subject,
    list_duels_for_user,
    list_pending_invitations,
)
from classduel.game.duels.stats import get_user_duel_stats
from classduel.game.duels.types import DuelSnapshot


async def create_duel_for_user(
    session: AsyncSession,
    *,
    user_id: UUID,
    subject_id: UUID,
    level_id: UUID | None = None,
    best_of: int | None = None,
    now_utc: datetime,
) -> DuelSnapshot:
    duel = await create_duel(
        session,
        initiator_user_id=user_id,
        subject_id=subject_id,
        level_id=level_id,
        best_of=best_of,
        now_utc=now_utc,
    )
    return await build_duel_snapshot(session, duel=duel, viewer_user_id=user_id)


async def invite_classmate(
    session: AsyncSession,
    *,
    duel_id: UUID,
    user_id: UUID,
    invitee_user_id: UUID,
    now_utc: datetime,
) -> DuelSnapshot:
    await invite_to_duel(
        session,
        duel_id=duel_id,
        inviter_user_id=user_id,
        invitee_user_id=invitee_user_id,
        now_utc=now_utc,
    )
    return await get_duel_for_user(session, duel_id=duel_id, user_id=user_id)


async def accept_invitation(
    session: AsyncSession,
    *,
    duel_id: UUID,
    user_id: UUID,
    now_utc: datetime,
) -> DuelSnapshot:
    duel = await accept_duel_invitation(session, duel_id=duel_id, user_id=user_id, now_utc=now_utc)
    return await build_duel_snapshot(session, duel=duel, viewer_user_id=user_id)


async def decline_invitation(
    session: AsyncSession,
    *,
    duel_id: UUID,
    user_id: UUID,
    now_utc: datetime,
) -> None:
    await decline_duel_invitation(session, duel_id=duel_id, user_id=user_id, now_utc=now_utc)


async def start_duel_for_user(
    session: AsyncSession,
    *,
    duel_id: UUID,
    user_id: UUID,
    now_utc: datetime,
) -> DuelSnapshot:
    # Visibility check first so outsiders cannot probe duel state.
    await get_duel_for_user(session, duel_id=duel_id, user_id=user_id)
    duel = await start_duel(session, duel_id=duel_id, now_utc=now_utc)
    return await build_duel_snapshot(session, duel=duel, viewer_user_id=user_id)


class DuelService:
    create_duel = staticmethod(create_duel)
    invite_to_duel = staticmethod(invite_to_duel)
    accept_duel_invitation = staticmethod(accept_duel_invitation)
    decline_duel_invitation = staticmethod(decline_duel_invitation)
    start_duel = staticmethod(start_duel)
    submit_answer = staticmethod(submit_duel_answer)
    force_complete_duel = staticmethod(force_complete_duel)
    create_duel_for_user = staticmethod(create_duel_for_user)
    invite_classmate = staticmethod(invite_classmate)
    accept_invitation = staticmethod(accept_invitation)
    decline_invitation = staticmethod(decline_invitation)
    start_duel_for_user = staticmethod(start_duel_for_user)
    get_duel_for_user = staticmethod(get_duel_for_user)
    build_duel_snapshot = staticmethod(build_duel_snapshot)
    list_duels_for_user = staticmethod(list_duels_for_user)
    list_pending_invitations = staticmethod(list_pending_invitations)
    list_classmates_for_subject = staticmethod(list_classmates_for_subject)
    get_user_duel_stats = staticmethod(get_user_duel_stats)


__all__ = ["DuelService"]
