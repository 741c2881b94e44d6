from __future__ import annotations

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from classduel.db.models.duel_answers import DuelAnswer
from classduel.db.models.duel_rounds import DuelRound
from classduel.db.models.duels import Duel
from classduel.db.models.users import User
from classduel.db.repo.class_memberships_repo import ClassMembershipsRepo
from classduel.db.repo.duel_answers_repo import DuelAnswersRepo
from classduel.db.repo.duel_participants_repo import DuelParticipantsRepo
from classduel.db.repo.duel_rounds_repo import DuelRoundsRepo
from classduel.db.repo.duels_repo import DuelsRepo
from classduel.db.repo.subjects_repo import SubjectsRepo
from classduel.db.repo.users_repo import UsersRepo
from classduel.game.duels.constants import DuelResult, DuelStatus, parse_duel_status
from classduel.game.duels.errors import (
    DuelNotFoundError,
    DuelNotParticipantError,
    SubjectNotFoundError,
)
from classduel.game.duels.types import (
    ClassmateSnapshot,
    DuelAnswerSnapshot,
    DuelInvitationSnapshot,
    DuelParticipantSnapshot,
    DuelRoundSnapshot,
    DuelSnapshot,
    DuelUserView,
)


def _user_view(user_id: UUID, users: dict[UUID, User]) -> DuelUserView:
    user = users.get(user_id)
    if user is None:
        return DuelUserView(user_id=user_id)
    return DuelUserView(user_id=user.id, full_name=user.full_name, avatar_url=user.avatar_url)


def _round_snapshot(
    duel_round: DuelRound,
    *,
    answers: list[DuelAnswer],
    viewer_user_id: UUID,
) -> DuelRoundSnapshot:
    is_closed = duel_round.ended_at is not None
    return DuelRoundSnapshot(
        round_id=duel_round.id,
        round_number=duel_round.round_number,
        question_id=duel_round.question_id,
        question_text=duel_round.question_text_snapshot,
        options=tuple(duel_round.options_snapshot),
        option_ids=tuple(UUID(option_id) for option_id in duel_round.option_ids_snapshot),
        time_limit_seconds=duel_round.time_limit_seconds,
        started_at=duel_round.started_at,
        ended_at=duel_round.ended_at,
        correct_index=duel_round.correct_index_snapshot if is_closed else None,
        answers=(
            tuple(
                DuelAnswerSnapshot(
                    user_id=answer.user_id,
                    selected_index=answer.selected_index,
                    is_correct=answer.is_correct,
                    response_time_ms=answer.response_time_ms,
                )
                for answer in answers
            )
            if is_closed
            else ()
        ),
        viewer_answered=any(answer.user_id == viewer_user_id for answer in answers),
    )


async def build_duel_snapshot(
    session: AsyncSession,
    *,
    duel: Duel,
    viewer_user_id: UUID,
) -> DuelSnapshot:
    participants = await DuelParticipantsRepo.list_for_duel(session, duel_id=duel.id)
    referenced_user_ids = [participant.user_id for participant in participants] + [
        participant.invited_by_user_id
        for participant in participants
        if participant.invited_by_user_id is not None
    ]
    users = await UsersRepo.list_by_ids(session, user_ids=referenced_user_ids)

    duel_rounds = await DuelRoundsRepo.list_for_duel(session, duel_id=duel.id)
    answers_by_round = await DuelAnswersRepo.list_for_rounds(
        session,
        round_ids=[duel_round.id for duel_round in duel_rounds],
    )
    round_snapshots = [
        _round_snapshot(
            duel_round,
            answers=answers_by_round.get(duel_round.id, []),
            viewer_user_id=viewer_user_id,
        )
        for duel_round in duel_rounds
    ]

    status = parse_duel_status(duel.status)
    current_round = None
    if status == DuelStatus.ACTIVE:
        open_rounds = [snapshot for snapshot in round_snapshots if snapshot.ended_at is None]
        if open_rounds:
            current_round = open_rounds[-1]

    return DuelSnapshot(
        duel_id=duel.id,
        subject_id=duel.subject_id,
        level_id=duel.level_id,
        status=status,
        best_of=duel.best_of,
        created_at=duel.created_at,
        started_at=duel.started_at,
        ended_at=duel.ended_at,
        participants=tuple(
            DuelParticipantSnapshot(
                participant_id=participant.id,
                user=_user_view(participant.user_id, users),
                invited_by=(
                    _user_view(participant.invited_by_user_id, users)
                    if participant.invited_by_user_id is not None
                    else None
                ),
                score=participant.score,
                result=DuelResult(participant.result) if participant.result else None,
                accepted=participant.accepted_at is not None,
                is_current_user=participant.user_id == viewer_user_id,
            )
            for participant in participants
        ),
        rounds=tuple(snapshot for snapshot in round_snapshots if snapshot.ended_at is not None),
        current_round=current_round,
    )


async def get_duel_for_user(
    session: AsyncSession,
    *,
    duel_id: UUID,
    user_id: UUID,
) -> DuelSnapshot:
    duel = await DuelsRepo.get_by_id(session, duel_id)
    if duel is None:
        raise DuelNotFoundError
    participant = await DuelParticipantsRepo.get_for_duel_user(
        session,
        duel_id=duel.id,
        user_id=user_id,
    )
    if participant is None:
        raise DuelNotParticipantError
    return await build_duel_snapshot(session, duel=duel, viewer_user_id=user_id)


async def list_duels_for_user(
    session: AsyncSession,
    *,
    user_id: UUID,
    status: DuelStatus | None = None,
    limit: int = 50,
) -> list[DuelSnapshot]:
    duels = await DuelsRepo.list_for_user(
        session,
        user_id=user_id,
        status=status.value if status is not None else None,
        limit=limit,
    )
    return [
        await build_duel_snapshot(session, duel=duel, viewer_user_id=user_id) for duel in duels
    ]


async def list_pending_invitations(
    session: AsyncSession,
    *,
    user_id: UUID,
) -> list[DuelInvitationSnapshot]:
    duels = await DuelsRepo.list_pending_invitations_for_user(
        session,
        user_id=user_id,
        pending_status=DuelStatus.PENDING.value,
    )
    participants_by_duel = await DuelParticipantsRepo.list_for_duels(
        session,
        duel_ids=[duel.id for duel in duels],
    )
    inviter_ids: dict[UUID, UUID] = {}
    for duel in duels:
        for participant in participants_by_duel.get(duel.id, []):
            if participant.user_id == user_id and participant.invited_by_user_id is not None:
                inviter_ids[duel.id] = participant.invited_by_user_id
    users = await UsersRepo.list_by_ids(session, user_ids=list(inviter_ids.values()))

    return [
        DuelInvitationSnapshot(
            duel_id=duel.id,
            subject_id=duel.subject_id,
            level_id=duel.level_id,
            best_of=duel.best_of,
            invited_by=_user_view(inviter_ids[duel.id], users),
            created_at=duel.created_at,
        )
        for duel in duels
        if duel.id in inviter_ids
    ]


async def list_classmates_for_subject(
    session: AsyncSession,
    *,
    user_id: UUID,
    subject_id: UUID,
) -> list[ClassmateSnapshot]:
    if await SubjectsRepo.get_by_id(session, subject_id) is None:
        raise SubjectNotFoundError
    classmates = await ClassMembershipsRepo.list_classmates(session, user_id=user_id)
    busy_user_ids = await DuelsRepo.list_user_ids_in_status(
        session,
        user_ids=[classmate.id for classmate in classmates],
        status=DuelStatus.ACTIVE.value,
    )
    return [
        ClassmateSnapshot(
            user_id=classmate.id,
            full_name=classmate.full_name,
            avatar_url=classmate.avatar_url,
            is_available=classmate.id not in busy_user_ids,
        )
        for classmate in classmates
    ]
