from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from classduel.core.config import get_settings
from classduel.db.models.duel_participants import DuelParticipant
from classduel.db.models.duels import Duel
from classduel.db.repo.duel_participants_repo import DuelParticipantsRepo
from classduel.db.repo.duel_rounds_repo import DuelRoundsRepo
from classduel.db.repo.duels_repo import DuelsRepo
from classduel.db.repo.subjects_repo import SubjectsRepo
from classduel.db.repo.users_repo import UsersRepo
from classduel.game.duels.constants import (
    DUEL_MAX_PARTICIPANTS,
    DUEL_MIN_PARTICIPANTS_TO_PLAY,
    DuelStatus,
    can_transition,
    normalize_best_of,
    parse_duel_status,
)
from classduel.game.duels.eligibility import are_classmates, can_create_duel
from classduel.game.duels.errors import (
    DuelAlreadyCompletedError,
    DuelAlreadyParticipantError,
    DuelAlreadyStartedError,
    DuelBestOfTooLargeError,
    DuelConflictError,
    DuelCreateNotAllowedError,
    DuelFullError,
    DuelInvitationMissingError,
    DuelLevelMismatchError,
    DuelNotActiveError,
    DuelNotClassmatesError,
    DuelNotEnoughParticipantsError,
    DuelNotFoundError,
    DuelNotParticipantError,
    DuelNotPendingError,
    DuelParticipantNotFoundError,
    LevelNotFoundError,
    SubjectNotFoundError,
    UserNotFoundError,
)
from classduel.game.duels.rounds import create_duel_round
from classduel.game.duels.scoring import assign_results

logger = structlog.get_logger(__name__)


def _set_status(duel: Duel, target: DuelStatus, *, now_utc: datetime) -> None:
    current = parse_duel_status(duel.status)
    if current == target:
        return
    if not can_transition(current=current, target=target):
        raise DuelConflictError
    duel.status = target.value
    duel.updated_at = now_utc


async def _get_duel_for_update(session: AsyncSession, duel_id: UUID) -> Duel:
    duel = await DuelsRepo.get_by_id_for_update(session, duel_id)
    if duel is None:
        raise DuelNotFoundError
    return duel


async def create_duel(
    session: AsyncSession,
    *,
    initiator_user_id: UUID,
    subject_id: UUID,
    level_id: UUID | None = None,
    best_of: int | None = None,
    now_utc: datetime,
) -> Duel:
    subject = await SubjectsRepo.get_by_id(session, subject_id)
    if subject is None:
        raise SubjectNotFoundError
    if level_id is not None:
        if await SubjectsRepo.get_level_by_id(session, level_id) is None:
            raise LevelNotFoundError
        level_subject_id = await SubjectsRepo.get_level_subject_id(session, level_id=level_id)
        if level_subject_id != subject.id:
            raise DuelLevelMismatchError
    if await UsersRepo.get_by_id(session, initiator_user_id) is None:
        raise UserNotFoundError
    if not await can_create_duel(session, user_id=initiator_user_id, subject=subject):
        raise DuelCreateNotAllowedError
    settings = get_settings()
    resolved_best_of = normalize_best_of(best_of, default=settings.duel_default_best_of)
    if resolved_best_of > settings.duel_max_best_of:
        raise DuelBestOfTooLargeError

    duel = await DuelsRepo.create(
        session,
        duel=Duel(
            id=uuid4(),
            subject_id=subject.id,
            level_id=level_id,
            status=DuelStatus.PENDING.value,
            best_of=resolved_best_of,
            created_at=now_utc,
            updated_at=now_utc,
            started_at=None,
            ended_at=None,
        ),
    )
    await DuelParticipantsRepo.create(
        session,
        participant=DuelParticipant(
            id=uuid4(),
            duel_id=duel.id,
            user_id=initiator_user_id,
            invited_by_user_id=None,
            score=0,
            result=None,
            joined_at=now_utc,
            accepted_at=now_utc,
        ),
    )
    logger.info(
        "duel_created",
        duel_id=str(duel.id),
        initiator_user_id=str(initiator_user_id),
        subject_id=str(subject.id),
        level_id=str(level_id) if level_id is not None else None,
        best_of=duel.best_of,
    )
    return duel


async def invite_to_duel(
    session: AsyncSession,
    *,
    duel_id: UUID,
    inviter_user_id: UUID,
    invitee_user_id: UUID,
    now_utc: datetime,
) -> DuelParticipant:
    duel = await _get_duel_for_update(session, duel_id)
    if duel.status != DuelStatus.PENDING.value:
        raise DuelNotPendingError

    participants = await DuelParticipantsRepo.list_for_duel(session, duel_id=duel.id)
    participant_user_ids = {participant.user_id for participant in participants}
    if inviter_user_id not in participant_user_ids:
        raise DuelNotParticipantError
    if invitee_user_id in participant_user_ids:
        raise DuelAlreadyParticipantError
    if len(participants) >= DUEL_MAX_PARTICIPANTS:
        raise DuelFullError
    if await UsersRepo.get_by_id(session, invitee_user_id) is None:
        raise UserNotFoundError
    if not await are_classmates(session, user_a_id=inviter_user_id, user_b_id=invitee_user_id):
        raise DuelNotClassmatesError

    invitee = await DuelParticipantsRepo.create(
        session,
        participant=DuelParticipant(
            id=uuid4(),
            duel_id=duel.id,
            user_id=invitee_user_id,
            invited_by_user_id=inviter_user_id,
            score=0,
            result=None,
            joined_at=now_utc,
            accepted_at=None,
        ),
    )
    duel.updated_at = now_utc
    logger.info(
        "duel_invitation_sent",
        duel_id=str(duel.id),
        inviter_user_id=str(inviter_user_id),
        invitee_user_id=str(invitee_user_id),
    )
    return invitee


async def _start_active_duel(session: AsyncSession, *, duel: Duel, now_utc: datetime) -> None:
    if duel.started_at is None:
        duel.started_at = now_utc
        duel.updated_at = now_utc
    if await DuelRoundsRepo.count_for_duel(session, duel_id=duel.id) == 0:
        await create_duel_round(session, duel=duel, round_number=1, now_utc=now_utc)


async def accept_duel_invitation(
    session: AsyncSession,
    *,
    duel_id: UUID,
    user_id: UUID,
    now_utc: datetime,
) -> Duel:
    duel = await _get_duel_for_update(session, duel_id)
    participant = await DuelParticipantsRepo.get_for_duel_user(
        session,
        duel_id=duel.id,
        user_id=user_id,
    )
    if participant is None:
        raise DuelParticipantNotFoundError
    if participant.invited_by_user_id is None or participant.accepted_at is not None:
        raise DuelInvitationMissingError
    if duel.status != DuelStatus.PENDING.value:
        raise DuelNotPendingError

    participant.accepted_at = now_utc
    duel.updated_at = now_utc
    participants = await DuelParticipantsRepo.list_for_duel(session, duel_id=duel.id)
    roster_ready = len(participants) == DUEL_MIN_PARTICIPANTS_TO_PLAY and all(
        item.accepted_at is not None for item in participants
    )
    logger.info(
        "duel_invitation_accepted",
        duel_id=str(duel.id),
        user_id=str(user_id),
        roster_ready=roster_ready,
    )
    if roster_ready:
        _set_status(duel, DuelStatus.ACTIVE, now_utc=now_utc)
        await _start_active_duel(session, duel=duel, now_utc=now_utc)
    return duel


async def decline_duel_invitation(
    session: AsyncSession,
    *,
    duel_id: UUID,
    user_id: UUID,
    now_utc: datetime,
) -> Duel:
    duel = await _get_duel_for_update(session, duel_id)
    if duel.status == DuelStatus.COMPLETED.value:
        raise DuelAlreadyCompletedError
    participant = await DuelParticipantsRepo.get_for_duel_user(
        session,
        duel_id=duel.id,
        user_id=user_id,
    )
    if participant is None:
        raise DuelParticipantNotFoundError
    if participant.invited_by_user_id is None:
        raise DuelInvitationMissingError
    if duel.started_at is not None or await DuelRoundsRepo.count_for_duel(session, duel_id=duel.id):
        raise DuelAlreadyStartedError

    # A duel only turns active together with round 1, so it is still pending here.
    await DuelParticipantsRepo.delete(session, participant=participant)
    duel.updated_at = now_utc
    logger.info("duel_invitation_declined", duel_id=str(duel.id), user_id=str(user_id))
    return duel


async def start_duel(session: AsyncSession, *, duel_id: UUID, now_utc: datetime) -> Duel:
    duel = await _get_duel_for_update(session, duel_id)
    if duel.status != DuelStatus.ACTIVE.value:
        raise DuelNotActiveError
    participants_total = await DuelParticipantsRepo.count_for_duel(session, duel_id=duel.id)
    if participants_total < DUEL_MIN_PARTICIPANTS_TO_PLAY:
        raise DuelNotEnoughParticipantsError
    await _start_active_duel(session, duel=duel, now_utc=now_utc)
    return duel


async def complete_duel(session: AsyncSession, *, duel: Duel, now_utc: datetime) -> None:
    """Terminal transition; the caller must hold the duel row lock."""
    if duel.status == DuelStatus.COMPLETED.value:
        raise DuelAlreadyCompletedError

    open_round = await DuelRoundsRepo.get_open_for_duel_for_update(session, duel_id=duel.id)
    if open_round is not None:
        open_round.ended_at = now_utc

    participants = await DuelParticipantsRepo.list_for_duel(session, duel_id=duel.id)
    results = assign_results({participant.user_id: participant.score for participant in participants})
    for participant in participants:
        result = results.get(participant.user_id)
        participant.result = result.value if result is not None else None

    _set_status(duel, DuelStatus.COMPLETED, now_utc=now_utc)
    duel.ended_at = now_utc
    await session.flush()
    logger.info(
        "duel_completed",
        duel_id=str(duel.id),
        scores={str(participant.user_id): participant.score for participant in participants},
        results={str(user_id): result.value for user_id, result in results.items()},
    )


async def force_complete_duel(session: AsyncSession, *, duel_id: UUID, now_utc: datetime) -> Duel:
    duel = await _get_duel_for_update(session, duel_id)
    await complete_duel(session, duel=duel, now_utc=now_utc)
    return duel
