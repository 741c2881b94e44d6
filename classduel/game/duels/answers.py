from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from classduel.db.models.duel_answers import DuelAnswer
from classduel.db.models.duel_participants import DuelParticipant
from classduel.db.models.duel_rounds import DuelRound
from classduel.db.models.duels import Duel
from classduel.db.repo.duel_answers_repo import DuelAnswersRepo
from classduel.db.repo.duel_participants_repo import DuelParticipantsRepo
from classduel.db.repo.duel_rounds_repo import DuelRoundsRepo
from classduel.db.repo.duels_repo import DuelsRepo
from classduel.game.duels.constants import NO_SELECTION_INDEX, DuelStatus
from classduel.game.duels.errors import (
    DuelAnswerAlreadySubmittedError,
    DuelNotActiveError,
    DuelNotFoundError,
    DuelNotParticipantError,
    DuelQuestionMismatchError,
    DuelQuestionPoolExhaustedError,
    DuelRoundClosedError,
)
from classduel.game.duels.lifecycle import complete_duel
from classduel.game.duels.rounds import create_duel_round
from classduel.game.duels.scoring import (
    is_match_decided,
    pick_round_winner,
    resolve_snapshot_index,
)
from classduel.game.duels.types import DuelAnswerResult, RoundAnswerEntry

logger = structlog.get_logger(__name__)


async def submit_duel_answer(
    session: AsyncSession,
    *,
    duel_id: UUID,
    user_id: UUID,
    question_id: UUID,
    selected_option_id: UUID | None,
    response_time_ms: int,
    now_utc: datetime,
) -> DuelAnswerResult:
    # The duel row lock serialises every submission of this duel, so only one
    # of two racing answers can observe the round as complete.
    duel = await DuelsRepo.get_by_id_for_update(session, duel_id)
    if duel is None:
        raise DuelNotFoundError
    if duel.status != DuelStatus.ACTIVE.value:
        raise DuelNotActiveError

    participants = await DuelParticipantsRepo.list_for_duel(session, duel_id=duel.id)
    if user_id not in {participant.user_id for participant in participants}:
        raise DuelNotParticipantError

    open_round = await DuelRoundsRepo.get_open_for_duel_for_update(session, duel_id=duel.id)
    if open_round is None:
        raise DuelRoundClosedError
    if open_round.question_id != question_id:
        played_question_ids = await DuelRoundsRepo.list_question_ids_for_duel(
            session,
            duel_id=duel.id,
        )
        if question_id in played_question_ids:
            raise DuelRoundClosedError
        raise DuelQuestionMismatchError

    existing = await DuelAnswersRepo.get_for_round_user(
        session,
        round_id=open_round.id,
        user_id=user_id,
    )
    if existing is not None:
        raise DuelAnswerAlreadySubmittedError

    selected_index = max(
        NO_SELECTION_INDEX,
        resolve_snapshot_index(open_round.option_ids_snapshot, selected_option_id),
    )
    is_correct = (
        selected_index != NO_SELECTION_INDEX
        and selected_index == open_round.correct_index_snapshot
    )
    answer_seq = await DuelAnswersRepo.count_for_round(session, round_id=open_round.id) + 1
    await DuelAnswersRepo.create(
        session,
        answer=DuelAnswer(
            id=uuid4(),
            round_id=open_round.id,
            duel_id=duel.id,
            user_id=user_id,
            answer_seq=answer_seq,
            selected_index=selected_index,
            is_correct=is_correct,
            response_time_ms=max(0, int(response_time_ms)),
            answered_at=now_utc,
        ),
    )
    logger.info(
        "duel_answer_recorded",
        duel_id=str(duel.id),
        round_number=open_round.round_number,
        user_id=str(user_id),
    )

    if answer_seq >= len(participants):
        await _resolve_round(
            session,
            duel=duel,
            duel_round=open_round,
            participants=participants,
            now_utc=now_utc,
        )
    return DuelAnswerResult(duel_id=duel.id, round_number=open_round.round_number)


async def _resolve_round(
    session: AsyncSession,
    *,
    duel: Duel,
    duel_round: DuelRound,
    participants: list[DuelParticipant],
    now_utc: datetime,
) -> None:
    if duel_round.ended_at is not None:
        return
    duel_round.ended_at = now_utc

    answers = await DuelAnswersRepo.list_for_round(session, round_id=duel_round.id)
    winner_user_id = pick_round_winner(
        [
            RoundAnswerEntry(
                user_id=answer.user_id,
                is_correct=answer.is_correct,
                response_time_ms=answer.response_time_ms,
            )
            for answer in answers
        ]
    )
    if winner_user_id is not None:
        for participant in participants:
            if participant.user_id == winner_user_id:
                participant.score += 1
    duel.updated_at = now_utc

    rounds_played = await DuelRoundsRepo.count_for_duel(session, duel_id=duel.id)
    match_decided = is_match_decided(
        scores=[participant.score for participant in participants],
        best_of=duel.best_of,
        rounds_played=rounds_played,
    )
    logger.info(
        "duel_round_resolved",
        duel_id=str(duel.id),
        round_number=duel_round.round_number,
        winner_user_id=str(winner_user_id) if winner_user_id is not None else None,
        match_decided=match_decided,
    )
    if match_decided:
        await complete_duel(session, duel=duel, now_utc=now_utc)
        return

    try:
        await create_duel_round(
            session,
            duel=duel,
            round_number=duel_round.round_number + 1,
            now_utc=now_utc,
        )
    except DuelQuestionPoolExhaustedError:
        logger.warning(
            "duel_completed_on_exhausted_pool",
            duel_id=str(duel.id),
            rounds_played=rounds_played,
        )
        await complete_duel(session, duel=duel, now_utc=now_utc)
