from __future__ import annotations

import hashlib
from datetime import datetime
from uuid import UUID, uuid4

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from classduel.core.config import get_settings
from classduel.db.models.duel_rounds import DuelRound
from classduel.db.models.duels import Duel
from classduel.db.repo.duel_rounds_repo import DuelRoundsRepo
from classduel.db.repo.question_bank_repo import QuestionBankRepo
from classduel.game.duels.errors import DuelQuestionPoolExhaustedError

logger = structlog.get_logger(__name__)


def stable_index(seed: str, size: int) -> int:
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big") % size


def pick_question_id(candidate_ids: list[UUID], *, selection_seed: str) -> UUID | None:
    if not candidate_ids:
        return None
    ordered = sorted(candidate_ids, key=str)
    return ordered[stable_index(selection_seed, len(ordered))]


async def create_duel_round(
    session: AsyncSession,
    *,
    duel: Duel,
    round_number: int,
    now_utc: datetime,
) -> DuelRound:
    used_question_ids = await DuelRoundsRepo.list_question_ids_for_duel(session, duel_id=duel.id)
    candidate_ids = await QuestionBankRepo.list_pool_question_ids(
        session,
        subject_id=duel.subject_id,
        level_id=duel.level_id,
        exclude_question_ids=used_question_ids,
    )
    # Same duel and round over the same remaining pool always draws the same question.
    question_id = pick_question_id(
        candidate_ids,
        selection_seed=f"duel:{duel.id}:{round_number}",
    )
    if question_id is None:
        logger.warning(
            "duel_question_pool_exhausted",
            duel_id=str(duel.id),
            round_number=round_number,
            used_questions=len(used_question_ids),
        )
        raise DuelQuestionPoolExhaustedError

    question = await QuestionBankRepo.get_question(session, question_id)
    if question is None:
        raise DuelQuestionPoolExhaustedError
    options = await QuestionBankRepo.list_options(session, question_id=question_id)
    correct_index = next(
        (index for index, option in enumerate(options) if option.is_correct),
        -1,
    )
    if correct_index < 0:
        logger.warning(
            "duel_round_question_without_correct_option",
            duel_id=str(duel.id),
            question_id=str(question_id),
        )

    duel_round = await DuelRoundsRepo.create(
        session,
        duel_round=DuelRound(
            id=uuid4(),
            duel_id=duel.id,
            round_number=round_number,
            question_id=question_id,
            question_text_snapshot=question.stem,
            options_snapshot=[option.option_text for option in options],
            option_ids_snapshot=[str(option.id) for option in options],
            correct_index_snapshot=correct_index,
            time_limit_seconds=get_settings().duel_round_time_limit_seconds,
            started_at=now_utc,
            ended_at=None,
        ),
    )
    logger.info(
        "duel_round_created",
        duel_id=str(duel.id),
        round_number=round_number,
        question_id=str(question_id),
        pool_size=len(candidate_ids),
    )
    return duel_round
