from __future__ import annotations

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from classduel.db.repo.duels_repo import DuelsRepo
from classduel.game.duels.constants import DuelResult, DuelStatus
from classduel.game.duels.scoring import count_best_win_streak, count_current_win_streak
from classduel.game.duels.types import DuelStats


async def get_user_duel_stats(
    session: AsyncSession,
    *,
    user_id: UUID,
    subject_id: UUID | None = None,
) -> DuelStats:
    participations = await DuelsRepo.list_completed_participations(
        session,
        user_id=user_id,
        completed_status=DuelStatus.COMPLETED.value,
        subject_id=subject_id,
    )
    # Newest first (ended_at descending).
    results = [
        DuelResult(participant.result) if participant.result else None
        for participant, _duel in participations
    ]
    total = len(results)
    wins = sum(1 for result in results if result == DuelResult.WIN)
    losses = sum(1 for result in results if result == DuelResult.LOSE)
    draws = sum(1 for result in results if result == DuelResult.DRAW)
    return DuelStats(
        total_duels=total,
        wins=wins,
        losses=losses,
        draws=draws,
        win_rate=wins / total if total > 0 else 0.0,
        current_streak=count_current_win_streak(results),
        best_streak=count_best_win_streak(results),
    )
