from __future__ import annotations

from collections.abc import Mapping, Sequence
from uuid import UUID

from classduel.game.duels.constants import NO_SELECTION_INDEX, DuelResult, wins_needed
from classduel.game.duels.types import RoundAnswerEntry


def resolve_snapshot_index(option_ids: Sequence[str], selected_option_id: UUID | None) -> int:
    if selected_option_id is None:
        return NO_SELECTION_INDEX
    try:
        return list(option_ids).index(str(selected_option_id))
    except ValueError:
        return NO_SELECTION_INDEX


def pick_round_winner(answers: Sequence[RoundAnswerEntry]) -> UUID | None:
    """Fastest correct answer takes the round.

    ``answers`` must be ordered by ``answer_seq``: on an exact response-time
    tie the answer recorded first wins.
    """
    correct = [answer for answer in answers if answer.is_correct]
    if not correct:
        return None
    fastest = min(correct, key=lambda answer: answer.response_time_ms)
    return fastest.user_id


def is_match_decided(*, scores: Sequence[int], best_of: int, rounds_played: int) -> bool:
    if rounds_played >= best_of:
        return True
    threshold = wins_needed(best_of)
    return any(score >= threshold for score in scores)


def assign_results(scores: Mapping[UUID, int]) -> dict[UUID, DuelResult]:
    if len(scores) < 2:
        return {}
    if len(scores) > 2:
        raise ValueError("result assignment supports exactly two participants")

    (first_id, first_score), (second_id, second_score) = scores.items()
    if first_score == second_score:
        return {first_id: DuelResult.DRAW, second_id: DuelResult.DRAW}
    if first_score > second_score:
        return {first_id: DuelResult.WIN, second_id: DuelResult.LOSE}
    return {first_id: DuelResult.LOSE, second_id: DuelResult.WIN}


def count_current_win_streak(results_newest_first: Sequence[DuelResult | None]) -> int:
    streak = 0
    for result in results_newest_first:
        if result != DuelResult.WIN:
            break
        streak += 1
    return streak


def count_best_win_streak(results_newest_first: Sequence[DuelResult | None]) -> int:
    best = 0
    run = 0
    for result in results_newest_first:
        if result == DuelResult.WIN:
            run += 1
            best = max(best, run)
        else:
            run = 0
    return best
