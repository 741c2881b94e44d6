from __future__ import annotations

from uuid import uuid4

import pytest

from classduel.game.duels.constants import DuelResult
from classduel.game.duels.scoring import (
    assign_results,
    count_best_win_streak,
    count_current_win_streak,
    is_match_decided,
    pick_round_winner,
    resolve_snapshot_index,
)
from classduel.game.duels.types import RoundAnswerEntry


def test_resolve_snapshot_index_maps_option_ids_and_falls_back_to_no_selection() -> None:
    option_ids = [uuid4() for _ in range(4)]
    snapshot = [str(option_id) for option_id in option_ids]

    assert resolve_snapshot_index(snapshot, option_ids[2]) == 2
    assert resolve_snapshot_index(snapshot, uuid4()) == -1
    assert resolve_snapshot_index(snapshot, None) == -1


def test_pick_round_winner_single_correct_answer() -> None:
    first, second = uuid4(), uuid4()
    winner = pick_round_winner(
        [
            RoundAnswerEntry(user_id=first, is_correct=False, response_time_ms=300),
            RoundAnswerEntry(user_id=second, is_correct=True, response_time_ms=5000),
        ]
    )
    assert winner == second


def test_pick_round_winner_prefers_fastest_correct_answer() -> None:
    slow, fast = uuid4(), uuid4()
    winner = pick_round_winner(
        [
            RoundAnswerEntry(user_id=slow, is_correct=True, response_time_ms=1400),
            RoundAnswerEntry(user_id=fast, is_correct=True, response_time_ms=800),
        ]
    )
    assert winner == fast


def test_pick_round_winner_exact_tie_goes_to_first_recorded_answer() -> None:
    first, second = uuid4(), uuid4()
    winner = pick_round_winner(
        [
            RoundAnswerEntry(user_id=first, is_correct=True, response_time_ms=900),
            RoundAnswerEntry(user_id=second, is_correct=True, response_time_ms=900),
        ]
    )
    assert winner == first


def test_pick_round_winner_without_correct_answers() -> None:
    answers = [
        RoundAnswerEntry(user_id=uuid4(), is_correct=False, response_time_ms=100),
        RoundAnswerEntry(user_id=uuid4(), is_correct=False, response_time_ms=200),
    ]
    assert pick_round_winner(answers) is None
    assert pick_round_winner([]) is None


@pytest.mark.parametrize(
    ("scores", "best_of", "rounds_played", "expected"),
    [
        ([1, 0], 3, 1, False),
        ([2, 0], 3, 2, True),
        ([1, 1], 3, 2, False),
        ([1, 1], 3, 3, True),
        ([0, 0], 5, 5, True),
        ([2, 2], 5, 4, False),
        ([3, 1], 5, 4, True),
        ([1, 0], 1, 1, True),
    ],
)
def test_is_match_decided(scores: list[int], best_of: int, rounds_played: int, expected: bool) -> None:
    assert is_match_decided(scores=scores, best_of=best_of, rounds_played=rounds_played) is expected


def test_assign_results_for_two_participants() -> None:
    first, second = uuid4(), uuid4()

    assert assign_results({first: 2, second: 1}) == {
        first: DuelResult.WIN,
        second: DuelResult.LOSE,
    }
    assert assign_results({first: 0, second: 3}) == {
        first: DuelResult.LOSE,
        second: DuelResult.WIN,
    }
    assert assign_results({first: 1, second: 1}) == {
        first: DuelResult.DRAW,
        second: DuelResult.DRAW,
    }


def test_assign_results_edge_rosters() -> None:
    assert assign_results({}) == {}
    assert assign_results({uuid4(): 3}) == {}
    with pytest.raises(ValueError):
        assign_results({uuid4(): 1, uuid4(): 2, uuid4(): 0})


def test_win_streaks_newest_first() -> None:
    win, lose, draw = DuelResult.WIN, DuelResult.LOSE, DuelResult.DRAW
    # Chronological W, W, L, W reversed.
    results = [win, lose, win, win]

    assert count_current_win_streak(results) == 1
    assert count_best_win_streak(results) == 2
    assert count_current_win_streak([draw, win, win]) == 0
    assert count_best_win_streak([draw, win, win, win, lose, win]) == 3
    assert count_current_win_streak([]) == 0
    assert count_best_win_streak([None, lose]) == 0
