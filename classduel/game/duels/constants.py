from __future__ import annotations

from enum import Enum


class DuelStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"


class DuelResult(str, Enum):
    WIN = "win"
    LOSE = "lose"
    DRAW = "draw"


DUEL_DEFAULT_BEST_OF = 5
DUEL_MAX_PARTICIPANTS = 2
DUEL_MIN_PARTICIPANTS_TO_PLAY = 2
NO_SELECTION_INDEX = -1

# pending -> active -> completed, never backwards.
DUEL_ALLOWED_TRANSITIONS: frozenset[tuple[DuelStatus, DuelStatus]] = frozenset(
    {
        (DuelStatus.PENDING, DuelStatus.ACTIVE),
        (DuelStatus.PENDING, DuelStatus.COMPLETED),
        (DuelStatus.ACTIVE, DuelStatus.COMPLETED),
    }
)


def normalize_best_of(best_of: int | None, *, default: int = DUEL_DEFAULT_BEST_OF) -> int:
    resolved = int(best_of) if best_of is not None else default
    if resolved <= 0:
        resolved = default
    if resolved % 2 == 0:
        resolved += 1
    return resolved


def wins_needed(best_of: int) -> int:
    return (best_of + 1) // 2


def parse_duel_status(value: str | DuelStatus) -> DuelStatus:
    if isinstance(value, DuelStatus):
        return value
    return DuelStatus(value.strip().lower())


def can_transition(*, current: DuelStatus, target: DuelStatus) -> bool:
    return (current, target) in DUEL_ALLOWED_TRANSITIONS
