from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from classduel.game.duels.constants import DuelResult, DuelStatus


@dataclass(slots=True)
class DuelUserView:
    user_id: UUID
    full_name: str | None = None
    avatar_url: str | None = None


@dataclass(slots=True)
class DuelParticipantSnapshot:
    participant_id: UUID
    user: DuelUserView
    invited_by: DuelUserView | None
    score: int
    result: DuelResult | None
    accepted: bool
    is_current_user: bool = False


@dataclass(slots=True)
class DuelAnswerSnapshot:
    user_id: UUID
    selected_index: int
    is_correct: bool
    response_time_ms: int


@dataclass(slots=True)
class DuelRoundSnapshot:
    round_id: UUID
    round_number: int
    question_id: UUID
    question_text: str
    options: tuple[str, ...]
    option_ids: tuple[UUID, ...]
    time_limit_seconds: int
    started_at: datetime
    ended_at: datetime | None = None
    # Only revealed once the round is closed.
    correct_index: int | None = None
    answers: tuple[DuelAnswerSnapshot, ...] = ()
    viewer_answered: bool = False


@dataclass(slots=True)
class DuelSnapshot:
    duel_id: UUID
    subject_id: UUID
    level_id: UUID | None
    status: DuelStatus
    best_of: int
    created_at: datetime
    started_at: datetime | None
    ended_at: datetime | None
    participants: tuple[DuelParticipantSnapshot, ...]
    rounds: tuple[DuelRoundSnapshot, ...] = ()
    current_round: DuelRoundSnapshot | None = None


@dataclass(slots=True)
class DuelInvitationSnapshot:
    duel_id: UUID
    subject_id: UUID
    level_id: UUID | None
    best_of: int
    invited_by: DuelUserView
    created_at: datetime


@dataclass(slots=True)
class ClassmateSnapshot:
    user_id: UUID
    full_name: str
    avatar_url: str | None
    is_available: bool = True


@dataclass(slots=True)
class DuelAnswerResult:
    duel_id: UUID
    round_number: int
    accepted: bool = True


@dataclass(slots=True)
class DuelStats:
    total_duels: int
    wins: int
    losses: int
    draws: int
    win_rate: float
    current_streak: int
    best_streak: int


@dataclass(frozen=True, slots=True)
class RoundAnswerEntry:
    user_id: UUID
    is_correct: bool
    response_time_ms: int
