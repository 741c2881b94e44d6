from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from classduel.game.duels.types import (
    ClassmateSnapshot,
    DuelInvitationSnapshot,
    DuelRoundSnapshot,
    DuelSnapshot,
    DuelStats,
    DuelUserView,
)


class DuelCreateRequest(BaseModel):
    subject_id: UUID
    level_id: UUID | None = None
    # Non-positive values fall back to the default, even values are rounded up.
    best_of: int | None = None


class DuelInviteRequest(BaseModel):
    invitee_user_id: UUID


class DuelAnswerRequest(BaseModel):
    question_id: UUID
    selected_option_id: UUID | None = None
    response_time_ms: int = Field(default=0, le=3_600_000)


class DuelUserResponse(BaseModel):
    user_id: UUID
    full_name: str | None = None
    avatar_url: str | None = None


class DuelParticipantResponse(BaseModel):
    participant_id: UUID
    user: DuelUserResponse
    invited_by: DuelUserResponse | None = None
    score: int = Field(ge=0)
    result: str | None = None
    accepted: bool
    is_current_user: bool


class DuelAnswerResponse(BaseModel):
    user_id: UUID
    selected_index: int = Field(ge=-1)
    is_correct: bool
    response_time_ms: int = Field(ge=0)


class DuelRoundResponse(BaseModel):
    round_id: UUID
    round_number: int = Field(ge=1)
    question_id: UUID
    question_text: str
    options: list[str]
    option_ids: list[UUID]
    time_limit_seconds: int = Field(ge=1)
    started_at: datetime
    ended_at: datetime | None = None
    correct_index: int | None = None
    answers: list[DuelAnswerResponse] = Field(default_factory=list)
    viewer_answered: bool = False


class DuelResponse(BaseModel):
    duel_id: UUID
    subject_id: UUID
    level_id: UUID | None = None
    status: str
    best_of: int = Field(ge=1)
    created_at: datetime
    started_at: datetime | None = None
    ended_at: datetime | None = None
    participants: list[DuelParticipantResponse]
    rounds: list[DuelRoundResponse]
    current_round: DuelRoundResponse | None = None


class DuelListResponse(BaseModel):
    duels: list[DuelResponse]


class DuelInvitationResponse(BaseModel):
    duel_id: UUID
    subject_id: UUID
    level_id: UUID | None = None
    best_of: int = Field(ge=1)
    invited_by: DuelUserResponse
    created_at: datetime


class DuelInvitationListResponse(BaseModel):
    invitations: list[DuelInvitationResponse]


class ClassmateResponse(BaseModel):
    user_id: UUID
    full_name: str
    avatar_url: str | None = None
    is_available: bool


class ClassmateListResponse(BaseModel):
    classmates: list[ClassmateResponse]


class DuelAnswerSubmitResponse(BaseModel):
    duel_id: UUID
    round_number: int = Field(ge=1)
    accepted: bool


class DuelDeclineResponse(BaseModel):
    duel_id: UUID
    declined: bool


class DuelStatsResponse(BaseModel):
    user_id: UUID
    subject_id: UUID | None = None
    total_duels: int = Field(ge=0)
    wins: int = Field(ge=0)
    losses: int = Field(ge=0)
    draws: int = Field(ge=0)
    win_rate: float = Field(ge=0.0, le=1.0)
    current_streak: int = Field(ge=0)
    best_streak: int = Field(ge=0)


def as_user_response(view: DuelUserView) -> DuelUserResponse:
    return DuelUserResponse(user_id=view.user_id, full_name=view.full_name, avatar_url=view.avatar_url)


def as_round_response(snapshot: DuelRoundSnapshot) -> DuelRoundResponse:
    return DuelRoundResponse(
        round_id=snapshot.round_id,
        round_number=snapshot.round_number,
        question_id=snapshot.question_id,
        question_text=snapshot.question_text,
        options=list(snapshot.options),
        option_ids=list(snapshot.option_ids),
        time_limit_seconds=snapshot.time_limit_seconds,
        started_at=snapshot.started_at,
        ended_at=snapshot.ended_at,
        correct_index=snapshot.correct_index,
        answers=[
            DuelAnswerResponse(
                user_id=answer.user_id,
                selected_index=answer.selected_index,
                is_correct=answer.is_correct,
                response_time_ms=answer.response_time_ms,
            )
            for answer in snapshot.answers
        ],
        viewer_answered=snapshot.viewer_answered,
    )


def as_duel_response(snapshot: DuelSnapshot) -> DuelResponse:
    return DuelResponse(
        duel_id=snapshot.duel_id,
        subject_id=snapshot.subject_id,
        level_id=snapshot.level_id,
        status=snapshot.status.value,
        best_of=snapshot.best_of,
        created_at=snapshot.created_at,
        started_at=snapshot.started_at,
        ended_at=snapshot.ended_at,
        participants=[
            DuelParticipantResponse(
                participant_id=participant.participant_id,
                user=as_user_response(participant.user),
                invited_by=(
                    as_user_response(participant.invited_by)
                    if participant.invited_by is not None
                    else None
                ),
                score=participant.score,
                result=participant.result.value if participant.result is not None else None,
                accepted=participant.accepted,
                is_current_user=participant.is_current_user,
            )
            for participant in snapshot.participants
        ],
        rounds=[as_round_response(item) for item in snapshot.rounds],
        current_round=(
            as_round_response(snapshot.current_round)
            if snapshot.current_round is not None
            else None
        ),
    )


def as_invitation_response(snapshot: DuelInvitationSnapshot) -> DuelInvitationResponse:
    return DuelInvitationResponse(
        duel_id=snapshot.duel_id,
        subject_id=snapshot.subject_id,
        level_id=snapshot.level_id,
        best_of=snapshot.best_of,
        invited_by=as_user_response(snapshot.invited_by),
        created_at=snapshot.created_at,
    )


def as_classmate_response(snapshot: ClassmateSnapshot) -> ClassmateResponse:
    return ClassmateResponse(
        user_id=snapshot.user_id,
        full_name=snapshot.full_name,
        avatar_url=snapshot.avatar_url,
        is_available=snapshot.is_available,
    )


def as_stats_response(
    stats: DuelStats,
    *,
    user_id: UUID,
    subject_id: UUID | None,
) -> DuelStatsResponse:
    return DuelStatsResponse(
        user_id=user_id,
        subject_id=subject_id,
        total_duels=stats.total_duels,
        wins=stats.wins,
        losses=stats.losses,
        draws=stats.draws,
        win_rate=stats.win_rate,
        current_streak=stats.current_streak,
        best_streak=stats.best_streak,
    )
