from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from uuid import UUID

import structlog
from fastapi import APIRouter, Header, HTTPException, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from classduel.api.routes.duels_models import (
    ClassmateListResponse,
    DuelAnswerRequest,
    DuelAnswerSubmitResponse,
    DuelCreateRequest,
    DuelDeclineResponse,
    DuelInvitationListResponse,
    DuelInviteRequest,
    DuelListResponse,
    DuelResponse,
    DuelStatsResponse,
    as_classmate_response,
    as_duel_response,
    as_invitation_response,
    as_stats_response,
)
from classduel.db.session import SessionLocal
from classduel.game.duels.constants import DuelStatus
from classduel.game.duels.errors import (
    DuelAccessError,
    DuelConflictError,
    DuelError,
    DuelNotFoundError,
    DuelQuestionPoolExhaustedError,
    DuelValidationError,
)
from classduel.game.duels.service import DuelService

router = APIRouter(prefix="/v1/duels", tags=["duels"])
logger = structlog.get_logger(__name__)

USER_ID_HEADER = "X-User-Id"


def duel_error_status(exc: DuelError) -> int:
    if isinstance(exc, DuelNotFoundError):
        return 404
    if isinstance(exc, DuelValidationError):
        return 422
    if isinstance(exc, DuelAccessError):
        return 403
    if isinstance(exc, DuelConflictError):
        return 409
    if isinstance(exc, DuelQuestionPoolExhaustedError):
        return 503
    return 400


@asynccontextmanager
async def duel_transaction() -> AsyncIterator[AsyncSession]:
    """One request, one transaction; domain errors become HTTP errors after rollback."""
    try:
        async with SessionLocal.begin() as session:
            yield session
    except DuelError as exc:
        raise HTTPException(status_code=duel_error_status(exc), detail={"code": exc.code}) from exc
    except IntegrityError as exc:
        logger.warning("duel_write_conflict", error=str(exc.orig))
        raise HTTPException(status_code=409, detail={"code": "E_DUEL_CONFLICT"}) from exc


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


@router.post("", response_model=DuelResponse, status_code=201)
async def create_duel(
    payload: DuelCreateRequest,
    user_id: UUID = Header(alias=USER_ID_HEADER),
) -> DuelResponse:
    async with duel_transaction() as session:
        snapshot = await DuelService.create_duel_for_user(
            session,
            user_id=user_id,
            subject_id=payload.subject_id,
            level_id=payload.level_id,
            best_of=payload.best_of,
            now_utc=_now_utc(),
        )
    return as_duel_response(snapshot)


@router.get("", response_model=DuelListResponse)
async def list_duels(
    user_id: UUID = Header(alias=USER_ID_HEADER),
    status: DuelStatus | None = Query(default=None),
    limit: int = Query(default=50, ge=1, le=200),
) -> DuelListResponse:
    async with duel_transaction() as session:
        snapshots = await DuelService.list_duels_for_user(
            session,
            user_id=user_id,
            status=status,
            limit=limit,
        )
    return DuelListResponse(duels=[as_duel_response(snapshot) for snapshot in snapshots])


@router.get("/invitations", response_model=DuelInvitationListResponse)
async def list_invitations(
    user_id: UUID = Header(alias=USER_ID_HEADER),
) -> DuelInvitationListResponse:
    async with duel_transaction() as session:
        invitations = await DuelService.list_pending_invitations(session, user_id=user_id)
    return DuelInvitationListResponse(
        invitations=[as_invitation_response(invitation) for invitation in invitations]
    )


@router.get("/classmates", response_model=ClassmateListResponse)
async def list_classmates(
    subject_id: UUID = Query(),
    user_id: UUID = Header(alias=USER_ID_HEADER),
) -> ClassmateListResponse:
    async with duel_transaction() as session:
        classmates = await DuelService.list_classmates_for_subject(
            session,
            user_id=user_id,
            subject_id=subject_id,
        )
    return ClassmateListResponse(
        classmates=[as_classmate_response(classmate) for classmate in classmates]
    )


@router.get("/stats", response_model=DuelStatsResponse)
async def get_stats(
    user_id: UUID = Header(alias=USER_ID_HEADER),
    subject_id: UUID | None = Query(default=None),
) -> DuelStatsResponse:
    async with duel_transaction() as session:
        stats = await DuelService.get_user_duel_stats(
            session,
            user_id=user_id,
            subject_id=subject_id,
        )
    return as_stats_response(stats, user_id=user_id, subject_id=subject_id)


@router.get("/{duel_id}", response_model=DuelResponse)
async def get_duel(
    duel_id: UUID,
    user_id: UUID = Header(alias=USER_ID_HEADER),
) -> DuelResponse:
    async with duel_transaction() as session:
        snapshot = await DuelService.get_duel_for_user(session, duel_id=duel_id, user_id=user_id)
    return as_duel_response(snapshot)


@router.post("/{duel_id}/invite", response_model=DuelResponse)
async def invite(
    duel_id: UUID,
    payload: DuelInviteRequest,
    user_id: UUID = Header(alias=USER_ID_HEADER),
) -> DuelResponse:
    async with duel_transaction() as session:
        snapshot = await DuelService.invite_classmate(
            session,
            duel_id=duel_id,
            user_id=user_id,
            invitee_user_id=payload.invitee_user_id,
            now_utc=_now_utc(),
        )
    return as_duel_response(snapshot)


@router.post("/{duel_id}/accept", response_model=DuelResponse)
async def accept(
    duel_id: UUID,
    user_id: UUID = Header(alias=USER_ID_HEADER),
) -> DuelResponse:
    async with duel_transaction() as session:
        snapshot = await DuelService.accept_invitation(
            session,
            duel_id=duel_id,
            user_id=user_id,
            now_utc=_now_utc(),
        )
    return as_duel_response(snapshot)


@router.post("/{duel_id}/decline", response_model=DuelDeclineResponse)
async def decline(
    duel_id: UUID,
    user_id: UUID = Header(alias=USER_ID_HEADER),
) -> DuelDeclineResponse:
    async with duel_transaction() as session:
        await DuelService.decline_invitation(
            session,
            duel_id=duel_id,
            user_id=user_id,
            now_utc=_now_utc(),
        )
    return DuelDeclineResponse(duel_id=duel_id, declined=True)


@router.post("/{duel_id}/start", response_model=DuelResponse)
async def start(
    duel_id: UUID,
    user_id: UUID = Header(alias=USER_ID_HEADER),
) -> DuelResponse:
    async with duel_transaction() as session:
        snapshot = await DuelService.start_duel_for_user(
            session,
            duel_id=duel_id,
            user_id=user_id,
            now_utc=_now_utc(),
        )
    return as_duel_response(snapshot)


@router.post("/{duel_id}/answers", response_model=DuelAnswerSubmitResponse)
async def submit_answer(
    duel_id: UUID,
    payload: DuelAnswerRequest,
    user_id: UUID = Header(alias=USER_ID_HEADER),
) -> DuelAnswerSubmitResponse:
    async with duel_transaction() as session:
        result = await DuelService.submit_answer(
            session,
            duel_id=duel_id,
            user_id=user_id,
            question_id=payload.question_id,
            selected_option_id=payload.selected_option_id,
            response_time_ms=payload.response_time_ms,
            now_utc=_now_utc(),
        )
    return DuelAnswerSubmitResponse(
        duel_id=result.duel_id,
        round_number=result.round_number,
        accepted=result.accepted,
    )
