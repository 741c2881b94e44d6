from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

import structlog
from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from classduel.api.routes.duels import duel_transaction
from classduel.core.config import get_settings
from classduel.game.duels.service import DuelService
from classduel.services.internal_auth import (
    extract_client_ip,
    is_client_ip_allowed,
    is_internal_request_authenticated,
)

router = APIRouter(prefix="/internal/duels", tags=["internal", "duels"])
logger = structlog.get_logger(__name__)


class DuelForceCompleteResponse(BaseModel):
    duel_id: UUID
    status: str
    ended_at: datetime | None = None


def _assert_internal_access(request: Request) -> None:
    settings = get_settings()
    client_ip = extract_client_ip(
        request,
        trusted_proxies=getattr(settings, "internal_api_trusted_proxies", ""),
    )

    if not is_client_ip_allowed(client_ip=client_ip, allowlist=settings.internal_api_allowlist):
        logger.warning("internal_duels_auth_failed", reason="ip_not_allowed", client_ip=client_ip)
        raise HTTPException(status_code=403, detail={"code": "E_FORBIDDEN"})

    if not is_internal_request_authenticated(
        request,
        expected_token=settings.internal_api_token,
    ):
        logger.warning("internal_duels_auth_failed", reason="invalid_credentials", client_ip=client_ip)
        raise HTTPException(status_code=403, detail={"code": "E_FORBIDDEN"})


@router.post("/{duel_id}/force-complete", response_model=DuelForceCompleteResponse)
async def force_complete(duel_id: UUID, request: Request) -> DuelForceCompleteResponse:
    _assert_internal_access(request)
    now_utc = datetime.now(timezone.utc)

    async with duel_transaction() as session:
        duel = await DuelService.force_complete_duel(session, duel_id=duel_id, now_utc=now_utc)
        response = DuelForceCompleteResponse(
            duel_id=duel.id,
            status=duel.status,
            ended_at=duel.ended_at,
        )

    logger.info("internal_duel_force_completed", duel_id=str(duel_id))
    return response
