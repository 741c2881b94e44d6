from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from classduel.db.session import SessionLocal
from classduel.game.duels.constants import DuelResult, DuelStatus
from classduel.game.duels.errors import (
    DuelNotFoundError,
    DuelNotParticipantError,
    SubjectNotFoundError,
)
from classduel.game.duels.service import DuelService
from tests.integration.duel_fixtures import (
    _answer_open_round,
    _create_started_duel,
    _create_user,
    _enroll,
    _seed_classroom,
)

UTC = timezone.utc


@pytest.mark.asyncio
async def test_duel_snapshot_hides_correct_index_until_round_closes() -> None:
    now_utc = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)
    classroom = await _seed_classroom(now_utc=now_utc)
    creator_id, opponent_id = classroom.creator_id, classroom.opponent_id
    duel_id = await _create_started_duel(
        creator_id=creator_id,
        opponent_id=opponent_id,
        subject_id=classroom.subject.subject_id,
        best_of=3,
        now_utc=now_utc,
    )

    await _answer_open_round(duel_id, creator_id, correct=True, response_time_ms=800, now_utc=now_utc)
    async with SessionLocal.begin() as session:
        mid_round = await DuelService.get_duel_for_user(session, duel_id=duel_id, user_id=creator_id)
        opponent_view = await DuelService.get_duel_for_user(
            session,
            duel_id=duel_id,
            user_id=opponent_id,
        )

    assert mid_round.status == DuelStatus.ACTIVE
    assert mid_round.rounds == ()
    assert mid_round.current_round is not None
    assert mid_round.current_round.round_number == 1
    assert mid_round.current_round.correct_index is None
    assert mid_round.current_round.answers == ()
    assert len(mid_round.current_round.options) == 4
    assert len(mid_round.current_round.option_ids) == 4
    assert mid_round.current_round.viewer_answered is True
    assert opponent_view.current_round is not None
    assert opponent_view.current_round.viewer_answered is False
    assert [item.is_current_user for item in mid_round.participants] == [True, False]
    assert mid_round.participants[1].invited_by is not None
    assert mid_round.participants[1].invited_by.user_id == creator_id
    assert mid_round.participants[1].invited_by.full_name == "Anna Berg"

    await _answer_open_round(duel_id, opponent_id, correct=False, response_time_ms=400, now_utc=now_utc)
    async with SessionLocal.begin() as session:
        after_round = await DuelService.get_duel_for_user(session, duel_id=duel_id, user_id=opponent_id)

    assert len(after_round.rounds) == 1
    closed = after_round.rounds[0]
    assert closed.correct_index == 2
    assert {answer.user_id: answer.is_correct for answer in closed.answers} == {
        creator_id: True,
        opponent_id: False,
    }
    assert after_round.current_round is not None
    assert after_round.current_round.round_number == 2
    assert after_round.current_round.viewer_answered is False
    assert {item.user.user_id: item.score for item in after_round.participants} == {
        creator_id: 1,
        opponent_id: 0,
    }


@pytest.mark.asyncio
async def test_completed_duel_snapshot_has_no_current_round() -> None:
    now_utc = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)
    classroom = await _seed_classroom(now_utc=now_utc)
    creator_id, opponent_id = classroom.creator_id, classroom.opponent_id
    duel_id = await _create_started_duel(
        creator_id=creator_id,
        opponent_id=opponent_id,
        subject_id=classroom.subject.subject_id,
        best_of=1,
        now_utc=now_utc,
    )
    await _answer_open_round(duel_id, creator_id, correct=False, response_time_ms=800, now_utc=now_utc)
    await _answer_open_round(duel_id, opponent_id, correct=True, response_time_ms=900, now_utc=now_utc)

    async with SessionLocal.begin() as session:
        snapshot = await DuelService.get_duel_for_user(session, duel_id=duel_id, user_id=creator_id)

    assert snapshot.status == DuelStatus.COMPLETED
    assert snapshot.current_round is None
    assert len(snapshot.rounds) == 1
    assert {item.user.user_id: item.result for item in snapshot.participants} == {
        creator_id: DuelResult.LOSE,
        opponent_id: DuelResult.WIN,
    }


@pytest.mark.asyncio
async def test_get_duel_requires_existing_duel_and_participant() -> None:
    now_utc = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)
    classroom = await _seed_classroom(now_utc=now_utc)
    outsider_id = await _create_user("Clara Weit", now_utc=now_utc)
    duel_id = await _create_started_duel(
        creator_id=classroom.creator_id,
        opponent_id=classroom.opponent_id,
        subject_id=classroom.subject.subject_id,
        best_of=3,
        now_utc=now_utc,
    )

    async with SessionLocal.begin() as session:
        with pytest.raises(DuelNotFoundError):
            await DuelService.get_duel_for_user(session, duel_id=uuid4(), user_id=outsider_id)
        with pytest.raises(DuelNotParticipantError):
            await DuelService.get_duel_for_user(session, duel_id=duel_id, user_id=outsider_id)


@pytest.mark.asyncio
async def test_list_duels_orders_by_start_or_creation_time() -> None:
    now_utc = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)
    classroom = await _seed_classroom(now_utc=now_utc)
    creator_id = classroom.creator_id

    started_early = await _create_started_duel(
        creator_id=creator_id,
        opponent_id=classroom.opponent_id,
        subject_id=classroom.subject.subject_id,
        best_of=3,
        now_utc=now_utc,
    )
    async with SessionLocal.begin() as session:
        pending_late = await DuelService.create_duel(
            session,
            initiator_user_id=creator_id,
            subject_id=classroom.subject.subject_id,
            now_utc=now_utc + timedelta(hours=2),
        )
    started_mid = await _create_started_duel(
        creator_id=creator_id,
        opponent_id=classroom.opponent_id,
        subject_id=classroom.subject.subject_id,
        best_of=3,
        now_utc=now_utc + timedelta(hours=1),
    )

    async with SessionLocal.begin() as session:
        all_duels = await DuelService.list_duels_for_user(session, user_id=creator_id)
        active_duels = await DuelService.list_duels_for_user(
            session,
            user_id=creator_id,
            status=DuelStatus.ACTIVE,
        )

    assert [item.duel_id for item in all_duels] == [pending_late.id, started_mid, started_early]
    assert [item.duel_id for item in active_duels] == [started_mid, started_early]


@pytest.mark.asyncio
async def test_list_pending_invitations_returns_unaccepted_invites_only() -> None:
    now_utc = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)
    classroom = await _seed_classroom(now_utc=now_utc)
    creator_id, opponent_id = classroom.creator_id, classroom.opponent_id

    async with SessionLocal.begin() as session:
        invited = await DuelService.create_duel(
            session,
            initiator_user_id=creator_id,
            subject_id=classroom.subject.subject_id,
            best_of=7,
            now_utc=now_utc,
        )
        await DuelService.invite_to_duel(
            session,
            duel_id=invited.id,
            inviter_user_id=creator_id,
            invitee_user_id=opponent_id,
            now_utc=now_utc,
        )
    await _create_started_duel(
        creator_id=creator_id,
        opponent_id=opponent_id,
        subject_id=classroom.subject.subject_id,
        best_of=3,
        now_utc=now_utc + timedelta(minutes=5),
    )

    async with SessionLocal.begin() as session:
        opponent_invitations = await DuelService.list_pending_invitations(session, user_id=opponent_id)
        creator_invitations = await DuelService.list_pending_invitations(session, user_id=creator_id)

    assert [item.duel_id for item in opponent_invitations] == [invited.id]
    assert opponent_invitations[0].best_of == 7
    assert opponent_invitations[0].invited_by.user_id == creator_id
    assert opponent_invitations[0].invited_by.full_name == "Anna Berg"
    assert creator_invitations == []


@pytest.mark.asyncio
async def test_list_classmates_flags_users_in_active_duels() -> None:
    now_utc = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)
    classroom = await _seed_classroom(now_utc=now_utc)
    free_classmate_id = await _create_user("Emil Frei", now_utc=now_utc)
    await _enroll(classroom.class_id, free_classmate_id, now_utc=now_utc)
    await _create_user("Clara Weit", now_utc=now_utc)

    async with SessionLocal.begin() as session:
        before = await DuelService.list_classmates_for_subject(
            session,
            user_id=classroom.creator_id,
            subject_id=classroom.subject.subject_id,
        )
    assert [(item.full_name, item.is_available) for item in before] == [
        ("Ben Kurz", True),
        ("Emil Frei", True),
    ]

    await _create_started_duel(
        creator_id=classroom.creator_id,
        opponent_id=classroom.opponent_id,
        subject_id=classroom.subject.subject_id,
        best_of=3,
        now_utc=now_utc,
    )
    async with SessionLocal.begin() as session:
        after = await DuelService.list_classmates_for_subject(
            session,
            user_id=free_classmate_id,
            subject_id=classroom.subject.subject_id,
        )
        with pytest.raises(SubjectNotFoundError):
            await DuelService.list_classmates_for_subject(
                session,
                user_id=free_classmate_id,
                subject_id=uuid4(),
            )
    assert [(item.full_name, item.is_available) for item in after] == [
        ("Anna Berg", False),
        ("Ben Kurz", False),
    ]
