from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace
from uuid import UUID, uuid4

from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError

from classduel.api.routes import duels as duels_routes
from classduel.game.duels.constants import DuelResult, DuelStatus
from classduel.game.duels.errors import (
    DuelAnswerAlreadySubmittedError,
    DuelLevelMismatchError,
    DuelNotClassmatesError,
    DuelQuestionPoolExhaustedError,
    SubjectNotFoundError,
)
from classduel.game.duels.types import (
    ClassmateSnapshot,
    DuelAnswerResult,
    DuelParticipantSnapshot,
    DuelRoundSnapshot,
    DuelSnapshot,
    DuelStats,
    DuelUserView,
)
from classduel.main import app

UTC = timezone.utc
NOW_UTC = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)


class _FakeTransaction:
    async def __aenter__(self) -> object:
        return object()

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        return False


class _FakeSessionLocal:
    def begin(self) -> _FakeTransaction:
        return _FakeTransaction()


def _patch_service(monkeypatch, **handlers) -> None:
    monkeypatch.setattr(duels_routes, "SessionLocal", _FakeSessionLocal())
    monkeypatch.setattr(duels_routes, "DuelService", SimpleNamespace(**handlers))


def _snapshot(*, viewer_id: UUID, opponent_id: UUID, status: DuelStatus) -> DuelSnapshot:
    current_round = None
    if status == DuelStatus.ACTIVE:
        current_round = DuelRoundSnapshot(
            round_id=uuid4(),
            round_number=1,
            question_id=uuid4(),
            question_text="Was ist eine Zelle?",
            options=("A", "B", "C", "D"),
            option_ids=tuple(uuid4() for _ in range(4)),
            time_limit_seconds=30,
            started_at=NOW_UTC,
        )
    return DuelSnapshot(
        duel_id=uuid4(),
        subject_id=uuid4(),
        level_id=None,
        status=status,
        best_of=3,
        created_at=NOW_UTC,
        started_at=NOW_UTC if status != DuelStatus.PENDING else None,
        ended_at=None,
        participants=(
            DuelParticipantSnapshot(
                participant_id=uuid4(),
                user=DuelUserView(user_id=viewer_id, full_name="Anna Berg"),
                invited_by=None,
                score=0,
                result=None,
                accepted=True,
                is_current_user=True,
            ),
            DuelParticipantSnapshot(
                participant_id=uuid4(),
                user=DuelUserView(user_id=opponent_id, full_name="Ben Kurz"),
                invited_by=DuelUserView(user_id=viewer_id, full_name="Anna Berg"),
                score=0,
                result=DuelResult.DRAW if status == DuelStatus.COMPLETED else None,
                accepted=status != DuelStatus.PENDING,
            ),
        ),
        current_round=current_round,
    )


def test_create_duel_returns_snapshot(monkeypatch) -> None:
    user_id, opponent_id, subject_id = uuid4(), uuid4(), uuid4()
    captured: dict[str, object] = {}

    async def _fake_create(session, **kwargs):
        captured.update(kwargs)
        return _snapshot(viewer_id=user_id, opponent_id=opponent_id, status=DuelStatus.PENDING)

    _patch_service(monkeypatch, create_duel_for_user=_fake_create)

    client = TestClient(app)
    response = client.post(
        "/v1/duels",
        json={"subject_id": str(subject_id), "best_of": 4},
        headers={"X-User-Id": str(user_id)},
    )

    assert response.status_code == 201
    payload = response.json()
    assert payload["status"] == "pending"
    assert payload["current_round"] is None
    assert payload["participants"][0]["is_current_user"] is True
    assert payload["participants"][1]["invited_by"]["full_name"] == "Anna Berg"
    assert captured["user_id"] == user_id
    assert captured["subject_id"] == subject_id
    assert captured["best_of"] == 4
    assert captured["level_id"] is None


def test_create_duel_requires_user_header() -> None:
    client = TestClient(app)
    response = client.post("/v1/duels", json={"subject_id": str(uuid4())})
    assert response.status_code == 422


def test_get_duel_exposes_open_round_without_correct_index(monkeypatch) -> None:
    user_id, opponent_id = uuid4(), uuid4()

    async def _fake_get(session, *, duel_id, user_id):
        return _snapshot(viewer_id=user_id, opponent_id=opponent_id, status=DuelStatus.ACTIVE)

    _patch_service(monkeypatch, get_duel_for_user=_fake_get)

    client = TestClient(app)
    response = client.get(f"/v1/duels/{uuid4()}", headers={"X-User-Id": str(user_id)})

    assert response.status_code == 200
    current_round = response.json()["current_round"]
    assert current_round["round_number"] == 1
    assert current_round["correct_index"] is None
    assert current_round["options"] == ["A", "B", "C", "D"]
    assert current_round["viewer_answered"] is False


def test_domain_errors_map_to_status_codes(monkeypatch) -> None:
    cases = [
        (SubjectNotFoundError, 404, "E_SUBJECT_NOT_FOUND"),
        (DuelLevelMismatchError, 422, "E_DUEL_LEVEL_MISMATCH"),
        (DuelNotClassmatesError, 403, "E_DUEL_NOT_CLASSMATES"),
        (DuelAnswerAlreadySubmittedError, 409, "E_DUEL_ANSWER_ALREADY_SUBMITTED"),
        (DuelQuestionPoolExhaustedError, 503, "E_DUEL_QUESTION_POOL_EXHAUSTED"),
    ]
    client = TestClient(app)

    for error_cls, expected_status, expected_code in cases:

        async def _fake_invite(session, *, error_cls=error_cls, **kwargs):
            raise error_cls

        _patch_service(monkeypatch, invite_classmate=_fake_invite)
        response = client.post(
            f"/v1/duels/{uuid4()}/invite",
            json={"invitee_user_id": str(uuid4())},
            headers={"X-User-Id": str(uuid4())},
        )

        assert response.status_code == expected_status
        assert response.json() == {"detail": {"code": expected_code}}


def test_racing_duplicate_write_maps_to_conflict(monkeypatch) -> None:
    async def _fake_submit(session, **kwargs):
        raise IntegrityError("INSERT INTO duel_answers", {}, Exception("uq_duel_answers_round_user"))

    _patch_service(monkeypatch, submit_answer=_fake_submit)

    client = TestClient(app)
    response = client.post(
        f"/v1/duels/{uuid4()}/answers",
        json={"question_id": str(uuid4()), "selected_option_id": None, "response_time_ms": 500},
        headers={"X-User-Id": str(uuid4())},
    )

    assert response.status_code == 409
    assert response.json() == {"detail": {"code": "E_DUEL_CONFLICT"}}


def test_submit_answer_returns_acknowledgement_only(monkeypatch) -> None:
    duel_id, user_id, question_id, option_id = uuid4(), uuid4(), uuid4(), uuid4()
    captured: dict[str, object] = {}

    async def _fake_submit(session, **kwargs):
        captured.update(kwargs)
        return DuelAnswerResult(duel_id=duel_id, round_number=2)

    _patch_service(monkeypatch, submit_answer=_fake_submit)

    client = TestClient(app)
    response = client.post(
        f"/v1/duels/{duel_id}/answers",
        json={
            "question_id": str(question_id),
            "selected_option_id": str(option_id),
            "response_time_ms": 1234,
        },
        headers={"X-User-Id": str(user_id)},
    )

    assert response.status_code == 200
    assert response.json() == {"duel_id": str(duel_id), "round_number": 2, "accepted": True}
    assert captured["duel_id"] == duel_id
    assert captured["user_id"] == user_id
    assert captured["selected_option_id"] == option_id
    assert captured["response_time_ms"] == 1234


def test_decline_returns_confirmation(monkeypatch) -> None:
    duel_id = uuid4()

    async def _fake_decline(session, **kwargs):
        return None

    _patch_service(monkeypatch, decline_invitation=_fake_decline)

    client = TestClient(app)
    response = client.post(f"/v1/duels/{duel_id}/decline", headers={"X-User-Id": str(uuid4())})

    assert response.status_code == 200
    assert response.json() == {"duel_id": str(duel_id), "declined": True}


def test_list_duels_passes_status_filter(monkeypatch) -> None:
    user_id, opponent_id = uuid4(), uuid4()
    captured: dict[str, object] = {}

    async def _fake_list(session, **kwargs):
        captured.update(kwargs)
        return [_snapshot(viewer_id=user_id, opponent_id=opponent_id, status=DuelStatus.COMPLETED)]

    _patch_service(monkeypatch, list_duels_for_user=_fake_list)

    client = TestClient(app)
    response = client.get(
        "/v1/duels",
        params={"status": "completed"},
        headers={"X-User-Id": str(user_id)},
    )

    assert response.status_code == 200
    duels = response.json()["duels"]
    assert len(duels) == 1
    assert duels[0]["participants"][1]["result"] == "draw"
    assert captured["status"] == DuelStatus.COMPLETED
    assert captured["limit"] == 50


def test_list_duels_rejects_unknown_status() -> None:
    client = TestClient(app)
    response = client.get(
        "/v1/duels",
        params={"status": "cancelled"},
        headers={"X-User-Id": str(uuid4())},
    )
    assert response.status_code == 422


def test_classmates_and_stats_endpoints(monkeypatch) -> None:
    user_id, subject_id, classmate_id = uuid4(), uuid4(), uuid4()

    async def _fake_classmates(session, **kwargs):
        return [
            ClassmateSnapshot(
                user_id=classmate_id,
                full_name="Ben Kurz",
                avatar_url=None,
                is_available=False,
            )
        ]

    async def _fake_stats(session, **kwargs):
        return DuelStats(
            total_duels=4,
            wins=3,
            losses=1,
            draws=0,
            win_rate=0.75,
            current_streak=1,
            best_streak=2,
        )

    _patch_service(
        monkeypatch,
        list_classmates_for_subject=_fake_classmates,
        get_user_duel_stats=_fake_stats,
    )

    client = TestClient(app)
    classmates = client.get(
        "/v1/duels/classmates",
        params={"subject_id": str(subject_id)},
        headers={"X-User-Id": str(user_id)},
    )
    stats = client.get(
        "/v1/duels/stats",
        params={"subject_id": str(subject_id)},
        headers={"X-User-Id": str(user_id)},
    )

    assert classmates.status_code == 200
    assert classmates.json() == {
        "classmates": [
            {
                "user_id": str(classmate_id),
                "full_name": "Ben Kurz",
                "avatar_url": None,
                "is_available": False,
            }
        ]
    }
    assert stats.status_code == 200
    assert stats.json() == {
        "user_id": str(user_id),
        "subject_id": str(subject_id),
        "total_duels": 4,
        "wins": 3,
        "losses": 1,
        "draws": 0,
        "win_rate": 0.75,
        "current_streak": 1,
        "best_streak": 2,
    }
