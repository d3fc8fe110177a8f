"""HTTP API tests — drive the wizard end-to-end through FastAPI.

The app is built with an injected classifier and notifier, so no Gemini
credential or webhook is needed.  ``TestClient`` is used as a context
manager so the lifespan handler runs and populates ``app.state``.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from mindcheck.models.session import SessionContext
from mindcheck.store import SessionStore
from mindcheck_server import app as app_module
from mindcheck_server.app import create_app
from mindcheck_server.config import ServerSettings

from helpers.doubles import (
    HIGH_RISK_PREDICTION,
    LOW_RISK,
    CannedClassifier,
    FailingClassifier,
    RecordingNotifier,
)

API = "/api/v1"
HEADERS = {"X-User-ID": "user-1"}

LOW_RISK_ANSWERS = [
    ("hopeless", 1),
    ("anxiety", 2),
    ("sleep", 1),
    ("social_withdraw", "No"),
    ("self_harm", 0),
]


def _make_client(classifier=None, notifier=None):
    app = create_app(
        ServerSettings(),
        classifier=classifier or CannedClassifier(LOW_RISK),
        notifier=notifier or RecordingNotifier(),
    )
    return TestClient(app)


@pytest.fixture
def client():
    with _make_client() as c:
        yield c


def _create(client, session_id="s1"):
    resp = client.post(f"{API}/sessions", json={"session_id": session_id}, headers=HEADERS)
    assert resp.status_code == 201, resp.text
    return resp.json()


def _post(client, session_id, path, body=None):
    return client.post(f"{API}/sessions/{session_id}/{path}", json=body, headers=HEADERS)


def _to_home(client, session_id="s1", guardian_phone=""):
    _create(client, session_id)
    assert _post(client, session_id, "consent").status_code == 200
    resp = _post(client, session_id, "register", {
        "name": "Asha", "phone": "555-0100", "guardian_phone": guardian_phone,
    })
    assert resp.status_code == 200, resp.text
    return resp.json()


def _answer_all(client, session_id, answers):
    step = _post(client, session_id, "start").json()
    for qid, value in answers:
        assert step["question"]["id"] == qid, f"Expected {qid}, got {step['question']['id']}"
        resp = _post(client, session_id, "answers", {"qid": qid, "value": value})
        assert resp.status_code == 200, resp.text
        step = resp.json()
    return step


# =====================================================================
# Tests: Session management
# =====================================================================


class TestSessions:

    def test_create_starts_at_consent(self, client):
        info = _create(client)
        assert info["session_id"] == "s1"
        assert info["stage"] == 0
        assert info["stage_name"] == "Consent"

    def test_missing_user_header_is_401(self, client):
        resp = client.post(f"{API}/sessions", json={"session_id": "s1"})
        assert resp.status_code == 401

    def test_duplicate_session_is_409(self, client):
        _create(client)
        resp = client.post(f"{API}/sessions", json={"session_id": "s1"}, headers=HEADERS)
        assert resp.status_code == 409
        assert resp.json()["detail"] == "Session already exists"

    def test_unknown_session_is_404(self, client):
        resp = client.get(f"{API}/sessions/nope", headers=HEADERS)
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Session not found"

    def test_sessions_are_scoped_to_user(self, client):
        _create(client)
        resp = client.get(f"{API}/sessions/s1", headers={"X-User-ID": "someone-else"})
        assert resp.status_code == 404

    def test_list_and_delete(self, client):
        _create(client, "a")
        _create(client, "b")
        listed = client.get(f"{API}/sessions", headers=HEADERS).json()
        assert {s["session_id"] for s in listed} == {"a", "b"}

        assert client.delete(f"{API}/sessions/a", headers=HEADERS).status_code == 204
        assert client.delete(f"{API}/sessions/a", headers=HEADERS).status_code == 404
        listed = client.get(f"{API}/sessions", headers=HEADERS).json()
        assert [s["session_id"] for s in listed] == ["b"]


# =====================================================================
# Tests: Wizard flow
# =====================================================================


class TestFlow:

    def test_low_risk_flow_reaches_results(self, client):
        step = _to_home(client)
        assert step["stage_name"] == "Home"
        assert step["progress"] is None, "Home hides the progress bar"

        step = _answer_all(client, "s1", LOW_RISK_ANSWERS)
        assert step["stage_name"] == "Description"
        assert step["progress"] == 100.0

        step = _post(client, "s1", "description", {"text": "Work has been heavy"}).json()
        assert step["stage_name"] == "Results"
        assert step["result"]["risk_alert"] == "Monitor"

    def test_first_question_carries_position(self, client):
        _to_home(client)
        step = _post(client, "s1", "start").json()
        assert step["stage_name"] == "Assessment"
        assert step["question"]["id"] == "hopeless"
        assert step["question_number"] == 1
        assert step["total_questions"] == 5

    def test_escalation_extends_total(self, client):
        _to_home(client)
        answers = LOW_RISK_ANSWERS[:-1] + [("self_harm", 3)]
        step = _answer_all(client, "s1", answers)
        assert step["question"]["id"] == "plan"
        assert step["total_questions"] == 7

    def test_get_step_reflects_current_stage(self, client):
        _create(client)
        step = client.get(f"{API}/sessions/s1/step", headers=HEADERS).json()
        assert step["stage_name"] == "Consent"
        assert step["progress"] == 0.0

    def test_restart_returns_home(self, client):
        _to_home(client)
        _answer_all(client, "s1", LOW_RISK_ANSWERS)
        _post(client, "s1", "description", {"text": ""})
        step = _post(client, "s1", "restart").json()
        assert step["stage_name"] == "Home"
        assert step["result"] is None


# =====================================================================
# Tests: Rejections
# =====================================================================


class TestRejections:

    def test_register_without_phone_is_422(self, client):
        _create(client)
        _post(client, "s1", "consent")
        resp = _post(client, "s1", "register", {"name": "Asha", "phone": "  "})
        assert resp.status_code == 422
        assert resp.json()["detail"] == "Please provide your details so we can assist you better."
        step = client.get(f"{API}/sessions/s1/step", headers=HEADERS).json()
        assert step["stage_name"] == "Register", "Failed registration must not advance"

    def test_wrong_stage_is_400(self, client):
        _create(client)
        resp = _post(client, "s1", "start")
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Not allowed at the current step", (
            "Internal stage names must not leak to the client"
        )

    def test_answer_for_wrong_question_is_400(self, client):
        _to_home(client)
        _post(client, "s1", "start")
        resp = _post(client, "s1", "answers", {"qid": "sleep", "value": 1})
        assert resp.status_code == 400

    def test_invalid_value_is_400(self, client):
        _to_home(client)
        _post(client, "s1", "start")
        resp = _post(client, "s1", "answers", {"qid": "hopeless", "value": 9})
        assert resp.status_code == 400


# =====================================================================
# Tests: Analysis outcomes
# =====================================================================


class TestAnalysisOutcomes:

    def test_high_risk_routes_to_crisis_and_alerts_guardian(self):
        notifier = RecordingNotifier()
        with _make_client(CannedClassifier(HIGH_RISK_PREDICTION), notifier) as client:
            _to_home(client, guardian_phone="555-0199")
            _answer_all(client, "s1", LOW_RISK_ANSWERS)
            step = _post(client, "s1", "description", {"text": ""}).json()

        assert step["stage_name"] == "Crisis Intervention"
        assert step["guardian_contact_on_file"] is True
        assert step["guardian_notified"] is True
        assert step["notification"]["delivered"] is True
        assert len(notifier.sent) == 1

    def test_acknowledge_notification(self):
        notifier = RecordingNotifier(delivered=False)
        with _make_client(CannedClassifier(HIGH_RISK_PREDICTION), notifier) as client:
            _to_home(client, guardian_phone="555-0199")
            _answer_all(client, "s1", LOW_RISK_ANSWERS)
            step = _post(client, "s1", "description", {"text": ""}).json()
            assert step["guardian_notified"] is False
            step = _post(client, "s1", "notification/ack").json()

        assert step["guardian_notified"] is True

    def test_failed_analysis_returns_to_description(self):
        with _make_client(FailingClassifier()) as client:
            _to_home(client)
            _answer_all(client, "s1", LOW_RISK_ANSWERS)
            resp = _post(client, "s1", "description", {"text": "hello"})

        assert resp.status_code == 200
        step = resp.json()
        assert step["stage_name"] == "Description"
        assert step["error"] == "Failed to analyze assessment data. Please try again."
        assert step["description"] == "hello", "Notes must survive a failed analysis"


# =====================================================================
# Tests: Reference data and health
# =====================================================================


class TestReference:

    def test_questions(self, client):
        data = client.get(f"{API}/reference/questions").json()
        assert [q["id"] for q in data["base"]] == [
            "hopeless", "anxiety", "sleep", "social_withdraw", "self_harm",
        ]
        assert [q["id"] for q in data["high_risk"]] == ["plan", "means"]

    def test_stages(self, client):
        data = client.get(f"{API}/reference/stages").json()
        assert len(data) == 8
        assert data[-1] == {"id": 7, "key": "crisis_intervention", "name": "Crisis Intervention"}

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}


# =====================================================================
# Tests: Idle session expiry
# =====================================================================


def _age(ctx: SessionContext, minutes: int) -> None:
    ctx.updated_at = datetime.now(timezone.utc) - timedelta(minutes=minutes)


class TestSessionExpiry:

    def test_default_ttl_is_enabled(self):
        assert ServerSettings().session_ttl_minutes > 0, (
            "Sessions must expire by default"
        )

    def test_idle_session_purged_on_create(self, client):
        _create(client, "old")
        store = client.app.state.store
        ctx = asyncio.run(store.get("user-1", "old"))
        _age(ctx, ServerSettings().session_ttl_minutes + 1)

        _create(client, "new")
        assert client.get(f"{API}/sessions/old", headers=HEADERS).status_code == 404
        assert client.get(f"{API}/sessions/new", headers=HEADERS).status_code == 200

    @pytest.mark.asyncio
    async def test_purge_task_drops_idle_sessions(self, monkeypatch):
        store = SessionStore()
        idle = SessionContext(user_id="u1", session_id="idle")
        _age(idle, 90)
        await store.add(idle)
        await store.add(SessionContext(user_id="u1", session_id="fresh"))

        sleeps = []

        async def _fake_sleep(seconds):
            sleeps.append(seconds)
            if len(sleeps) > 1:
                raise asyncio.CancelledError

        monkeypatch.setattr(app_module.asyncio, "sleep", _fake_sleep)
        with pytest.raises(asyncio.CancelledError):
            await app_module._purge_idle_sessions(store, 60)

        assert sleeps[0] == 3600, "Purge interval should match the TTL"
        assert await store.get("u1", "idle") is None
        assert await store.get("u1", "fresh") is not None
