import pytest
from fastapi.testclient import TestClient

from config import settings
from main import app
from models.schemas.records import ApplicationRecord, ResumeRecord
from services.record_store import UserRecords

client = TestClient(app)

USER = {"X-User-Id": "user-1"}

pytestmark = pytest.mark.api


@pytest.fixture
def seeded(store):
    store.users["user-1"] = UserRecords(
        applications=[
            ApplicationRecord(id="a1", status="applied", applied_date="2026-03-02"),
            ApplicationRecord(id="a2", status="interview", applied_date="2026-03-03"),
            ApplicationRecord(id="a3", status="offer", applied_date="2026-02-20"),
        ],
        resumes=[ResumeRecord(id="r1", ats_score=82)],
    )
    return store


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "gemini_configured" in data


def test_project_scenario():
    response = client.post("/forecast/project", json={
        "applications_per_week": 6,
        "weeks": 8,
        "response_rate": 25,
        "interview_rate": 12,
        "offer_rate": 4,
        "quality_lift_pct": 5,
    })
    assert response.status_code == 200
    data = response.json()
    assert data["total_applications"] == 48
    assert data["expected_offers"] == 2


@pytest.mark.parametrize("overrides", [
    {"weeks": 0},
    {"response_rate": 120},
    {"applications_per_week": -3},
])
def test_project_scenario_rejects_invalid_input(overrides):
    body = {
        "applications_per_week": 6,
        "weeks": 8,
        "response_rate": 25,
        "interview_rate": 12,
        "offer_rate": 4,
    }
    body.update(overrides)
    assert client.post("/forecast/project", json=body).status_code == 422


def test_missing_user_header(store):
    assert client.get("/forecast").status_code == 401
    assert client.get("/runtime/signals").status_code == 401


def test_forecast_json(seeded):
    response = client.get("/forecast", params={"horizons": [8, 4]}, headers=USER)
    assert response.status_code == 200
    data = response.json()
    assert data["metrics"]["total_applications"] == 3
    assert len(data["scenarios"]) == 3
    assert [p["weeks"] for p in data["scenarios"][0]["projections"]] == [4, 8]


def test_forecast_rejects_bad_horizon(seeded):
    response = client.get("/forecast", params={"horizons": [0]}, headers=USER)
    assert response.status_code == 422


def test_forecast_csv(seeded):
    response = client.get("/forecast", params={"format": "csv"}, headers=USER)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "attachment" in response.headers["content-disposition"]
    assert response.text.splitlines()[0] == "section,metric,value"


def test_composite_scores(seeded):
    response = client.get(
        "/scores/composite",
        params={"preset": "program-office", "risk_tolerance": 80},
        headers=USER,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["preset"] == "program-office"
    assert data["risk_tolerance"] == 80
    assert set(data["scores"]) == {
        "execution_score",
        "sla_compliance",
        "quality_index",
        "pipeline_efficiency",
        "velocity_score",
        "risk_score",
    }
    assert len(data["governance"]) == 4
    assert data["unavailable"] == []


def test_composite_scores_reject_bad_params(seeded):
    assert client.get("/scores/composite", params={"risk_tolerance": 101}, headers=USER).status_code == 422
    assert client.get("/scores/composite", params={"preset": "unknown"}, headers=USER).status_code == 422


def test_composite_scores_for_new_user(store):
    data = client.get("/scores/composite", headers={"X-User-Id": "new"}).json()
    assert data["scores"]["quality_index"] == 70
    assert data["risk_tolerance"] == settings.default_risk_tolerance


def test_runtime_signals_degrade_on_missing_schema(seeded):
    seeded.missing.add("roles")
    response = client.get("/runtime/signals", headers=USER)
    assert response.status_code == 200
    data = response.json()
    assert data["unavailable"] == ["roles"]
    assert data["applications"]["total"] == 3


def test_store_failure_maps_to_503(seeded):
    seeded.failing["applications"] = "connection refused"
    response = client.get("/runtime/signals", headers=USER)
    assert response.status_code == 503
    assert response.json()["reason"] == "connection refused"


def test_list_features():
    response = client.get("/features")
    assert response.status_code == 200
    data = response.json()
    assert len(data["features"]) == 12
    assert data["summary"]["total"] == 12
    assert data["summary"]["live"] == 12
    assert data["summary"]["completion_pct"] == 100


def test_feature_lane(seeded):
    response = client.get("/features/security-compliance-center/lane", headers=USER)
    assert response.status_code == 200
    data = response.json()
    assert data["lane"] == "security"
    assert data["lane_score"] == 82
    assert data["module_href"] == "/app/security-center"


def test_execute_unknown_feature(store):
    response = client.post("/features/nope/execute", json={}, headers=USER)
    assert response.status_code == 404


def test_execute_feature_creates_reminders(seeded):
    response = client.post(
        "/features/pipeline-sla-tracker/execute",
        json={"focus": "risk", "notes": "Focus on fintech", "priority": 60, "owner": "Ops Lead"},
        headers=USER,
    )
    assert response.status_code == 200
    data = response.json()
    package = data["package"]
    assert package["lane"] == "pipeline"
    assert package["focus"] == "risk"
    assert len(package["actions"]) == 5
    assert package["actions"][0]["owner"] == "Ops Lead"
    assert package["actions"][0]["checklist"][-1] == "Apply custom note: Focus on fintech"
    assert data["reminders"]["created"] == 3
    assert len(seeded.notifications) == 3
    assert data["brief"] is None
    assert data["degraded"] is False


def test_execute_feature_reminder_failure_keeps_package(seeded):
    seeded.failing["notifications_insert"] = "read-only replica"
    response = client.post("/features/referral-graph/execute", json={}, headers=USER)
    assert response.status_code == 200
    data = response.json()
    assert data["reminders"] == {
        "created": 0,
        "persistence_enabled": True,
        "failed": True,
        "error": "read-only replica",
    }
    assert len(data["package"]["actions"]) == 5
    assert data["unavailable"] == []
    assert seeded.notifications == []


def test_execute_feature_unread_read_failure_is_503(seeded):
    seeded.failing["notifications"] = "connection refused"
    response = client.post("/features/referral-graph/execute", json={}, headers=USER)
    assert response.status_code == 503


def test_execute_feature_skip_reminders(seeded):
    response = client.post(
        "/features/referral-graph/execute", json={"create_reminders": False}, headers=USER
    )
    assert response.json()["reminders"]["created"] == 0
    assert seeded.notifications == []


def test_execute_rejects_long_notes(seeded):
    response = client.post(
        "/features/referral-graph/execute", json={"notes": "x" * 1201}, headers=USER
    )
    assert response.status_code == 422


def test_execute_narrative_without_key_is_degraded(seeded, monkeypatch):
    monkeypatch.setattr(settings, "gemini_api_key", "")
    response = client.post(
        "/features/referral-graph/execute", json={"narrative": True}, headers=USER
    )
    assert response.status_code == 200
    data = response.json()
    assert data["brief"] is None
    assert data["degraded"] is True


def test_feature_sprint(store):
    response = client.post(
        "/features/jd-resume-tailor/sprint", json={"notes": "Target fintech"}, headers=USER
    )
    assert response.status_code == 200
    data = response.json()
    assert data["feature_id"] == "jd-resume-tailor"
    assert len(data["sprint_days"]) == 5
    assert data["sprint_days"][0]["actions"][0] == "Select 10 top-priority roles for tailoring."
    assert data["sprint_days"][4]["actions"][-1] == "Apply custom directive: Target fintech"


def test_feature_sprint_errors(store):
    assert client.post("/features/jd-resume-tailor/sprint", json={}).status_code == 401
    assert client.post("/features/nope/sprint", json={}, headers=USER).status_code == 404
    long_notes = {"notes": "x" * 501}
    assert client.post("/features/jd-resume-tailor/sprint", json=long_notes, headers=USER).status_code == 422
