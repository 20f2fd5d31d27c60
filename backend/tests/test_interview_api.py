"""
API tests for the interview and topics routers.
Uses FastAPI TestClient with get_interview_service overridden to in-memory repositories and the
scripted generator, so no database rows or API keys are involved.
Requires: fastapi, httpx.
"""
import json
import uuid

import pytest

try:
    from fastapi.testclient import TestClient
    from worldforge.main import app
    from worldforge.api.deps import get_interview_service
    _API_DEPS_LOADED = True
except ImportError:
    _API_DEPS_LOADED = False
    TestClient = app = get_interview_service = None  # type: ignore[misc, assignment]

from worldforge.services.interview_service import InterviewService
from worldforge.services.topic_catalog import TOTAL_TOPICS

pytestmark = pytest.mark.skipif(
    not _API_DEPS_LOADED,
    reason="fastapi/httpx not installed (pip install -e .[test])",
)


@pytest.fixture
def client(generator, interview_repo, world_repo):
    """TestClient whose interview service shares one set of in-memory repositories."""
    def override_get_interview_service():
        return InterviewService(generator, interview_repo, world_repo)

    app.dependency_overrides[get_interview_service] = override_get_interview_service
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.pop(get_interview_service, None)


def _headers(user_id=None):
    return {"X-User-Id": str(user_id or uuid.uuid4())}


def _answer_until_name(client, headers):
    client.post("/interview/start", headers=headers)
    for i in range(TOTAL_TOPICS - 1):
        r = client.post("/interview/reply", headers=headers, json={"text": f"answer {i}"})
        assert r.status_code == 200, r.text


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_topics_in_order(client):
    r = client.get("/topics")
    assert r.status_code == 200
    items = r.json()["items"]
    assert len(items) == TOTAL_TOPICS
    assert items[0]["name"] == "Core Concept"
    assert items[-1]["name"] == "World Name"


def test_missing_user_header_is_401(client):
    r = client.post("/interview/start")
    assert r.status_code == 401


def test_malformed_user_header_is_400(client):
    r = client.post("/interview/start", headers={"X-User-Id": "not-a-uuid"})
    assert r.status_code == 400


def test_start_then_start_again_returns_same_interview(client):
    headers = _headers()
    first = client.post("/interview/start", headers=headers).json()
    assert first["status"] == "in_progress"
    assert first["current_question_index"] == 0
    assert first["total_topics"] == TOTAL_TOPICS
    second = client.post("/interview/start", headers=headers).json()
    assert second["interview_id"] == first["interview_id"]


def test_reply_without_interview_is_404(client):
    r = client.post("/interview/reply", headers=_headers(), json={"text": "hello"})
    assert r.status_code == 404


def test_reply_reports_progress(client):
    headers = _headers()
    client.post("/interview/start", headers=headers)
    r = client.post("/interview/reply", headers=headers, json={"text": "Sky islands"})
    assert r.status_code == 200
    assert r.json()["progress"] == round(1 / TOTAL_TOPICS, 2)
    progress = client.get("/interview/progress", headers=headers).json()
    assert progress["answered"] == 1
    assert progress["status"] == "in_progress"


def test_progress_without_interview(client):
    body = client.get("/interview/progress", headers=_headers()).json()
    assert body == {"progress": 0.0, "answered": 0, "total_topics": TOTAL_TOPICS, "status": None}


def test_upstream_failure_is_502(client, generator):
    headers = _headers()
    client.post("/interview/start", headers=headers)
    generator.fail = True
    r = client.post("/interview/reply", headers=headers, json={"text": "Sky islands"})
    assert r.status_code == 502


def test_resume(client):
    headers = _headers()
    client.post("/interview/start", headers=headers)
    client.post("/interview/reply", headers=headers, json={"text": "Sky islands"})
    r = client.get("/interview/resume", headers=headers)
    assert r.status_code == 200
    assert r.json()["current_question_index"] == 1


def test_edit_and_errors(client):
    headers = _headers()
    client.post("/interview/start", headers=headers)
    r = client.post("/interview/edit", headers=headers, json={"topic": "tone", "value": "grim"})
    assert r.status_code == 200
    assert r.json()["topic"] == "Tone"
    assert r.json()["value"] == "grim"

    r = client.post("/interview/edit", headers=headers, json={"topic": "Weather", "value": "rain"})
    assert r.status_code == 400
    r = client.post("/interview/edit", headers=headers, json={"topic": "World Name", "value": "World@#$"})
    assert r.status_code == 400
    assert "not valid" in r.json()["detail"]


def test_full_flow_and_configuration(client):
    headers = _headers()
    _answer_until_name(client, headers)
    r = client.post("/interview/reply", headers=headers, json={"text": "Aethoria"})
    assert "Aethoria" in r.json()["message"]
    r = client.post("/interview/reply", headers=headers, json={"text": "yes"})
    body = r.json()
    assert body["completed"] is True
    assert body["world_id"]
    assert body["progress"] == 1.0

    interview_id = client.get("/interview/resume", headers=headers).json()["interview_id"]
    r = client.get(f"/interview/{interview_id}/configuration", headers=headers)
    assert r.status_code == 200
    config = r.json()
    assert config["world_name"] == "Aethoria"
    assert config["world_id"] == body["world_id"]
    assert config["sentient_species"] == ["Humans", "High Elves"]


def test_configuration_before_completion_is_409(client):
    headers = _headers()
    interview_id = client.post("/interview/start", headers=headers).json()["interview_id"]
    r = client.get(f"/interview/{interview_id}/configuration", headers=headers)
    assert r.status_code == 409


def test_taken_name_edit_is_409_with_suggestions(client):
    first = _headers()
    _answer_until_name(client, first)
    client.post("/interview/reply", headers=first, json={"text": "Aethoria"})
    client.post("/interview/reply", headers=first, json={"text": "yes"})

    second = _headers()
    client.post("/interview/start", headers=second)
    r = client.post("/interview/edit", headers=second, json={"topic": "World Name", "value": "aethoria"})
    assert r.status_code == 409
    assert r.json()["detail"]["suggestions"] == ["Nova Prime", "Eldmar", "Quill Haven"]


def test_invalid_configuration_is_422(client, generator):
    generator.extraction = json.dumps({"theme": "", "techLevel": "bronze", "planetSize": "small", "sentientSpecies": ["x"]})
    headers = _headers()
    _answer_until_name(client, headers)
    client.post("/interview/reply", headers=headers, json={"text": "Aethoria"})
    r = client.post("/interview/reply", headers=headers, json={"text": "yes"})
    assert r.status_code == 422
    fields = [i["field"] for i in r.json()["detail"]["issues"]]
    assert fields == ["theme", "tech_level"]
