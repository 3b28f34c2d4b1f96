import pytest
from fastapi.testclient import TestClient

from main import app
from api.routes.chat import get_orchestrator
from core.conversation.orchestration import DialogueOrchestrator


@pytest.fixture
def client(report_store):
    assistant = DialogueOrchestrator(store=report_store)
    app.dependency_overrides[get_orchestrator] = lambda: assistant
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_chat_turn_returns_context_and_session(client):
    response = client.post("/api/chat", json={"message": "hello"})
    assert response.status_code == 200

    body = response.json()
    assert body["sessionId"]
    assert body["intent"] == "platform_help"
    assert body["response"]["text"].startswith("Hello")
    assert [reply["action"] for reply in body["response"]["quickReplies"]] == [
        "create_report", "search_reports", "platform_help",
    ]
    assert body["context"]["mode"] is None


def test_chat_round_trips_context_and_quick_replies(client):
    first = client.post("/api/chat", json={"message": "I lost my dog", "sessionId": "abc"}).json()
    assert first["sessionId"] == "abc"
    assert first["context"]["mode"] == "report_creation"

    second = client.post("/api/chat", json={
        "message": "Rex",
        "sessionId": "abc",
        "context": first["context"],
    }).json()
    assert second["context"]["reportContext"]["collectedData"] == {"petName": "Rex"}

    cancelled = client.post("/api/chat", json={
        "message": "",
        "action": "cancel",
        "context": second["context"],
        "user": {"id": "user-1", "firstName": "Sara"},
    }).json()
    assert cancelled["intent"] == "cancel"
    assert cancelled["context"]["mode"] is None


def test_quick_reply_data_is_forwarded(client):
    body = client.post("/api/chat", json={
        "action": "select_type",
        "data": {"type": "document"},
    }).json()
    assert body["context"]["reportContext"]["reportType"] == "document"
    assert body["response"]["progress"].startswith("Step 1/")


def test_invalid_payload_is_rejected(client):
    response = client.post("/api/chat", json={"message": 42})
    assert response.status_code == 422
