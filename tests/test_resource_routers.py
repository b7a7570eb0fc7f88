from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from fakes import FakeVisionPort
from mediscan.api.deps import get_vision_client
from support_app import bearer, make_app, promote_to_admin, register


PNG_DATA_URL = "data:image/png;base64,iVBORw0KGgo="


@pytest.fixture
def app():
    app = make_app()
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


def test_health_records_are_owner_scoped(client):
    alice = register(client, email="alice@example.com")
    bob = register(client, email="bob@example.com")
    alice_id = alice["user"]["_id"]

    created = client.post(
        f"/api/health/records/{alice_id}",
        headers=bearer(alice),
        json={"type": "vitalSigns", "data": {"heartRate": 70}},
    )
    assert created.status_code == 201
    record_id = created.json()["data"]["_id"]

    foreign = client.get(f"/api/health/records/{alice_id}", headers=bearer(bob))
    assert foreign.status_code == 403
    assert foreign.json()["message"] == "Not authorized to access these records"

    own = client.get(f"/api/health/records/{alice_id}?type=vitalSigns", headers=bearer(alice))
    assert own.status_code == 200
    assert [entry["_id"] for entry in own.json()["data"]] == [record_id]

    invalid = client.post(
        f"/api/health/records/{alice_id}",
        headers=bearer(alice),
        json={"type": "dreams", "data": {"x": 1}},
    )
    assert invalid.status_code == 400
    assert invalid.json()["message"] == "Invalid record type"

    updated = client.put(
        f"/api/health/records/{alice_id}/{record_id}",
        headers=bearer(alice),
        json={"value": 72, "unit": "bpm"},
    )
    assert updated.status_code == 200
    assert updated.json()["message"] == "Health record updated"
    assert updated.json()["data"]["data"] == {"heartRate": 70, "value": 72, "unit": "bpm"}

    foreign_update = client.put(
        f"/api/health/records/{alice_id}/{record_id}",
        headers=bearer(bob),
        json={"value": 1},
    )
    assert foreign_update.status_code == 403

    disallowed = client.put(
        f"/api/health/records/{alice_id}/{record_id}",
        headers=bearer(alice),
        json={"heartRate": 80},
    )
    assert disallowed.status_code == 400
    assert disallowed.json()["message"] == "Fields not allowed: heartRate"

    deleted = client.delete(f"/api/health/records/{alice_id}/{record_id}", headers=bearer(alice))
    assert deleted.status_code == 200
    missing = client.delete(f"/api/health/records/{alice_id}/{record_id}", headers=bearer(alice))
    assert missing.status_code == 404
    missing_update = client.put(
        f"/api/health/records/{alice_id}/{record_id}",
        headers=bearer(alice),
        json={"value": 1},
    )
    assert missing_update.status_code == 404


def test_admin_gate(app, client):
    alice = register(client, email="alice@example.com")
    bob = register(client, email="bob@example.com")

    denied = client.get("/api/users", headers=bearer(alice))
    assert denied.status_code == 403
    assert denied.json()["message"] == "Not authorized as admin"

    promote_to_admin(app, alice["user"]["_id"])
    allowed = client.get("/api/users", headers=bearer(alice))
    assert allowed.status_code == 200
    assert {user["email"] for user in allowed.json()["data"]} == {"alice@example.com", "bob@example.com"}

    records = client.get(f"/api/health/records/{bob['user']['_id']}", headers=bearer(alice))
    assert records.status_code == 200


def test_chat_lifecycle(client):
    session = register(client)

    created = client.post("/api/chats", headers=bearer(session), json={"title": "Allergy question"})
    assert created.status_code == 201
    chat = created.json()["data"]
    assert chat["title"] == "Allergy question"
    assert chat["messages"][0]["role"] == "assistant"

    sent = client.post(
        f"/api/chats/{chat['_id']}/messages",
        headers=bearer(session),
        json={"message": "Is loratadine safe?"},
    )
    assert sent.status_code == 200
    assert [message["role"] for message in sent.json()["data"]["messages"]] == ["assistant", "user", "assistant"]

    empty = client.post(f"/api/chats/{chat['_id']}/messages", headers=bearer(session), json={"message": ""})
    assert empty.status_code == 400
    assert empty.json()["message"] == "Message content is required"

    listed = client.get("/api/chats", headers=bearer(session))
    assert listed.json()["data"][0]["messageCount"] == 3

    assert client.delete(f"/api/chats/{chat['_id']}", headers=bearer(session)).status_code == 200
    gone = client.get(f"/api/chats/{chat['_id']}", headers=bearer(session))
    assert gone.status_code == 404
    assert gone.json()["message"] == "Chat not found"


def test_chat_without_body_gets_default_title(client):
    session = register(client)

    created = client.post("/api/chats", headers=bearer(session))

    assert created.status_code == 201
    assert created.json()["data"]["title"] == "New Chat"


def test_analyze_returns_parsed_analysis(app, client):
    session = register(client)
    vision = FakeVisionPort('{"product_identification": {"medicine_name": "Aspirin"}}')
    app.dependency_overrides[get_vision_client] = lambda: vision

    response = client.post("/api/analyze", headers=bearer(session), json={"image": PNG_DATA_URL})

    assert response.status_code == 200
    assert response.json()["data"]["product_identification"]["medicine_name"] == "Aspirin"


def test_analyze_reports_unparseable_answers_as_bad_gateway(app, client):
    session = register(client)
    app.dependency_overrides[get_vision_client] = lambda: FakeVisionPort("I cannot read this label")

    response = client.post("/api/analyze", headers=bearer(session), json={"image": PNG_DATA_URL})

    assert response.status_code == 502
    assert response.json()["message"] == "Failed to parse analysis results"


def test_analyze_requires_image(client):
    session = register(client)

    response = client.post("/api/analyze", headers=bearer(session), json={})

    assert response.status_code == 400
    assert response.json()["message"] == "Image is required"


def test_analyze_requires_authentication(client):
    response = client.post("/api/analyze", json={"image": PNG_DATA_URL})

    assert response.status_code == 401
