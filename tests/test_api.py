"""Tests for the FastAPI mock backend."""

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).parent.parent))

from aapda_mitra.api import create_app
from aapda_mitra.database import Database
from aapda_mitra.mesh import MeshSimulator

from conftest import FakeOracle


async def instant_sleep(_delay: float) -> None:
    return None


@pytest.fixture
def oracle():
    return FakeOracle()


@pytest.fixture
def client(db_url, oracle):
    app = create_app(
        database=Database(db_url),
        oracle=oracle,
        simulator=MeshSimulator(sleep=instant_sleep, shuffle=lambda peers: list(peers)),
    )
    with TestClient(app) as test_client:
        yield test_client


class TestAuth:
    def test_signup_then_signin(self, client):
        response = client.post(
            "/api/auth/signup",
            json={"name": "Asha", "email": "asha@example.com", "password": "s3cret"},
        )
        assert response.status_code == 201
        assert response.json()["success"] is True

        response = client.post(
            "/api/auth/signin", json={"email": "asha@example.com", "password": "s3cret"}
        )
        assert response.status_code == 200

    def test_duplicate_email(self, client):
        body = {"name": "Asha", "email": "asha@example.com", "password": "s3cret"}
        client.post("/api/auth/signup", json=body)

        response = client.post("/api/auth/signup", json=body)

        assert response.status_code == 409
        assert response.json()["success"] is False

    def test_missing_fields(self, client):
        assert client.post("/api/auth/signup", json={"email": "a@b.c"}).status_code == 400
        assert client.post("/api/auth/signin", json={"email": "a@b.c"}).status_code == 400

    def test_wrong_password(self, client):
        client.post(
            "/api/auth/signup",
            json={"name": "Asha", "email": "asha@example.com", "password": "s3cret"},
        )
        response = client.post(
            "/api/auth/signin", json={"email": "asha@example.com", "password": "nope"}
        )
        assert response.status_code == 401


class TestOfflineData:
    def test_alerts_are_seeded_at_startup(self, client):
        data = client.get("/api/alerts").json()
        assert data["count"] == 3
        assert data["alerts"][0]["type"] == "Heatwave"

    def test_incident_shows_up_first(self, client):
        response = client.post(
            "/api/incidents", json={"description": "Flooded underpass", "lat": 20.3, "lon": 85.8}
        )
        assert response.status_code == 201

        alerts = client.get("/api/alerts").json()["alerts"]
        assert alerts[0]["type"] == "User Report"
        assert alerts[0]["badge"] == "User Report"

    def test_blank_incident_rejected(self, client):
        assert client.post("/api/incidents", json={"description": "  "}).status_code == 400

    def test_contacts_lifecycle(self, client):
        response = client.post("/api/contacts", json={"name": "Mom", "number": "98765"})
        assert response.status_code == 201
        contact_id = response.json()["id"]

        data = client.get("/api/contacts").json()
        assert data["contacts"] == [{"id": contact_id, "name": "Mom", "number": "98765"}]
        assert data["helplines"][0]["number"] == "112"

        assert client.delete(f"/api/contacts/{contact_id}").status_code == 204
        assert client.get("/api/contacts").json()["contacts"] == []

    def test_blank_contact_rejected(self, client):
        assert client.post("/api/contacts", json={"name": " ", "number": "1"}).status_code == 400

    def test_profile_partial_update(self, client):
        profile = client.get("/api/profile").json()
        assert profile["name"] == "New User"

        response = client.put("/api/profile", json={"age": 40})

        assert response.status_code == 200
        assert response.json()["profile"]["age"] == 40
        assert client.get("/api/profile").json()["name"] == "New User"

    def test_profile_invalid_gender(self, client):
        assert client.put("/api/profile", json={"gender": "Robot"}).status_code == 400

    def test_shelters_nearest(self, client):
        data = client.get("/api/shelters", params={"lat": 30.3, "lng": 78.0, "limit": 1}).json()
        assert data["count"] == 1
        assert data["shelters"][0]["location"] == "Dehradun"

    def test_notifications_report_successes(self, client):
        client.post("/api/contacts", json={"name": "Mom", "number": "98765"})
        messages = [n["message"] for n in client.get("/api/notifications").json()["notifications"]]
        assert "Contact saved successfully!" in messages


class TestGuidesAndChat:
    def test_guide_cached_after_first_fetch(self, client, oracle):
        first = client.get("/api/guides/Flood").json()
        second = client.get("/api/guides/Flood").json()

        assert first["is_cached"] is False
        assert second["is_cached"] is True
        assert len(oracle.guide_calls) == 1

    def test_unknown_disaster_type(self, client):
        assert client.get("/api/guides/Volcano").status_code == 400

    def test_guide_unavailable(self, client, oracle):
        oracle.fail = True
        assert client.get("/api/guides/Tsunami").status_code == 503

    def test_chat(self, client):
        response = client.post("/api/chat", json={"message": "Is it safe to drive?"})

        data = response.json()
        assert data["reply"]["text"] == "You said: Is it safe to drive?"
        assert len(data["history"]) == 3


class TestMeshEndpoints:
    def test_toggle_and_send(self, client):
        client.post("/api/mesh/toggle", json={"enabled": True})
        status = client.get("/api/mesh").json()
        assert status["state"] == "ready"
        assert len(status["peers"]) == 4

        response = client.post("/api/mesh/send", json={"message": "Trapped"})
        assert response.status_code == 202

        log = client.get("/api/mesh").json()["log"]
        assert log[-1].endswith("-> Emergency Services")
        messages = [n["message"] for n in client.get("/api/notifications").json()["notifications"]]
        assert "SOS delivered via mesh network." in messages

    def test_repeated_toggle_on_finds_peers_once(self, client):
        client.post("/api/mesh/toggle", json={"enabled": True})
        client.post("/api/mesh/toggle", json={"enabled": True})

        status = client.get("/api/mesh").json()
        assert status["state"] == "ready"
        assert status["log"].count("Found 4 peers.") == 1

    def test_send_rejected_when_off(self, client):
        assert client.post("/api/mesh/send", json={"message": "Trapped"}).status_code == 409

    def test_toggle_off_clears_state(self, client):
        client.post("/api/mesh/toggle", json={"enabled": True})
        status = client.post("/api/mesh/toggle", json={"enabled": False}).json()

        assert status["state"] == "idle"
        assert status["peers"] == []
        assert status["log"] == []
