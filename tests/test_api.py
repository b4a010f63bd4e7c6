"""
Tests for the HTTP surface.

The application is built around an in-memory store and the mock delivery
client, and driven through FastAPI's TestClient.
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from api.server import create_app
from core.storage.memory import MemoryKeyValueStore
from tools.delivery.mock_client import MockDeliveryClient


ALICE = {"email": "alice@example.com", "password": "longenough", "display_name": "Alice"}


class FixedClock:
    def __call__(self) -> datetime:
        return datetime(2026, 10, 17, 3, 0, tzinfo=timezone.utc)


@pytest.fixture
def delivery():
    return MockDeliveryClient()


@pytest.fixture
def client(delivery):
    app = create_app(store=MemoryKeyValueStore(), delivery=delivery, clock=FixedClock())
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def alice_id(client) -> str:
    response = client.post("/api/v1/accounts/register", json=ALICE)
    return response.json()["account"]["id"]


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_ready(self, client):
        response = client.get("/ready")

        assert response.status_code == 200
        assert response.json()["checks"]["storage"] == "ok"


class TestRegistration:

    def test_register(self, client):
        response = client.post("/api/v1/accounts/register", json=ALICE)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["account"]["membership_type"] == "free"
        assert "credential_verifier" not in body["account"]
        assert "password" not in body["account"]

    def test_missing_fields(self, client):
        response = client.post("/api/v1/accounts/register", json={"email": "alice@example.com"})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "VALIDATION_ERROR"
        assert body["error"]["field"] == "password"
        assert body["error"]["reason"] == "required"

    def test_duplicate_email(self, client, alice_id):
        response = client.post("/api/v1/accounts/register", json=ALICE)

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "EMAIL_CONFLICT"


class TestSession:

    def test_login_me_logout(self, client, alice_id):
        assert client.get("/api/v1/accounts/me").json()["authenticated"] is False

        response = client.post(
            "/api/v1/accounts/login",
            json={"email": ALICE["email"], "password": ALICE["password"]},
        )
        assert response.status_code == 200
        assert response.json()["account"]["id"] == alice_id

        me = client.get("/api/v1/accounts/me").json()
        assert me["authenticated"] is True
        assert me["premium"] is False
        assert me["account"]["email"] == ALICE["email"]

        assert client.post("/api/v1/accounts/logout").status_code == 200
        assert client.get("/api/v1/accounts/me").json()["authenticated"] is False

    def test_wrong_password(self, client, alice_id):
        response = client.post(
            "/api/v1/accounts/login",
            json={"email": ALICE["email"], "password": "wrong"},
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"

    def test_unknown_email(self, client):
        response = client.post(
            "/api/v1/accounts/login",
            json={"email": "nobody@example.com", "password": "longenough"},
        )

        assert response.status_code == 404

    def test_session_header_selects_session(self, client, alice_id):
        client.post(
            "/api/v1/accounts/login",
            json={"email": ALICE["email"], "password": ALICE["password"]},
            headers={"X-Session-Id": "tab-1"},
        )

        tab_1 = client.get("/api/v1/accounts/me", headers={"X-Session-Id": "tab-1"}).json()
        tab_2 = client.get("/api/v1/accounts/me", headers={"X-Session-Id": "tab-2"}).json()
        default = client.get("/api/v1/accounts/me").json()

        assert tab_1["authenticated"] is True
        assert tab_2["authenticated"] is False
        assert default["authenticated"] is False


class TestAccountEndpoints:

    def test_get_account(self, client, alice_id):
        response = client.get(f"/api/v1/accounts/{alice_id}")

        assert response.status_code == 200
        assert response.json()["account"]["display_name"] == "Alice"

    def test_get_unknown_account(self, client):
        response = client.get("/api/v1/accounts/user_missing")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_patch_account(self, client, alice_id):
        response = client.patch(f"/api/v1/accounts/{alice_id}", json={"display_name": "Alicia"})

        assert response.status_code == 200
        assert response.json()["account"]["display_name"] == "Alicia"

    def test_patch_rejects_identity_fields(self, client, alice_id):
        response = client.patch(f"/api/v1/accounts/{alice_id}", json={"id": "user_forged"})

        assert response.status_code == 422

    def test_profile_data(self, client, alice_id):
        response = client.put(
            f"/api/v1/accounts/{alice_id}/profile-data",
            json={"data": {"element": "water"}},
        )

        assert response.status_code == 200
        assert response.json()["account"]["profile_data"] == {"element": "water"}


class TestPasswordReset:

    def test_reset_does_not_leak_password(self, client, alice_id, delivery):
        response = client.post("/api/v1/accounts/password-reset", json={"email": ALICE["email"]})

        assert response.status_code == 200
        temporary = delivery.last_secret_for(ALICE["email"])
        assert temporary is not None
        assert temporary not in response.text

        login = client.post(
            "/api/v1/accounts/login",
            json={"email": ALICE["email"], "password": temporary},
        )
        assert login.status_code == 200

    def test_delivery_failure(self, client, alice_id, delivery):
        delivery.force_failure("gateway down")

        response = client.post("/api/v1/accounts/password-reset", json={"email": ALICE["email"]})

        assert response.status_code == 502
        assert response.json()["error"]["code"] == "DELIVERY_FAILED"


class TestHistory:

    def test_premium_purchase(self, client, alice_id):
        response = client.post(
            f"/api/v1/accounts/{alice_id}/purchases",
            json={"type": "premium_yearly", "amount": 99000},
        )

        assert response.status_code == 201
        purchase = response.json()["purchase"]
        assert purchase["id"].startswith("purchase_")
        assert purchase["amount"] == 99000

        account = client.get(f"/api/v1/accounts/{alice_id}").json()["account"]
        assert account["membership_type"] == "premium"
        assert account["premium_expiry"].startswith("2027-10-17")

    def test_purchase_requires_type(self, client, alice_id):
        response = client.post(f"/api/v1/accounts/{alice_id}/purchases", json={"amount": 1})

        assert response.status_code == 422

    def test_consultations_today(self, client, alice_id):
        for topic in ("love", "career"):
            response = client.post(
                f"/api/v1/accounts/{alice_id}/consultations",
                json={"topic": topic},
            )
            assert response.status_code == 201

        response = client.get(f"/api/v1/accounts/{alice_id}/consultations/today")

        assert response.json() == {"account_id": alice_id, "count": 2}
