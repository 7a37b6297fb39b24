"""HTTP tests for the subscription registry endpoints."""

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from subscription_registry.main import create_app
from subscription_registry.models import HostSettings
from subscription_registry.repositories.subscription_store import SubscriptionStore
from subscription_registry.services.ownership import RegistryOwnership
from subscription_registry.services.subscription_registry import (
    SubscriptionRegistry,
    get_subscription_registry,
)
from subscription_registry.services.time_controller import TimeController

OWNER = {"X-Caller-Identity": "owner-principal"}
ALICE = {"X-Caller-Identity": "alice-principal"}
BOB = {"X-Caller-Identity": "bob-principal"}


@pytest.fixture
def registry():
    """Registry on a virtual clock pinned at T=1000."""
    return SubscriptionRegistry(
        subscription_store=SubscriptionStore(),
        ownership=RegistryOwnership(),
        clock=TimeController(start_time=1000),
        expiry_window=2_592_000,
    )


@pytest.fixture
def client(registry):
    app = create_app()
    app.dependency_overrides[get_subscription_registry] = lambda: registry
    return TestClient(app)


def create(client, headers, price=100, days=30):
    response = client.post("/subscriptions", json={"price": price, "days": days}, headers=headers)
    assert response.status_code == 201
    return response.json()


class TestServiceEndpoints:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["service"] == "subscription-registry"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_request_id_header(self, client):
        response = client.get("/")
        assert "X-Request-ID" in response.headers


class TestInitialize:
    def test_initialize(self, client, registry):
        response = client.post("/init", headers=OWNER)

        assert response.status_code == 200
        assert response.json() == {"status": "initialized"}
        assert str(registry.ownership.owner) == "owner-principal"

    def test_initialize_is_idempotent(self, client, registry):
        client.post("/init", headers=OWNER)
        response = client.post("/init", headers=ALICE)

        assert response.json() == {"status": "initialized"}
        assert str(registry.ownership.owner) == "owner-principal"


class TestCreateAndGet:
    def test_create_worked_example(self, client):
        data = create(client, ALICE, price=100, days=30)

        assert data["subscriber"] == "alice-principal"
        assert data["price"] == 100
        assert data["days"] == 30
        assert data["createdAt"] == 1000
        assert data["expiryDate"] == 2593000
        assert data["updatedAt"] is None
        assert data["id"]

    def test_create_missing_field_is_rejected(self, client):
        response = client.post("/subscriptions", json={"price": 100}, headers=ALICE)
        assert response.status_code == 422

    def test_create_accepts_fractional_days(self, client):
        data = create(client, ALICE, days=30.5)
        assert data["days"] == 30.5
        assert data["expiryDate"] == 2593000

    def test_create_then_get(self, client):
        created = create(client, ALICE)

        response = client.get(f"/subscriptions/{created['id']}", headers=ALICE)

        assert response.status_code == 200
        assert response.json() == created

    def test_get_unknown_is_404(self, client):
        response = client.get("/subscriptions/missing", headers=ALICE)

        assert response.status_code == 404
        error = response.json()["detail"]["error"]
        assert error["status"] == "NOT_FOUND"
        assert error["message"] == "Subscription id=missing not found"

    def test_get_by_other_caller_is_403(self, client):
        created = create(client, ALICE)

        response = client.get(f"/subscriptions/{created['id']}", headers=BOB)

        assert response.status_code == 403
        assert response.json()["detail"]["error"]["message"] == "Not authorized subscriber"


class TestAnonymousCaller:
    def test_missing_header_uses_anonymous_identity(self, client):
        data = create(client, headers={})
        assert data["subscriber"] == "2vxsx-fae"

    def test_missing_header_rejected_when_anonymous_disallowed(self, client):
        config = MagicMock()
        config.host_settings = HostSettings(allow_anonymous=False)

        with patch("subscription_registry.api.registry.get_config", return_value=config):
            response = client.post("/subscriptions", json={"price": 1, "days": 1})

        assert response.status_code == 401
        assert response.json()["detail"]["error"]["status"] == "UNAUTHENTICATED"


class TestListing:
    def test_list_all(self, client):
        first = create(client, ALICE)
        second = create(client, BOB)

        response = client.get("/subscriptions")

        assert response.status_code == 200
        assert [s["id"] for s in response.json()] == [first["id"], second["id"]]

    def test_list_by_subscriber_without_auth(self, client):
        first = create(client, ALICE)
        create(client, BOB)
        third = create(client, ALICE)

        response = client.get("/subscribers/alice-principal/subscriptions", headers=BOB)

        assert response.status_code == 200
        assert [s["id"] for s in response.json()] == [first["id"], third["id"]]

    def test_list_by_unknown_subscriber(self, client):
        response = client.get("/subscribers/nobody/subscriptions")
        assert response.status_code == 200
        assert response.json() == []

    def test_list_by_blank_subscriber_is_empty(self, client):
        create(client, ALICE)

        response = client.get("/subscribers/%20/subscriptions")

        assert response.status_code == 200
        assert response.json() == []


class TestCancel:
    def test_cancel_returns_removed_record(self, client):
        created = create(client, ALICE)

        response = client.delete(f"/subscriptions/{created['id']}", headers=ALICE)

        assert response.status_code == 200
        assert response.json() == created
        assert client.get(f"/subscriptions/{created['id']}", headers=ALICE).status_code == 404

    def test_cancel_by_other_caller(self, client):
        created = create(client, ALICE)
        response = client.delete(f"/subscriptions/{created['id']}", headers=BOB)
        assert response.status_code == 403

    def test_cancel_unknown(self, client):
        response = client.delete("/subscriptions/missing", headers=ALICE)
        assert response.status_code == 404
        assert response.json()["detail"]["error"]["message"] == (
            "Subscription cancellation id=missing failed"
        )


class TestRenew:
    def test_renew_worked_example(self, client):
        created = create(client, ALICE, price=100, days=30)

        response = client.post(
            f"/subscriptions/{created['id']}/renew", json={"price": 50}, headers=ALICE
        )

        assert response.status_code == 200
        data = response.json()
        assert data["price"] == 150
        assert data["expiryDate"] == 5185000
        assert data["updatedAt"] is None

    def test_renew_requires_price(self, client):
        created = create(client, ALICE)
        response = client.post(f"/subscriptions/{created['id']}/renew", json={}, headers=ALICE)
        assert response.status_code == 422

    def test_renew_by_other_caller(self, client):
        created = create(client, ALICE)
        response = client.post(
            f"/subscriptions/{created['id']}/renew", json={"price": 50}, headers=BOB
        )
        assert response.status_code == 403

    def test_renew_unknown(self, client):
        response = client.post("/subscriptions/missing/renew", json={"price": 50}, headers=ALICE)
        assert response.status_code == 404


class TestWithdraw:
    def test_owner_withdraws(self, client):
        client.post("/init", headers=OWNER)
        created = create(client, ALICE, price=300)

        response = client.post(f"/subscriptions/{created['id']}/withdraw", headers=OWNER)

        assert response.status_code == 200
        assert response.json()["price"] == 0

    def test_subscriber_cannot_withdraw(self, client):
        client.post("/init", headers=OWNER)
        created = create(client, ALICE)

        response = client.post(f"/subscriptions/{created['id']}/withdraw", headers=ALICE)

        assert response.status_code == 403
        assert response.json()["detail"]["error"]["message"] == "Not owner"

    def test_withdraw_unknown(self, client):
        client.post("/init", headers=OWNER)
        response = client.post("/subscriptions/missing/withdraw", headers=OWNER)
        assert response.status_code == 404
