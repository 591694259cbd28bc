import pytest

fastapi = pytest.importorskip(
    "fastapi", reason="FastAPI is required for API surface tests."
)
from fastapi.testclient import TestClient  # type: ignore  # noqa: E402

from amplitude_tracker import Tracker, TrackerRegistry, TransportResponse  # noqa: E402
from amplitude_tracker.server import create_app  # noqa: E402


class FakeTransport:
    def __init__(self):
        self.calls = []

    def send(self, url, form_fields):
        self.calls.append(dict(form_fields))
        return TransportResponse(status_code=200, body="success")


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(transport):
    registry = TrackerRegistry(factory=lambda: Tracker(transport=transport))
    return TestClient(create_app(registry))


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_events_are_queued_until_flush(client, transport):
    response = client.post("/instances/web/events", json={"event_type": "signup"})
    assert response.status_code == 200
    assert response.json()["queued_events"] == 1

    client.post("/instances/web/init", json={"api_key": "key"})
    client.post(
        "/instances/web/identity",
        json={"user_id": "user-1", "user_properties": {"plan": "pro"}},
    )
    state = client.post("/instances/web/flush").json()
    assert state["queued_events"] == 0
    assert state["user_properties"] == {}
    assert len(transport.calls) == 1


def test_immediate_send_without_configuration_returns_422(client, transport):
    response = client.post(
        "/instances/web/events",
        json={"event_type": "login", "queue": False},
    )
    assert response.status_code == 422
    assert response.json()["detail"]["issue"] == "no_api_key"
    assert transport.calls == []


def test_flush_without_api_key_returns_422(client):
    client.post("/instances/web/events", json={"event_type": "signup"})
    response = client.post("/instances/web/flush")
    assert response.status_code == 422
    assert response.json()["detail"]["issue"] == "no_api_key"


def test_opt_out_and_reset(client, transport):
    client.post("/instances/web/init", json={"api_key": "key", "user_id": "user-1"})
    state = client.post("/instances/web/opt-out", json={"opt_out": True}).json()
    assert state["opt_out"] is True
    client.post("/instances/web/events", json={"event_type": "login"})
    assert transport.calls == []

    state = client.post("/instances/web/reset").json()
    assert state["user_id"] is None
    assert state["has_api_key"] is True


def test_instances_are_independent(client):
    client.post("/instances/a/init", json={"api_key": "key-a"})
    assert client.get("/instances/a").json()["has_api_key"] is True
    assert client.get("/instances/b").json()["has_api_key"] is False


def test_injected_registry_is_used_even_when_empty(transport):
    registry = TrackerRegistry(factory=lambda: Tracker(transport=transport))
    client = TestClient(create_app(registry))
    client.post("/instances/mobile/init", json={"api_key": "key"})
    assert "mobile" in registry
    assert registry.get("mobile").api_key == "key"
