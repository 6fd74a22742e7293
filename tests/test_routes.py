from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from conftest import FakeRequestSource, RecordingAlertSink, make_entry
from labsupply_backend.container import build_container
from labsupply_backend.main import create_app


@pytest.fixture
def api_source():
    return FakeRequestSource(
        [make_entry(1, "Pendiente"), make_entry(2, "Pendiente")],
        [make_entry(1, "Aprobada"), make_entry(2, "Rechazada", observaciones="Sin stock")],
    )


@pytest.fixture
def client(settings, api_source):
    container = build_container(settings, alerts=RecordingAlertSink(), source=api_source)
    container.poller.clock = lambda: datetime(2026, 10, 19, 12, 0)
    app = create_app(settings, container=container)
    with TestClient(app) as c:
        yield c


def poll_twice(client):
    assert client.put("/api/v1/session", json={"studentId": 42}).status_code == 204
    first = client.post("/api/v1/poller/tick").json()
    second = client.post("/api/v1/poller/tick").json()
    return first, second


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"
    assert r.json()["polling"] is False


def test_tick_without_session_is_skipped(client, api_source):
    r = client.post("/api/v1/poller/tick")

    assert r.status_code == 200
    assert r.json()["outcome"] == "skipped"
    assert api_source.calls == []


def test_polling_populates_notification_list(client):
    first, second = poll_twice(client)

    assert first["outcome"] == "no_data"
    assert second["outcome"] == "new_data"
    assert second["created"] == 2

    body = client.get("/api/v1/notifications/list").json()
    assert body["unreadCount"] == 2
    assert [n["kind"] for n in body["items"]] == ["solicitud_rechazada", "solicitud_aprobada"]
    rejected = body["items"][0]
    assert rejected["message"] == "Tu solicitud para Química General ha sido rechazada. Motivo: Sin stock"
    assert rejected["payload"] == {
        "kind": "solicitud_rechazada",
        "requestId": "2",
        "subject": "Química General",
        "notes": "Sin stock",
    }


def test_mark_read_and_badge(client):
    poll_twice(client)
    items = client.get("/api/v1/notifications/list").json()["items"]

    r = client.post(f"/api/v1/notifications/{items[0]['id']}/read")
    assert r.status_code == 200
    assert r.json()["isRead"] is True

    badge = client.get("/api/v1/notifications/unread-count").json()
    assert badge == {"unreadCount": 1, "label": "1"}

    unread = client.get("/api/v1/notifications/list", params={"unread": True}).json()
    assert [n["id"] for n in unread["items"]] == [items[1]["id"]]

    all_read = client.post("/api/v1/notifications/read-all").json()
    assert all_read == {"unreadCount": 0, "label": ""}


def test_unknown_notification_is_404(client):
    assert client.post("/api/v1/notifications/nope/read").status_code == 404
    assert client.delete("/api/v1/notifications/nope").status_code == 404


def test_delete_clear_and_prune(client):
    poll_twice(client)
    items = client.get("/api/v1/notifications/list").json()["items"]

    assert client.delete(f"/api/v1/notifications/{items[0]['id']}").status_code == 204
    assert len(client.get("/api/v1/notifications/list").json()["items"]) == 1

    pruned = client.post("/api/v1/notifications/prune").json()
    assert pruned == {"removed": 0, "unreadCount": 1}

    assert client.delete("/api/v1/notifications").status_code == 204
    body = client.get("/api/v1/notifications/list").json()
    assert body == {"items": [], "unreadCount": 0}


def test_poller_start_stop(client):
    client.put("/api/v1/session", json={"studentId": "42"})

    started = client.post("/api/v1/poller/start").json()
    assert started["running"] is True
    assert started["lastResult"]["outcome"] == "no_data"

    stopped = client.post("/api/v1/poller/stop").json()
    assert stopped["running"] is False
    assert client.get("/api/v1/poller/status").json()["running"] is False


def test_logout_stops_fetching(client, api_source):
    client.put("/api/v1/session", json={"studentId": 42})
    client.post("/api/v1/poller/tick")
    assert client.delete("/api/v1/session").status_code == 204

    r = client.post("/api/v1/poller/tick")

    assert r.json()["outcome"] == "skipped"
    assert len(api_source.calls) == 1
