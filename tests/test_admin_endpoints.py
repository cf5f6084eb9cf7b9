"""Tests for admin endpoints."""

from fastapi.testclient import TestClient

from laundry_queue.api.app import create_app
from laundry_queue.containers import AppContainer
from tests.conftest import FakeClock, InMemoryQueueRepository

_HEADERS = {"X-Admin-Token": "admin-token"}


def test_admin_queue_requires_token(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    assert client.get("/admin/queue?floor=4").status_code == 401
    assert (
        client.get(
            "/admin/queue?floor=4", headers={"X-Admin-Token": "wrong"}
        ).status_code
        == 401
    )


def test_admin_add_and_list_by_number(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    for tag, status in (("studenta", "finished"), ("studentb", "in_progress")):
        response = client.post(
            "/admin/queue/entries",
            json={
                "floor": 6,
                "telegram_tag": tag,
                "room": "612",
                "status": status,
                "queue_date": "2026-10-25",
            },
            headers=_HEADERS,
        )
        assert response.status_code == 201

    response = client.get(
        "/admin/queue", params={"floor": 6, "date": "2026-10-25"}, headers=_HEADERS
    )

    entries = response.json()["entries"]
    assert [entry["number"] for entry in entries] == [1, 2]
    assert [entry["status"] for entry in entries] == ["finished", "in_progress"]
    assert "is_mine" not in entries[0]


def test_admin_can_edit_any_entry(
    container: AppContainer,
    clock: FakeClock,
    queue_repository: InMemoryQueueRepository,
) -> None:
    client = TestClient(create_app(container))
    entry_id = client.post(
        "/queue/entries", json={"floor": 4, "telegram_tag": "studenta", "room": "205"}
    ).json()["entry"]["id"]
    clock.advance(hours=14)

    changed = client.patch(
        f"/admin/queue/entries/{entry_id}",
        json={"status": "finished"},
        headers=_HEADERS,
    )
    removed = client.delete(f"/admin/queue/entries/{entry_id}", headers=_HEADERS)

    assert changed.status_code == 200
    assert changed.json()["entry"]["status"] == "finished"
    assert removed.status_code == 200
    assert queue_repository.entries == {}


def test_admin_rejects_skipped_status(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/admin/queue/entries",
        json={
            "floor": 4,
            "telegram_tag": "studenta",
            "room": "205",
            "status": "skipped",
        },
        headers=_HEADERS,
    )

    assert response.status_code == 409
    assert response.json()["detail"]["reason"] == "invalid_target"
