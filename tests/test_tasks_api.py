"""HTTP behaviour of /api/tasks."""

import uuid
from datetime import date, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from clarity.db.session import get_db
from clarity.main import app
from clarity.utils.time import today
from tests.conftest import USER_A, USER_B

pytestmark = pytest.mark.api


def create(client, **body):
    resp = client.post("/api/tasks", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


def error_code(resp):
    return resp.json()["error"]["code"]


def test_create_trims_text_and_returns_full_task(client):
    task = create(client, text="  Buy milk  ")
    assert task["text"] == "Buy milk"
    assert task["completed"] is False
    assert task["is_recurring"] is False
    assert task["recurrence_pattern"] is None
    assert task["due_date"] is None
    assert task["parent_task_id"] is None
    assert uuid.UUID(task["id"])
    assert uuid.UUID(task["user_id"]) == uuid.UUID("11111111-1111-4111-8111-111111111111")


def test_list_is_newest_first_and_per_user(client, caller):
    first = create(client, text="first")
    second = create(client, text="second")

    caller.user = USER_B
    create(client, text="someone else")
    assert [t["text"] for t in client.get("/api/tasks").json()] == ["someone else"]

    caller.user = USER_A
    listed = client.get("/api/tasks").json()
    assert [t["id"] for t in listed] == [second["id"], first["id"]]


@pytest.mark.parametrize("text", ["", "   ", "x" * 201])
def test_create_rejects_bad_text(client, text):
    resp = client.post("/api/tasks", json={"text": text})
    assert resp.status_code == 400
    assert error_code(resp) == "VALIDATION_ERROR"
    assert client.get("/api/tasks").json() == []


def test_create_accepts_exactly_200_chars(client):
    assert len(create(client, text="x" * 200)["text"]) == 200


def test_missing_text_message(client):
    resp = client.post("/api/tasks", json={})
    assert resp.status_code == 400
    assert error_code(resp) == "VALIDATION_ERROR"


@pytest.mark.parametrize(
    "body",
    [
        {"text": "t", "is_recurring": True},
        {"text": "t", "recurrence_pattern": "daily"},
        {"text": "t", "is_recurring": True, "recurrence_pattern": "hourly"},
        {"text": "t", "due_date": "not-a-date"},
    ],
)
def test_create_rejects_bad_recurrence_and_dates(client, body):
    resp = client.post("/api/tasks", json=body)
    assert resp.status_code == 400
    assert error_code(resp) == "VALIDATION_ERROR"


def test_update_text_and_due_date(client):
    task = create(client, text="draft", due_date="2026-11-01")
    resp = client.put(f"/api/tasks/{task['id']}", json={"text": " final ", "due_date": None})
    assert resp.status_code == 200
    body = resp.json()
    assert body["text"] == "final"
    assert body["due_date"] is None


@pytest.mark.parametrize("body", [{"text": ""}, {"text": "y" * 201}, {"text": None}, {}])
def test_update_rejects_bad_bodies(client, body):
    task = create(client, text="keep me")
    resp = client.put(f"/api/tasks/{task['id']}", json=body)
    assert resp.status_code == 400
    assert error_code(resp) == "VALIDATION_ERROR"
    assert client.get("/api/tasks").json()[0]["text"] == "keep me"


def test_completing_recurring_task_creates_next_occurrence(client):
    task = create(client, text="Pay rent", due_date="2024-01-31", is_recurring=True, recurrence_pattern="monthly")

    resp = client.put(f"/api/tasks/{task['id']}", json={"completed": True})
    assert resp.status_code == 200
    assert resp.json()["id"] == task["id"]
    assert resp.json()["completed"] is True

    listed = client.get("/api/tasks").json()
    assert len(listed) == 2
    successor = next(t for t in listed if t["id"] != task["id"])
    assert successor["parent_task_id"] == task["id"]
    assert successor["due_date"] == "2024-02-29"
    assert successor["completed"] is False
    assert successor["recurrence_pattern"] == "monthly"

    # repeating the same update is not a new transition
    client.put(f"/api/tasks/{task['id']}", json={"completed": True})
    assert len(client.get("/api/tasks").json()) == 2


def test_completing_plain_task_creates_nothing(client):
    task = create(client, text="once")
    client.put(f"/api/tasks/{task['id']}", json={"completed": True})
    assert len(client.get("/api/tasks").json()) == 1


def test_update_other_users_task_is_not_found(client, caller):
    task = create(client, text="private")
    caller.user = USER_B
    resp = client.put(f"/api/tasks/{task['id']}", json={"completed": True})
    assert resp.status_code == 404
    assert error_code(resp) == "TASK_NOT_FOUND"
    resp = client.delete(f"/api/tasks/{task['id']}")
    assert resp.status_code == 404


def test_non_uuid_id_is_a_validation_error(client):
    resp = client.put("/api/tasks/not-a-uuid", json={"completed": True})
    assert resp.status_code == 400
    assert error_code(resp) == "VALIDATION_ERROR"


def test_delete_single_and_missing(client):
    task = create(client, text="bye")
    assert client.delete(f"/api/tasks/{task['id']}").status_code == 204
    assert client.get("/api/tasks").json() == []

    resp = client.delete(f"/api/tasks/{task['id']}")
    assert resp.status_code == 404
    assert error_code(resp) == "TASK_NOT_FOUND"


def test_delete_series_removes_every_occurrence(client):
    root = create(client, text="Gym", due_date="2024-03-01", is_recurring=True, recurrence_pattern="daily")
    client.put(f"/api/tasks/{root['id']}", json={"completed": True})
    child = next(t for t in client.get("/api/tasks").json() if t["id"] != root["id"])
    client.put(f"/api/tasks/{child['id']}", json={"completed": True})
    keep = create(client, text="unrelated")
    assert len(client.get("/api/tasks").json()) == 4

    resp = client.delete(f"/api/tasks/{child['id']}", params={"deleteSeries": "true"})
    assert resp.status_code == 204
    assert [t["id"] for t in client.get("/api/tasks").json()] == [keep["id"]]


def test_clear_completed(client):
    done = create(client, text="done")
    create(client, text="open")
    client.put(f"/api/tasks/{done['id']}", json={"completed": True})

    assert client.delete("/api/tasks/completed/all").status_code == 204
    assert [t["text"] for t in client.get("/api/tasks").json()] == ["open"]
    assert client.delete("/api/tasks/completed/all").status_code == 204


def test_view_filters_sorts_and_annotates(client):
    now = today()
    create(client, text="later", due_date=(now + timedelta(days=10)).isoformat())
    create(client, text="overdue", due_date=(now - timedelta(days=1)).isoformat())
    done = create(client, text="done")
    create(client, text="undated")
    client.put(f"/api/tasks/{done['id']}", json={"completed": True})

    resp = client.get("/api/tasks/view", params={"filter": "active", "sort": "due"})
    assert resp.status_code == 200
    view = resp.json()
    assert [t["text"] for t in view["items"]] == ["overdue", "later", "undated"]
    assert [t["due_status"] for t in view["items"]] == ["overdue", "ok", "none"]
    assert view["stats"] == {"total": 4, "active": 3, "completed": 1, "can_clear_completed": True}
    assert view["count_label"] == "3 active tasks"


def test_view_rejects_unknown_filter(client):
    resp = client.get("/api/tasks/view", params={"filter": "someday"})
    assert resp.status_code == 400


def test_api_responses_are_not_cached(client):
    resp = client.get("/api/tasks")
    assert resp.headers["cache-control"] == "no-cache, no-store, must-revalidate"
    assert resp.headers["pragma"] == "no-cache"
    assert resp.headers["expires"] == "0"


def test_due_date_round_trips_as_iso_date(client):
    task = create(client, text="dated", due_date=date(2026, 12, 24).isoformat())
    assert task["due_date"] == "2026-12-24"


class FailingSession:
    """Session stand-in whose every query hits a dead database."""

    async def execute(self, *args, **kwargs):
        raise OperationalError(
            "SELECT tasks.id FROM tasks",
            {},
            Exception("could not connect to server at db.internal:5432"),
        )

    async def commit(self):
        pass

    async def rollback(self):
        pass


def test_store_failure_is_generic_500(client):
    async def failing_db():
        yield FailingSession()

    app.dependency_overrides[get_db] = failing_db

    for resp in (
        client.get("/api/tasks"),
        client.post("/api/tasks", json={"text": "never stored"}),
        client.delete("/api/tasks/completed/all"),
    ):
        assert resp.status_code == 500
        body = resp.json()
        assert body["error"]["code"] == "STORE_ERROR"
        assert body["error"]["message"] == "The request could not be completed, please retry"
        assert "details" not in body["error"]
        assert "db.internal" not in resp.text
        assert "SELECT" not in resp.text
