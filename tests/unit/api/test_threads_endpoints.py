"""
Name: Thread Endpoint Tests

Responsibilities:
  - GET/PATCH /threads/{id} and GET /threads over in-memory adapters
  - Status codes and RFC7807 bodies for validation / auth failures
"""

import pytest
from backoffice.domain.value_objects import Role
from backoffice.identity.tokens import create_session_token

pytestmark = pytest.mark.unit


def test_get_thread_returns_envelope(client, admin_headers):
    resp = client.get("/threads/42", headers=admin_headers)

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    thread = body["thread"]
    assert thread["id"] == 42
    assert thread["status"] == "OPEN"
    assert thread["read"] is False
    assert [m["id"] for m in thread["conversation"]] == [10, 11]
    assert thread["conversation"][0]["attachments"][0]["file_name"] == "receipt.pdf"
    assert thread["labels"] == [{"id": 1, "name": "shipping", "color": "#ff0000"}]


def test_get_thread_not_found(client, admin_headers):
    resp = client.get("/threads/999", headers=admin_headers)

    assert resp.status_code == 404
    assert resp.json()["code"] == "THREAD_NOT_FOUND"


def test_get_thread_invalid_id(client, admin_headers):
    resp = client.get("/threads/abc", headers=admin_headers)

    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_THREAD_ID"


def test_get_thread_without_credentials_is_401(client):
    resp = client.get("/threads/42")

    assert resp.status_code == 401
    assert resp.headers["content-type"].startswith("application/problem+json")


def test_get_thread_with_support_bearer_is_403(client, make_account, bearer_for):
    resp = client.get("/threads/42", headers=bearer_for(make_account(role=Role.SUPPORT)))

    assert resp.status_code == 403


def test_session_cookie_grants_access(client, make_account, auth_settings):
    token, _ = create_session_token(make_account(role=Role.ADMIN), settings=auth_settings)
    client.cookies.set(auth_settings.session_cookie_name, token)

    resp = client.get("/threads/42")

    assert resp.status_code == 200


def test_patch_thread_updates_and_notifies(client, admin_headers, notifier):
    resp = client.patch(
        "/threads/42",
        headers=admin_headers,
        json={
            "status": "RESOLVED",
            "read": True,
            "privateNote": "refund issued",
            "assignedAdmin": "admin@example.com",
            "unknownField": "ignored",
        },
    )

    assert resp.status_code == 200
    thread = resp.json()["thread"]
    assert thread["status"] == "RESOLVED"
    assert thread["read"] is True
    assert thread["private_note"] == "refund issued"
    assert thread["assigned_admin"] == "admin@example.com"
    assert thread["priority"] == "MEDIUM"

    assert [e.name for e in notifier.events] == ["thread_updated"]
    assert notifier.events[0].payload["updates"]["status"] == "RESOLVED"


def test_patch_invalid_priority_is_rejected_atomically(client, admin_headers, thread_repo):
    resp = client.patch(
        "/threads/42",
        headers=admin_headers,
        json={"read": True, "priority": "CRITICAL"},
    )

    assert resp.status_code == 400
    body = resp.json()
    assert body["code"] == "INVALID_PRIORITY"
    assert body["errors"][0]["field"] == "priority"
    assert body["errors"][0]["allowed"] == ["LOW", "MEDIUM", "HIGH", "URGENT"]
    assert thread_repo.get_thread(42).read is False


def test_patch_null_note_clears_it(client, admin_headers):
    client.patch("/threads/42", headers=admin_headers, json={"privateNote": "temp"})

    resp = client.patch("/threads/42", headers=admin_headers, json={"privateNote": None})

    assert resp.status_code == 200
    assert resp.json()["thread"]["private_note"] is None


def test_patch_unknown_thread_is_404(client, admin_headers, notifier):
    resp = client.patch("/threads/999", headers=admin_headers, json={"read": True})

    assert resp.status_code == 404
    assert notifier.events == []


def test_patch_requires_admin_identity(client, make_account, bearer_for, thread_repo):
    resp = client.patch(
        "/threads/42",
        headers=bearer_for(make_account(role=Role.CUSTOMER)),
        json={"read": True},
    )

    assert resp.status_code == 403
    assert thread_repo.get_thread(42).read is False


def test_list_threads_with_filters(client, admin_headers):
    resp = client.get("/threads", headers=admin_headers, params={"folder": "INBOX"})

    assert resp.status_code == 200
    body = resp.json()
    assert [t["id"] for t in body["threads"]] == [42]
    assert body["threads"][0]["latest_message"]["id"] == 11
    assert body["next_offset"] is None


def test_list_threads_rejects_unknown_folder(client, admin_headers):
    resp = client.get("/threads", headers=admin_headers, params={"folder": "DRAFTS"})

    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_FOLDER"


def test_list_threads_limit_out_of_range(client, admin_headers):
    resp = client.get("/threads", headers=admin_headers, params={"limit": 0})

    assert resp.status_code == 400
    assert resp.json()["code"] == "VALIDATION_ERROR"
