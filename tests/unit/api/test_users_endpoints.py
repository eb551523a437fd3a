"""
Name: Users Endpoint Tests

Responsibilities:
  - GET/POST/PUT/DELETE /users over the in-memory account repository
  - manageUsers enforcement and delete safeguards at the HTTP boundary
"""

import pytest
from backoffice.domain.value_objects import Role
from backoffice.identity.tokens import create_session_token

pytestmark = pytest.mark.unit


def test_list_users_returns_projection_without_hash(
    client, super_admin_headers, account_repo, make_account
):
    account_repo.create_account(make_account(email="ops@example.com"))

    resp = client.get("/users", headers=super_admin_headers)

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["total_count"] == 2
    assert {u["email"] for u in body["users"]} == {"ops@example.com", "staff1@example.com"}
    assert all("password_hash" not in u for u in body["users"])
    assert all(u["session_count"] == 0 for u in body["users"])


def test_list_users_as_plain_admin_is_forbidden(client, admin_headers):
    resp = client.get("/users", headers=admin_headers)

    assert resp.status_code == 403
    assert resp.json()["detail"] == "Only Super Admin can manage users."


def test_support_session_with_capability_can_manage_users(
    client, make_account, auth_settings
):
    delegate = make_account(role=Role.SUPPORT, can_manage_users=True)
    token, _ = create_session_token(delegate, settings=auth_settings)
    client.cookies.set(auth_settings.session_cookie_name, token)

    resp = client.get("/users")

    assert resp.status_code == 200


def test_create_user_defaults(client, super_admin_headers):
    resp = client.post(
        "/users",
        headers=super_admin_headers,
        json={"name": "Ana", "email": "Ana@Example.com", "password": "pw"},
    )

    assert resp.status_code == 201
    user = resp.json()["user"]
    assert user["email"] == "ana@example.com"
    assert user["role"] == "ADMIN"
    assert user["allowed_pages"] == ["/profile"]
    assert user["can_manage_users"] is False
    assert user["created_by"] == "root-1"
    assert "password" not in user and "password_hash" not in user


def test_create_user_accepts_camel_case_pages(client, super_admin_headers):
    resp = client.post(
        "/users",
        headers=super_admin_headers,
        json={
            "name": "Sam",
            "email": "sam@example.com",
            "password": "pw",
            "role": "SUPPORT",
            "allowedPages": ["/orders"],
        },
    )

    assert resp.status_code == 201
    assert resp.json()["user"]["allowed_pages"] == ["/orders"]


def test_create_user_missing_fields(client, super_admin_headers):
    resp = client.post("/users", headers=super_admin_headers, json={"name": "Sam"})

    assert resp.status_code == 400
    assert resp.json()["code"] == "MISSING_REQUIRED_FIELDS"


def test_create_user_invalid_role(client, super_admin_headers):
    resp = client.post(
        "/users",
        headers=super_admin_headers,
        json={"name": "Sam", "email": "sam@example.com", "password": "pw", "role": "OWNER"},
    )

    assert resp.status_code == 400
    body = resp.json()
    assert body["code"] == "INVALID_ROLE"
    assert body["errors"][0]["allowed"] == [
        "USER",
        "CUSTOMER",
        "SUPPORT",
        "ADMIN",
        "SUPER_ADMIN",
    ]


def test_create_user_duplicate_email_is_409(client, super_admin_headers):
    payload = {"name": "Sam", "email": "sam@example.com", "password": "pw"}
    client.post("/users", headers=super_admin_headers, json=payload)

    resp = client.post(
        "/users",
        headers=super_admin_headers,
        json={**payload, "email": "SAM@example.com"},
    )

    assert resp.status_code == 409
    assert resp.json()["code"] == "USER_ALREADY_EXISTS"


def test_update_user(client, super_admin_headers, account_repo, make_account):
    target = account_repo.create_account(make_account())

    resp = client.put(
        "/users",
        headers=super_admin_headers,
        json={"userId": target.id, "isActive": False, "role": "SUPPORT"},
    )

    assert resp.status_code == 200
    user = resp.json()["user"]
    assert user["is_active"] is False
    assert user["role"] == "SUPPORT"


def test_update_unknown_user_is_404(client, super_admin_headers):
    resp = client.put(
        "/users", headers=super_admin_headers, json={"userId": "nope", "isActive": True}
    )

    assert resp.status_code == 404
    assert resp.json()["code"] == "USER_NOT_FOUND"


def test_update_without_user_id(client, super_admin_headers):
    resp = client.put("/users", headers=super_admin_headers, json={"isActive": True})

    assert resp.status_code == 400
    assert resp.json()["code"] == "MISSING_USER_ID"


def test_delete_user(client, super_admin_headers, account_repo, make_account):
    target = account_repo.create_account(make_account(email="gone@example.com"))

    resp = client.delete("/users", headers=super_admin_headers, params={"id": target.id})

    assert resp.status_code == 200
    assert resp.json() == {
        "success": True,
        "message": "User deleted successfully",
        "deleted_user": "gone@example.com",
    }
    assert account_repo.get_account(target.id) is None


def test_delete_self_is_rejected(client, super_admin_headers):
    resp = client.delete("/users", headers=super_admin_headers, params={"id": "root-1"})

    assert resp.status_code == 400
    assert resp.json()["code"] == "CANNOT_DELETE_SELF"


def test_delete_super_admin_is_rejected(
    client, super_admin_headers, account_repo, make_account
):
    other = account_repo.create_account(make_account(role=Role.SUPER_ADMIN))

    resp = client.delete("/users", headers=super_admin_headers, params={"id": other.id})

    assert resp.status_code == 400
    assert resp.json()["code"] == "CANNOT_DELETE_SUPER_ADMIN"
    assert account_repo.get_account(other.id) is not None


def test_delete_without_id(client, super_admin_headers):
    resp = client.delete("/users", headers=super_admin_headers)

    assert resp.status_code == 400
    assert resp.json()["code"] == "MISSING_USER_ID"


def test_users_without_credentials_is_401(client):
    assert client.get("/users").status_code == 401


@pytest.fixture
def support_session(client, make_account, auth_settings):
    support = make_account(role=Role.SUPPORT, can_manage_users=False)
    token, _ = create_session_token(support, settings=auth_settings)
    client.cookies.set(auth_settings.session_cookie_name, token)
    return support


@pytest.mark.parametrize(
    "method, kwargs",
    [
        ("post", {"json": {"name": 1, "email": "a@b.c", "password": "p"}}),
        ("post", {"json": {}}),
        ("put", {"json": {"userId": "x", "isActive": "maybe"}}),
        ("put", {"json": {"userId": "x", "permissions": "not-a-list"}}),
        ("delete", {}),
        ("get", {}),
    ],
)
def test_forbidden_precedes_body_validation(client, support_session, method, kwargs):
    resp = client.request(method.upper(), "/users", **kwargs)

    assert resp.status_code == 403
    assert resp.json()["code"] == "FORBIDDEN"
    assert resp.json()["detail"] == "Only Super Admin can manage users."


def test_invalid_body_from_user_manager_is_still_400(client, super_admin_headers):
    resp = client.put(
        "/users", headers=super_admin_headers, json={"userId": "x", "isActive": "maybe"}
    )

    assert resp.status_code == 400
    assert resp.json()["code"] == "VALIDATION_ERROR"
