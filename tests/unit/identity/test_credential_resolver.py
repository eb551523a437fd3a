"""
Name: Credential Resolver Tests

Responsibilities:
  - Session cookie first, bearer second
  - Tri-state outcomes (AUTHENTICATED / REJECTED / NOT_ATTEMPTED)
  - REJECTED -> 403, nothing authenticated -> 401
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from backoffice.crosscutting.error_responses import AppHTTPException
from backoffice.domain.value_objects import Role
from backoffice.identity.credentials import (
    BearerTokenStrategy,
    CredentialRequest,
    ResolutionStatus,
    SessionCookieStrategy,
    build_admin_resolver,
    build_staff_resolver,
)
from backoffice.identity.roles import CredentialSource
from backoffice.identity.tokens import (
    JWT_ALGORITHM,
    create_admin_token,
    create_session_token,
)

pytestmark = pytest.mark.unit


def _token(settings, **claims) -> str:
    payload = {
        "id": "acc-x",
        "email": "x@example.com",
        "role": "ADMIN",
        "type": "admin",
        "exp": int((datetime.now(timezone.utc) + timedelta(minutes=5)).timestamp()),
    }
    payload.update(claims)
    payload = {k: v for k, v in payload.items() if v is not None}
    return jwt.encode(payload, settings.jwt_secret, algorithm=JWT_ALGORITHM)


def _bearer(token: str) -> CredentialRequest:
    return CredentialRequest(authorization=f"Bearer {token}")


def _cookie(settings, token: str) -> CredentialRequest:
    return CredentialRequest(cookies={settings.session_cookie_name: token})


# =============================================================================
# Session cookie strategy
# =============================================================================


def test_session_cookie_authenticates_admin(auth_settings, make_account):
    account = make_account(role=Role.ADMIN, can_manage_users=True)
    token, _ = create_session_token(account, settings=auth_settings)

    identity = build_admin_resolver(auth_settings).resolve(_cookie(auth_settings, token))

    assert identity.id == account.id
    assert identity.email == account.email
    assert identity.role == Role.ADMIN
    assert identity.can_manage_users is True
    assert identity.source == CredentialSource.SESSION


def test_session_with_low_role_is_not_attempted_for_admin_resources(
    auth_settings, make_account
):
    account = make_account(role=Role.SUPPORT)
    token, _ = create_session_token(account, settings=auth_settings)
    strategy = SessionCookieStrategy(auth_settings, admitted_roles={Role.ADMIN})

    outcome = strategy.resolve(_cookie(auth_settings, token))

    assert outcome.status == ResolutionStatus.NOT_ATTEMPTED


def test_admin_token_in_session_cookie_is_not_attempted(auth_settings, make_account):
    account = make_account(role=Role.SUPER_ADMIN)
    token, _ = create_admin_token(account, settings=auth_settings)
    strategy = SessionCookieStrategy(auth_settings, admitted_roles={Role.SUPER_ADMIN})

    outcome = strategy.resolve(_cookie(auth_settings, token))

    assert outcome.status == ResolutionStatus.NOT_ATTEMPTED
    with pytest.raises(AppHTTPException) as exc_info:
        build_admin_resolver(auth_settings).resolve(_cookie(auth_settings, token))
    assert exc_info.value.status_code == 401


def test_low_role_session_without_bearer_is_unauthorized(auth_settings, make_account):
    account = make_account(role=Role.SUPPORT)
    token, _ = create_session_token(account, settings=auth_settings)

    with pytest.raises(AppHTTPException) as exc_info:
        build_admin_resolver(auth_settings).resolve(_cookie(auth_settings, token))

    assert exc_info.value.status_code == 401


def test_staff_resolver_admits_any_session_role(auth_settings, make_account):
    account = make_account(role=Role.SUPPORT, can_manage_users=True)
    token, _ = create_session_token(account, settings=auth_settings)

    identity = build_staff_resolver(auth_settings).resolve(_cookie(auth_settings, token))

    assert identity.role == Role.SUPPORT
    assert identity.can_manage_users is True


def test_undecodable_session_falls_through_to_bearer(auth_settings, make_account):
    account = make_account(role=Role.SUPER_ADMIN)
    bearer, _ = create_admin_token(account, settings=auth_settings)
    request = CredentialRequest(
        cookies={auth_settings.session_cookie_name: "garbage"},
        authorization=f"Bearer {bearer}",
    )

    identity = build_admin_resolver(auth_settings).resolve(request)

    assert identity.source == CredentialSource.BEARER
    assert identity.role == Role.SUPER_ADMIN


def test_session_wins_over_bearer(auth_settings, make_account):
    session_account = make_account(role=Role.ADMIN)
    bearer_account = make_account(role=Role.SUPER_ADMIN)
    session, _ = create_session_token(session_account, settings=auth_settings)
    bearer, _ = create_admin_token(bearer_account, settings=auth_settings)
    request = CredentialRequest(
        cookies={auth_settings.session_cookie_name: session},
        authorization=f"Bearer {bearer}",
    )

    identity = build_admin_resolver(auth_settings).resolve(request)

    assert identity.id == session_account.id


# =============================================================================
# Bearer strategy
# =============================================================================


def test_valid_admin_bearer_authenticates(auth_settings):
    token = _token(auth_settings, role="SUPER_ADMIN", canManageUsers=True)

    outcome = BearerTokenStrategy(auth_settings).resolve(_bearer(token))

    assert outcome.status == ResolutionStatus.AUTHENTICATED
    assert outcome.identity.role == Role.SUPER_ADMIN
    assert outcome.identity.can_manage_users is True


def test_bearer_with_wrong_type_is_forbidden(auth_settings):
    token = _token(auth_settings, type="session")

    with pytest.raises(AppHTTPException) as exc_info:
        build_admin_resolver(auth_settings).resolve(_bearer(token))

    assert exc_info.value.status_code == 403


@pytest.mark.parametrize("role", ["USER", "CUSTOMER", "SUPPORT", "UNKNOWN"])
def test_bearer_with_low_role_is_forbidden(auth_settings, role):
    token = _token(auth_settings, role=role)

    with pytest.raises(AppHTTPException) as exc_info:
        build_admin_resolver(auth_settings).resolve(_bearer(token))

    assert exc_info.value.status_code == 403


def test_bearer_with_bad_signature_is_unauthorized(auth_settings):
    token = jwt.encode(
        {"id": "x", "email": "x@example.com", "role": "ADMIN", "type": "admin",
         "exp": int((datetime.now(timezone.utc) + timedelta(minutes=5)).timestamp())},
        "another-secret",
        algorithm=JWT_ALGORITHM,
    )

    outcome = BearerTokenStrategy(auth_settings).resolve(_bearer(token))
    assert outcome.status == ResolutionStatus.NOT_ATTEMPTED

    with pytest.raises(AppHTTPException) as exc_info:
        build_admin_resolver(auth_settings).resolve(_bearer(token))
    assert exc_info.value.status_code == 401


def test_expired_bearer_is_unauthorized(auth_settings):
    token = _token(
        auth_settings,
        exp=int((datetime.now(timezone.utc) - timedelta(minutes=5)).timestamp()),
    )

    with pytest.raises(AppHTTPException) as exc_info:
        build_admin_resolver(auth_settings).resolve(_bearer(token))

    assert exc_info.value.status_code == 401


def test_bearer_missing_identity_claims_is_rejected(auth_settings):
    token = _token(auth_settings, email=None)

    outcome = BearerTokenStrategy(auth_settings).resolve(_bearer(token))

    assert outcome.status == ResolutionStatus.REJECTED


def test_no_credentials_is_unauthorized(auth_settings):
    with pytest.raises(AppHTTPException) as exc_info:
        build_admin_resolver(auth_settings).resolve(CredentialRequest())

    assert exc_info.value.status_code == 401


def test_non_bearer_authorization_scheme_is_ignored(auth_settings):
    request = CredentialRequest(authorization="Basic dXNlcjpwYXNz")

    outcome = build_admin_resolver(auth_settings).evaluate(request)

    assert outcome.status == ResolutionStatus.NOT_ATTEMPTED
