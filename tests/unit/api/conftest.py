"""
Name: HTTP Test Wiring

Responsibilities:
  - Build a FastAPI app with the real routers and exception handlers
  - Replace container factories with in-memory adapters (dependency_overrides)
  - Patch auth settings so issued tokens and cookies share the test secret
"""

from unittest.mock import patch

import pytest
from backoffice import container
from backoffice.api.auth_routes import router as auth_router
from backoffice.api.exception_handlers import register_exception_handlers
from backoffice.application.usecases.accounts import (
    AuthenticateAccountUseCase,
    CreateAccountUseCase,
    DeleteAccountUseCase,
    ListAccountsUseCase,
    UpdateAccountUseCase,
)
from backoffice.application.usecases.threads import (
    GetThreadUseCase,
    ListThreadsUseCase,
    UpdateThreadUseCase,
)
from backoffice.domain.value_objects import Role
from backoffice.identity.credentials import build_admin_resolver, build_staff_resolver
from backoffice.interfaces.api.http.router import build_router
from fastapi import FastAPI
from fastapi.testclient import TestClient


def fake_hash(password: str) -> str:
    return f"hashed:{password}"


def fake_verify(password: str, password_hash: str) -> bool:
    return password_hash == f"hashed:{password}"


@pytest.fixture
def api_app(auth_settings, thread_repo, account_repo, notifier, fixed_clock) -> FastAPI:
    app = FastAPI()
    app.include_router(build_router())
    app.include_router(auth_router)
    register_exception_handlers(app)

    app.dependency_overrides.update(
        {
            container.get_admin_credential_resolver: lambda: build_admin_resolver(
                auth_settings
            ),
            container.get_staff_credential_resolver: lambda: build_staff_resolver(
                auth_settings
            ),
            container.get_get_thread_use_case: lambda: GetThreadUseCase(thread_repo),
            container.get_list_threads_use_case: lambda: ListThreadsUseCase(thread_repo),
            container.get_update_thread_use_case: lambda: UpdateThreadUseCase(
                thread_repo, notifier, clock=fixed_clock
            ),
            container.get_list_accounts_use_case: lambda: ListAccountsUseCase(
                account_repo
            ),
            container.get_create_account_use_case: lambda: CreateAccountUseCase(
                account_repo, fake_hash, clock=fixed_clock
            ),
            container.get_update_account_use_case: lambda: UpdateAccountUseCase(
                account_repo, clock=fixed_clock
            ),
            container.get_delete_account_use_case: lambda: DeleteAccountUseCase(
                account_repo
            ),
            container.get_authenticate_account_use_case: lambda: AuthenticateAccountUseCase(
                account_repo, fake_verify, session_ttl_minutes=60, clock=fixed_clock
            ),
        }
    )
    return app


@pytest.fixture
def client(api_app, auth_settings):
    with patch(
        "backoffice.identity.tokens.get_auth_settings", return_value=auth_settings
    ), patch(
        "backoffice.api.auth_routes.get_auth_settings", return_value=auth_settings
    ):
        yield TestClient(api_app)


@pytest.fixture
def super_admin_headers(account_repo, make_account, bearer_for):
    account = account_repo.create_account(
        make_account(id="root-1", role=Role.SUPER_ADMIN, can_manage_users=True)
    )
    return bearer_for(account)


@pytest.fixture
def admin_headers(make_account, bearer_for):
    return bearer_for(make_account(id="admin-1"))
