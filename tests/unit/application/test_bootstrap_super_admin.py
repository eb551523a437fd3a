from unittest.mock import MagicMock

import pytest
from backoffice.application.bootstrap_super_admin import (
    SUPER_ADMIN_PAGES,
    ensure_super_admin,
)
from backoffice.crosscutting.config import Settings
from backoffice.domain.value_objects import Role

pytestmark = pytest.mark.unit


def _settings(**overrides) -> Settings:
    values = dict(
        database_url="postgresql://",
        app_env="test",
        super_admin_email="Root@Example.com",
        super_admin_password="root-pass",
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def hasher():
    return MagicMock(side_effect=lambda password: f"hashed:{password}")


@pytest.fixture
def verifier():
    return MagicMock(side_effect=lambda password, hashed: hashed == f"hashed:{password}")


def test_bootstrap_disabled_without_credentials(account_repo, hasher, verifier):
    result = ensure_super_admin(
        _settings(super_admin_password=""),
        account_repo=account_repo,
        password_hasher=hasher,
        password_verifier=verifier,
    )

    assert result is None
    assert account_repo.list_accounts() == []
    hasher.assert_not_called()


def test_bootstrap_creates_super_admin(account_repo, hasher, verifier, fixed_clock):
    created = ensure_super_admin(
        _settings(),
        account_repo=account_repo,
        password_hasher=hasher,
        password_verifier=verifier,
        clock=fixed_clock,
    )

    assert created.email == "root@example.com"
    assert created.role == Role.SUPER_ADMIN
    assert created.can_manage_users is True
    assert created.allowed_pages == list(SUPER_ADMIN_PAGES)
    assert created.password_hash == "hashed:root-pass"
    assert account_repo.get_account_by_email("root@example.com").id == created.id


def test_bootstrap_is_idempotent(account_repo, hasher, verifier):
    first = ensure_super_admin(
        _settings(), account_repo=account_repo, password_hasher=hasher, password_verifier=verifier
    )
    second = ensure_super_admin(
        _settings(), account_repo=account_repo, password_hasher=hasher, password_verifier=verifier
    )

    assert second.id == first.id
    assert hasher.call_count == 1
    assert len(account_repo.list_accounts()) == 1


def test_bootstrap_repairs_demoted_account(
    account_repo, make_account, hasher, verifier
):
    account_repo.create_account(
        make_account(
            email="root@example.com",
            role=Role.SUPPORT,
            is_active=False,
            password_hash="hashed:root-pass",
        )
    )

    repaired = ensure_super_admin(
        _settings(), account_repo=account_repo, password_hasher=hasher, password_verifier=verifier
    )

    assert repaired.role == Role.SUPER_ADMIN
    assert repaired.is_active is True
    assert repaired.can_manage_users is True
    hasher.assert_not_called()


def test_bootstrap_resets_rotated_password(account_repo, make_account, hasher, verifier):
    account_repo.create_account(
        make_account(
            email="root@example.com",
            role=Role.SUPER_ADMIN,
            can_manage_users=True,
            allowed_pages=list(SUPER_ADMIN_PAGES),
            password_hash="hashed:old-pass",
        )
    )

    repaired = ensure_super_admin(
        _settings(), account_repo=account_repo, password_hasher=hasher, password_verifier=verifier
    )

    assert repaired.password_hash == "hashed:root-pass"
    hasher.assert_called_once_with("root-pass")


def test_production_settings_require_strong_secret():
    with pytest.raises(ValueError, match="JWT_SECRET"):
        Settings(database_url="postgresql://", app_env="production", jwt_secret="dev-secret")


def test_production_settings_require_secure_cookie():
    with pytest.raises(ValueError, match="SESSION_COOKIE_SECURE"):
        Settings(
            database_url="postgresql://",
            app_env="production",
            jwt_secret="x" * 40,
            session_cookie_secure=False,
        )
