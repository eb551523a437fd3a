"""
Name: Repository Tests

Responsibilities:
  - In-memory repositories honor the persistence contract
  - Postgres thread repository builds a single UPDATE from a patch
  - Pool lifecycle guards

Notes:
  - Postgres tests use a mocked ConnectionPool (offline)
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest
from backoffice.crosscutting.exceptions import DatabaseError, DuplicateAccountError
from backoffice.domain.entities import ThreadChanges
from backoffice.domain.value_objects import Role, ThreadFolder, ThreadStatus
from backoffice.infrastructure.repositories import PostgresThreadRepository

pytestmark = pytest.mark.unit

NOW = datetime(2025, 2, 1, 9, 30, tzinfo=timezone.utc)


# =============================================================================
# In-memory accounts
# =============================================================================


def test_account_email_is_unique_case_insensitive(account_repo, make_account):
    account_repo.create_account(make_account(email="ops@example.com"))

    with pytest.raises(DuplicateAccountError):
        account_repo.create_account(make_account(email="OPS@example.com"))


def test_returned_accounts_are_copies(account_repo, make_account):
    created = account_repo.create_account(make_account(allowed_pages=["/profile"]))

    created.allowed_pages.append("/orders")

    assert account_repo.get_account(created.id).allowed_pages == ["/profile"]


def test_update_account_skips_none_values(account_repo, make_account):
    created = account_repo.create_account(make_account(role=Role.SUPPORT))

    updated = account_repo.update_account(created.id, updated_at=NOW, is_active=False)

    assert updated.role == Role.SUPPORT
    assert updated.is_active is False
    assert updated.updated_at == NOW


def test_delete_account_drops_sessions(account_repo, make_account):
    created = account_repo.create_account(make_account())
    account_repo.record_login(created.id, logged_in_at=NOW, expires_at=NOW)

    assert account_repo.delete_account(created.id) is True
    assert account_repo.delete_account(created.id) is False
    assert account_repo.list_accounts() == []


# =============================================================================
# In-memory threads
# =============================================================================


def test_update_thread_unknown_id_returns_false(thread_repo):
    assert thread_repo.update_thread(999, ThreadChanges(read=True), updated_at=NOW) is False


def test_update_thread_applies_changes(thread_repo):
    changes = ThreadChanges(status=ThreadStatus.CLOSED, private_note=None)

    assert thread_repo.update_thread(42, changes, updated_at=NOW) is True

    stored = thread_repo.get_thread(42)
    assert stored.status == ThreadStatus.CLOSED
    assert stored.private_note is None
    assert stored.updated_at == NOW


def test_thread_reads_do_not_leak_store_state(thread_repo):
    view = thread_repo.get_thread(42)
    view.folder = ThreadFolder.TRASH

    assert thread_repo.get_thread(42).folder == ThreadFolder.INBOX


def test_thread_changes_supplied_only_lists_set_fields():
    changes = ThreadChanges(read=False, assigned_admin=None)

    assert changes.supplied() == {"read": False, "assigned_admin": None}


# =============================================================================
# Postgres threads (mocked pool)
# =============================================================================


def _mock_pool(fetchone_result=None, execute_side_effect=None):
    conn = MagicMock()
    if execute_side_effect is not None:
        conn.execute.side_effect = execute_side_effect
    else:
        conn.execute.return_value.fetchone.return_value = fetchone_result
    pool = MagicMock()
    pool.connection.return_value.__enter__.return_value = conn
    return pool, conn


def test_postgres_update_thread_issues_single_update():
    pool, conn = _mock_pool(fetchone_result=(42,))
    repo = PostgresThreadRepository(pool=pool)

    changed = repo.update_thread(
        42,
        ThreadChanges(status=ThreadStatus.RESOLVED, read=True, private_note=None),
        updated_at=NOW,
    )

    assert changed is True
    conn.execute.assert_called_once()
    query, params = conn.execute.call_args[0]
    assert "UPDATE message_threads" in query
    assert "status = %s" in query
    assert "is_read = %s" in query
    assert "private_note = %s" in query
    assert "priority" not in query
    assert params == ("RESOLVED", True, None, NOW, 42)


def test_postgres_update_thread_missing_row_returns_false():
    pool, _ = _mock_pool(fetchone_result=None)

    assert (
        PostgresThreadRepository(pool=pool).update_thread(
            1, ThreadChanges(read=True), updated_at=NOW
        )
        is False
    )


def test_postgres_errors_are_wrapped():
    pool, _ = _mock_pool(execute_side_effect=RuntimeError("connection reset"))

    with pytest.raises(DatabaseError, match="update_thread failed"):
        PostgresThreadRepository(pool=pool).update_thread(
            1, ThreadChanges(read=True), updated_at=NOW
        )


def test_postgres_get_thread_not_found():
    pool, _ = _mock_pool(fetchone_result=None)

    assert PostgresThreadRepository(pool=pool).get_thread(5) is None


# =============================================================================
# Pool lifecycle
# =============================================================================


class TestPoolLifecycle:
    def test_get_pool_without_init_raises_error(self):
        from backoffice.infrastructure.db.pool import close_pool, get_pool

        close_pool()

        with pytest.raises(DatabaseError, match="no inicializado"):
            get_pool()

    def test_init_pool_twice_raises_error(self):
        from backoffice.infrastructure.db.pool import close_pool, init_pool

        close_pool()
        with patch("backoffice.infrastructure.db.pool.ConnectionPool") as MockPool:
            MockPool.return_value = MagicMock()

            init_pool("postgresql://test", min_size=1, max_size=2)
            with pytest.raises(DatabaseError, match="ya fue inicializado"):
                init_pool("postgresql://test", min_size=1, max_size=2)

        close_pool()

    def test_close_pool_is_idempotent(self):
        from backoffice.infrastructure.db.pool import close_pool, init_pool

        with patch("backoffice.infrastructure.db.pool.ConnectionPool") as MockPool:
            mock_pool = MagicMock()
            MockPool.return_value = mock_pool

            close_pool()
            init_pool("postgresql://test", min_size=1, max_size=2)
            close_pool()
            close_pool()

        mock_pool.close.assert_called_once()
