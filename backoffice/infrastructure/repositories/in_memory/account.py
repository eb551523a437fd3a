"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/account.py
============================================================
Class: InMemoryAccountRepository

Responsibilities:
  - Almacenar cuentas en memoria (tests / local dev sin Postgres).
  - Replicar el contrato del repo Postgres:
      - email único case-insensitive (DuplicateAccountError)
      - listado created_at DESC con session_count
      - update parcial que siempre refresca updated_at

Collaborators:
  - domain.entities.Account, AccountSummary
  - domain.repositories.AccountRepository (contrato a implementar)

Constraints / Notes:
  - Thread-safe: acceso protegido por Lock.
  - Copias defensivas: los callers nunca comparten instancias con el "store".
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, List, Optional

from ....crosscutting.exceptions import DuplicateAccountError
from ....domain.entities import Account, AccountSummary
from ....domain.repositories import AccountRepository
from ....domain.value_objects import Role


class InMemoryAccountRepository(AccountRepository):
    """
    Repositorio in-memory, thread-safe, para cuentas de staff.

    Modelo mental:
    - _accounts es la "tabla" (id -> Account).
    - _sessions cuenta filas de account_sessions por cuenta.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._accounts: Dict[str, Account] = {}
        self._sessions: Dict[str, int] = {}

    @staticmethod
    def _copy(account: Account) -> Account:
        """R: Copia defensiva (incluye listas mutables)."""
        return replace(
            account,
            permissions=list(account.permissions),
            allowed_pages=list(account.allowed_pages),
        )

    @staticmethod
    def _created_sort_key(account: Account) -> datetime:
        return account.created_at or datetime.min.replace(tzinfo=timezone.utc)

    # =========================================================
    # Lecturas
    # =========================================================
    def list_accounts(self) -> List[AccountSummary]:
        with self._lock:
            items = [
                AccountSummary(account=self._copy(a), session_count=self._sessions.get(a.id, 0))
                for a in self._accounts.values()
            ]
        return sorted(
            items,
            key=lambda s: (self._created_sort_key(s.account), s.account.id),
            reverse=True,
        )

    def get_account(self, account_id: str) -> Optional[Account]:
        with self._lock:
            account = self._accounts.get(account_id)
            return self._copy(account) if account else None

    def get_account_by_email(self, email: str) -> Optional[Account]:
        wanted = (email or "").strip().lower()
        with self._lock:
            for account in self._accounts.values():
                if account.email.lower() == wanted:
                    return self._copy(account)
        return None

    # =========================================================
    # Escrituras
    # =========================================================
    def create_account(self, account: Account) -> Account:
        with self._lock:
            email = account.email.lower()
            if any(a.email.lower() == email for a in self._accounts.values()):
                raise DuplicateAccountError(f"Account already exists: {account.email}")
            stored = self._copy(account)
            self._accounts[stored.id] = stored
            return self._copy(stored)

    def update_account(
        self,
        account_id: str,
        *,
        updated_at: datetime,
        name: Optional[str] = None,
        role: Optional[Role] = None,
        is_active: Optional[bool] = None,
        permissions: Optional[List[str]] = None,
        allowed_pages: Optional[List[str]] = None,
        can_manage_users: Optional[bool] = None,
        password_hash: Optional[str] = None,
    ) -> Optional[Account]:
        changes = {
            "name": name,
            "role": role,
            "is_active": is_active,
            "permissions": list(permissions) if permissions is not None else None,
            "allowed_pages": list(allowed_pages) if allowed_pages is not None else None,
            "can_manage_users": can_manage_users,
            "password_hash": password_hash,
        }
        with self._lock:
            current = self._accounts.get(account_id)
            if current is None:
                return None
            updated = replace(
                current,
                updated_at=updated_at,
                **{k: v for k, v in changes.items() if v is not None},
            )
            self._accounts[account_id] = updated
            return self._copy(updated)

    def delete_account(self, account_id: str) -> bool:
        with self._lock:
            self._sessions.pop(account_id, None)
            return self._accounts.pop(account_id, None) is not None

    def record_login(
        self, account_id: str, *, logged_in_at: datetime, expires_at: datetime
    ) -> None:
        with self._lock:
            current = self._accounts.get(account_id)
            if current is None:
                return
            self._accounts[account_id] = replace(current, last_login_at=logged_in_at)
            self._sessions[account_id] = self._sessions.get(account_id, 0) + 1
