"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/account.py
============================================================
Class: PostgresAccountRepository

Responsibilities:
  - Persistir cuentas de staff en la tabla `accounts` (SQL crudo, parametrizado).
  - Listar cuentas con cantidad de sesiones (`account_sessions`).
  - Registrar logins (last_login_at + fila de sesión) en una sola transacción.
  - Mapear filas crudas -> entidad de dominio `Account` validando `Role`.
  - Exponer fallos consistentes vía `DatabaseError` con logging estructurado.

Collaborators:
  - psycopg_pool.ConnectionPool (pool de conexiones)
  - infrastructure.db.pool.get_pool (accesor del pool global)
  - domain.entities.Account / AccountSummary
  - crosscutting.exceptions.DatabaseError / DuplicateAccountError

Constraints / Notes:
  - Repositorio puro: NO define reglas de negocio (quién puede borrar a quién).
  - Retorna None / False cuando no existe el recurso.
  - El email llega normalizado; el índice único es sobre lower(email).
  - Orden estable en listados: created_at DESC, id DESC.
============================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional
from uuid import uuid4

from psycopg import errors as pg_errors
from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import DatabaseError, DuplicateAccountError
from ....crosscutting.logger import logger
from ....domain.entities import Account, AccountSummary
from ....domain.value_objects import Role

# R: Lista explícita de columnas para mantener el contrato estable con migraciones.
_ACCOUNT_COLUMNS = """
    id, name, email, password_hash, role, is_active, permissions,
    allowed_pages, can_manage_users, created_by, created_at, updated_at,
    last_login_at
"""

_ACCOUNT_ORDER_BY = "a.created_at DESC, a.id DESC"

# R: Columnas actualizables por update_account (whitelist para el SET dinámico).
_UPDATABLE_COLUMNS = (
    "name",
    "role",
    "is_active",
    "permissions",
    "allowed_pages",
    "can_manage_users",
    "password_hash",
)


class PostgresAccountRepository:
    """R: Implementación PostgreSQL del repositorio de cuentas."""

    def __init__(self, pool: Optional[ConnectionPool] = None):
        # R: Pool inyectable para tests; en producción se obtiene por factory global.
        self._pool = pool

    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool

        from ...db.pool import get_pool

        return get_pool()

    # =========================================================
    # Mapping
    # =========================================================
    @staticmethod
    def _row_to_account(row: tuple) -> Account:
        """
        Role casting estricto: si el valor no matchea el enum -> DatabaseError.
        """
        try:
            role = Role(row[4])
        except ValueError as exc:
            raise DatabaseError(f"Invalid account role in database: {row[4]}") from exc

        return Account(
            id=str(row[0]),
            name=row[1],
            email=row[2],
            password_hash=row[3],
            role=role,
            is_active=row[5],
            permissions=list(row[6] or []),
            allowed_pages=list(row[7] or []),
            can_manage_users=row[8],
            created_by=row[9],
            created_at=row[10],
            updated_at=row[11],
            last_login_at=row[12],
        )

    # =========================================================
    # Helpers de ejecución
    # =========================================================
    def _fetchone(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> tuple | None:
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                return conn.execute(query, tuple(params)).fetchone()
        except Exception as exc:
            logger.exception(context_msg, extra={**extra, "error": str(exc)})
            raise DatabaseError(f"{context_msg}: {exc}") from exc

    def _fetchall(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> list[tuple]:
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                return conn.execute(query, tuple(params)).fetchall()
        except Exception as exc:
            logger.exception(context_msg, extra={**extra, "error": str(exc)})
            raise DatabaseError(f"{context_msg}: {exc}") from exc

    # =========================================================
    # Lecturas
    # =========================================================
    def list_accounts(self) -> List[AccountSummary]:
        columns = ", ".join(f"a.{c.strip()}" for c in _ACCOUNT_COLUMNS.split(","))
        rows = self._fetchall(
            query=f"""
                SELECT {columns}, COUNT(s.id) AS session_count
                FROM accounts a
                LEFT JOIN account_sessions s ON s.account_id = a.id
                GROUP BY a.id
                ORDER BY {_ACCOUNT_ORDER_BY}
            """,
            params=(),
            context_msg="PostgresAccountRepository: list_accounts failed",
            extra={},
        )
        return [
            AccountSummary(account=self._row_to_account(row[:13]), session_count=row[13])
            for row in rows
        ]

    def get_account(self, account_id: str) -> Optional[Account]:
        row = self._fetchone(
            query=f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE id = %s",
            params=(account_id,),
            context_msg="PostgresAccountRepository: get_account failed",
            extra={"account_id": account_id},
        )
        return self._row_to_account(row) if row else None

    def get_account_by_email(self, email: str) -> Optional[Account]:
        row = self._fetchone(
            query=f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE lower(email) = lower(%s)",
            params=(email,),
            context_msg="PostgresAccountRepository: get_account_by_email failed",
            extra={"email": email},
        )
        return self._row_to_account(row) if row else None

    # =========================================================
    # Escrituras
    # =========================================================
    def create_account(self, account: Account) -> Account:
        context_msg = "PostgresAccountRepository: create_account failed"
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                row = conn.execute(
                    f"""
                    INSERT INTO accounts (
                        id, name, email, password_hash, role, is_active,
                        permissions, allowed_pages, can_manage_users, created_by,
                        created_at, updated_at
                    )
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    RETURNING {_ACCOUNT_COLUMNS}
                    """,
                    (
                        account.id,
                        account.name,
                        account.email,
                        account.password_hash,
                        account.role.value,
                        account.is_active,
                        list(account.permissions),
                        list(account.allowed_pages),
                        account.can_manage_users,
                        account.created_by,
                        account.created_at,
                        account.updated_at,
                    ),
                ).fetchone()
        except pg_errors.UniqueViolation as exc:
            logger.warning(
                "PostgresAccountRepository: duplicate email", extra={"email": account.email}
            )
            raise DuplicateAccountError(f"Account already exists: {account.email}") from exc
        except Exception as exc:
            logger.exception(context_msg, extra={"email": account.email, "error": str(exc)})
            raise DatabaseError(f"{context_msg}: {exc}") from exc

        if row is None:
            raise DatabaseError(f"{context_msg}: no row returned")
        return self._row_to_account(row)

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
        values = {
            "name": name,
            "role": role.value if role is not None else None,
            "is_active": is_active,
            "permissions": list(permissions) if permissions is not None else None,
            "allowed_pages": list(allowed_pages) if allowed_pages is not None else None,
            "can_manage_users": can_manage_users,
            "password_hash": password_hash,
        }
        sets: list[str] = []
        params: list[object] = []
        for column in _UPDATABLE_COLUMNS:
            if values[column] is not None:
                sets.append(f"{column} = %s")
                params.append(values[column])

        sets.append("updated_at = %s")
        params.append(updated_at)
        params.append(account_id)

        row = self._fetchone(
            query=f"""
                UPDATE accounts
                SET {", ".join(sets)}
                WHERE id = %s
                RETURNING {_ACCOUNT_COLUMNS}
            """,
            params=params,
            context_msg="PostgresAccountRepository: update_account failed",
            extra={"account_id": account_id},
        )
        return self._row_to_account(row) if row else None

    def delete_account(self, account_id: str) -> bool:
        # R: account_sessions se borra por ON DELETE CASCADE.
        row = self._fetchone(
            query="DELETE FROM accounts WHERE id = %s RETURNING id",
            params=(account_id,),
            context_msg="PostgresAccountRepository: delete_account failed",
            extra={"account_id": account_id},
        )
        return row is not None

    def record_login(
        self, account_id: str, *, logged_in_at: datetime, expires_at: datetime
    ) -> None:
        context_msg = "PostgresAccountRepository: record_login failed"
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                with conn.transaction():
                    conn.execute(
                        "UPDATE accounts SET last_login_at = %s WHERE id = %s",
                        (logged_in_at, account_id),
                    )
                    conn.execute(
                        """
                        INSERT INTO account_sessions (id, account_id, created_at, expires_at)
                        VALUES (%s, %s, %s, %s)
                        """,
                        (str(uuid4()), account_id, logged_in_at, expires_at),
                    )
        except Exception as exc:
            logger.exception(context_msg, extra={"account_id": account_id, "error": str(exc)})
            raise DatabaseError(f"{context_msg}: {exc}") from exc
