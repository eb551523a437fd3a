"""
===============================================================================
USE CASE: Create Account
===============================================================================

Name:
    Create Account Use Case

Business Goal:
    Dar de alta una cuenta de staff nueva desde el panel de gestión.

Why (Context / Intención):
    - Invariantes:
        * name, email y password son obligatorios
        * email se normaliza (trim + lower) y es único sin importar mayúsculas
        * el password se persiste sólo como hash Argon2
        * una cuenta creada desde el panel NUNCA recibe can_manage_users
        * created_by = id del actor
    - Defaults: role ADMIN, permissions [], allowed_pages ["/profile"].

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    CreateAccountUseCase

Responsibilities:
    - Validar acceso (MANAGE_USERS).
    - Validar campos requeridos y rol.
    - Detectar email duplicado (pre-check + carrera contra el índice único).
    - Hashear y persistir.

Collaborators:
    - AccountRepository: get_account_by_email / create_account
    - password_hasher: Callable[[str], str] (identity.passwords.hash_password)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Final, List, Optional
from uuid import uuid4

from ....crosscutting.exceptions import DuplicateAccountError
from ....crosscutting.logger import logger
from ....domain.entities import Account
from ....domain.repositories import AccountRepository
from ....domain.value_objects import Role
from ....identity.roles import Identity
from .account_access import check_manage_users, resolve_role
from .account_results import AccountError, AccountErrorCode, AccountResult

DEFAULT_ROLE: Final[Role] = Role.ADMIN
DEFAULT_ALLOWED_PAGES: Final[tuple[str, ...]] = ("/profile",)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CreateAccountInput:
    """Datos crudos del alta. role se valida en el use case."""

    name: Optional[str]
    email: Optional[str]
    password: Optional[str]
    role: object | None = None
    permissions: Optional[List[str]] = None
    allowed_pages: Optional[List[str]] = None


class CreateAccountUseCase:
    def __init__(
        self,
        account_repository: AccountRepository,
        password_hasher: Callable[[str], str],
        *,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = lambda: str(uuid4()),
    ) -> None:
        self._accounts = account_repository
        self._hash_password = password_hasher
        self._clock = clock
        self._new_id = id_factory

    def execute(self, input_data: CreateAccountInput, actor: Identity | None) -> AccountResult:
        # ---------------------------------------------------------------------
        # 1) Autorización.
        # ---------------------------------------------------------------------
        access_error = check_manage_users(actor)
        if access_error is not None:
            return AccountResult(error=access_error)

        # ---------------------------------------------------------------------
        # 2) Requeridos (vacío == ausente).
        # ---------------------------------------------------------------------
        name = (input_data.name or "").strip()
        email = (input_data.email or "").strip().lower()
        if not name or not email or not input_data.password:
            return AccountResult(
                error=AccountError(
                    code=AccountErrorCode.MISSING_REQUIRED_FIELDS,
                    message="Name, email, and password are required.",
                )
            )

        # ---------------------------------------------------------------------
        # 3) Rol.
        # ---------------------------------------------------------------------
        role, role_error = resolve_role(input_data.role)
        if role_error is not None:
            return AccountResult(error=role_error)

        # ---------------------------------------------------------------------
        # 4) Unicidad de email.
        # ---------------------------------------------------------------------
        if self._accounts.get_account_by_email(email) is not None:
            return self._already_exists()

        # ---------------------------------------------------------------------
        # 5) Persistir.
        # ---------------------------------------------------------------------
        now = self._clock()
        account = Account(
            id=self._new_id(),
            name=name,
            email=email,
            password_hash=self._hash_password(input_data.password),
            role=role or DEFAULT_ROLE,
            is_active=True,
            permissions=list(input_data.permissions or []),
            allowed_pages=(
                list(input_data.allowed_pages)
                if input_data.allowed_pages is not None
                else list(DEFAULT_ALLOWED_PAGES)
            ),
            can_manage_users=False,
            created_by=actor.id,
            created_at=now,
            updated_at=now,
        )

        try:
            created = self._accounts.create_account(account)
        except DuplicateAccountError:
            # Carrera: otro request creó el mismo email entre check y insert.
            return self._already_exists()

        logger.info(
            "Account created",
            extra={"account_id": created.id, "role": created.role.value, "actor_id": actor.id},
        )
        return AccountResult(account=created)

    @staticmethod
    def _already_exists() -> AccountResult:
        return AccountResult(
            error=AccountError(
                code=AccountErrorCode.USER_ALREADY_EXISTS,
                message="User with this email already exists.",
            )
        )
