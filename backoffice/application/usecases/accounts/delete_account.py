"""
===============================================================================
USE CASE: Delete Account
===============================================================================

Name:
    Delete Account Use Case

Business Goal:
    Eliminar una cuenta de staff (y sus sesiones) desde el panel.

Why (Context / Intención):
    - Invariantes:
        * nadie puede borrarse a sí mismo
        * una cuenta SUPER_ADMIN no se puede borrar (ni por otro super admin)
    - Orden de chequeo: acceso -> id -> self -> existencia -> super admin.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    DeleteAccountUseCase

Responsibilities:
    - Aplicar las reglas anteriores antes de cualquier escritura.
    - Devolver el email de la cuenta eliminada.

Collaborators:
    - AccountRepository: get_account / delete_account
===============================================================================
"""

from __future__ import annotations

from typing import Optional

from ....crosscutting.logger import logger
from ....domain.repositories import AccountRepository
from ....identity.roles import Identity
from .account_access import check_manage_users
from .account_results import AccountError, AccountErrorCode, DeleteAccountResult


class DeleteAccountUseCase:
    def __init__(self, account_repository: AccountRepository) -> None:
        self._accounts = account_repository

    def execute(self, user_id: Optional[str], actor: Identity | None) -> DeleteAccountResult:
        # ---------------------------------------------------------------------
        # 1) Autorización.
        # ---------------------------------------------------------------------
        access_error = check_manage_users(actor)
        if access_error is not None:
            return DeleteAccountResult(error=access_error)

        # ---------------------------------------------------------------------
        # 2) Id requerido y distinto del actor.
        # ---------------------------------------------------------------------
        if not user_id:
            return self._error(AccountErrorCode.MISSING_USER_ID, "User ID is required.")
        if user_id == actor.id:
            return self._error(
                AccountErrorCode.CANNOT_DELETE_SELF, "Cannot delete your own account."
            )

        # ---------------------------------------------------------------------
        # 3) Target.
        # ---------------------------------------------------------------------
        target = self._accounts.get_account(user_id)
        if target is None:
            return self._not_found()
        if target.is_super_admin:
            return self._error(
                AccountErrorCode.CANNOT_DELETE_SUPER_ADMIN,
                "Cannot delete Super Admin account.",
            )

        # ---------------------------------------------------------------------
        # 4) Borrar.
        # ---------------------------------------------------------------------
        if not self._accounts.delete_account(user_id):
            return self._not_found()

        logger.info(
            "Account deleted",
            extra={"account_id": user_id, "actor_id": actor.id},
        )
        return DeleteAccountResult(deleted_email=target.email)

    @staticmethod
    def _error(code: AccountErrorCode, message: str) -> DeleteAccountResult:
        return DeleteAccountResult(error=AccountError(code=code, message=message))

    @classmethod
    def _not_found(cls) -> DeleteAccountResult:
        return cls._error(AccountErrorCode.USER_NOT_FOUND, "User not found.")
