"""
===============================================================================
USE CASE: List Accounts
===============================================================================

Business Goal:
    Listar todas las cuentas de staff (más nuevas primero) con la cantidad de
    sesiones registradas, para el panel de gestión de usuarios.

Collaborators:
    - AccountRepository.list_accounts
    - account_access.check_manage_users
===============================================================================
"""

from __future__ import annotations

from ....domain.repositories import AccountRepository
from ....identity.roles import Identity
from .account_access import check_manage_users
from .account_results import AccountListResult


class ListAccountsUseCase:
    def __init__(self, account_repository: AccountRepository) -> None:
        self._accounts = account_repository

    def execute(self, actor: Identity | None) -> AccountListResult:
        access_error = check_manage_users(actor)
        if access_error is not None:
            return AccountListResult(error=access_error)

        return AccountListResult(accounts=self._accounts.list_accounts())
