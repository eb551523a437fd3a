"""
===============================================================================
USE CASE: Update Account
===============================================================================

Business Goal:
    Cambiar rol, estado activo, permisos y páginas permitidas de una cuenta.
    Los campos omitidos quedan como están; updated_at siempre se refresca.

Collaborators:
    - AccountRepository.update_account
    - account_access: check_manage_users / resolve_role
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional

from ....crosscutting.logger import logger
from ....domain.repositories import AccountRepository
from ....identity.roles import Identity
from .account_access import check_manage_users, resolve_role
from .account_results import AccountError, AccountErrorCode, AccountResult


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class UpdateAccountInput:
    user_id: Optional[str]
    role: object | None = None
    is_active: Optional[bool] = None
    permissions: Optional[List[str]] = None
    allowed_pages: Optional[List[str]] = None


class UpdateAccountUseCase:
    def __init__(
        self,
        account_repository: AccountRepository,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._accounts = account_repository
        self._clock = clock

    def execute(self, input_data: UpdateAccountInput, actor: Identity | None) -> AccountResult:
        access_error = check_manage_users(actor)
        if access_error is not None:
            return AccountResult(error=access_error)

        if not input_data.user_id:
            return AccountResult(
                error=AccountError(
                    code=AccountErrorCode.MISSING_USER_ID, message="User ID is required."
                )
            )

        role, role_error = resolve_role(input_data.role)
        if role_error is not None:
            return AccountResult(error=role_error)

        updated = self._accounts.update_account(
            input_data.user_id,
            updated_at=self._clock(),
            role=role,
            is_active=input_data.is_active,
            permissions=input_data.permissions,
            allowed_pages=input_data.allowed_pages,
        )
        if updated is None:
            return AccountResult(
                error=AccountError(
                    code=AccountErrorCode.USER_NOT_FOUND, message="User not found."
                )
            )

        logger.info(
            "Account updated",
            extra={"account_id": updated.id, "actor_id": actor.id},
        )
        return AccountResult(account=updated)
