"""
===============================================================================
USE CASE: Authenticate Account (Login)
===============================================================================

Business Goal:
    Validar credenciales de staff y registrar la sesión (last_login_at +
    fila en account_sessions, que alimenta el conteo del listado).

Why (Context / Intención):
    - Mismo mensaje para email inexistente y password incorrecto.
    - Una cuenta desactivada con credenciales correctas recibe un error
      distinto (ACCOUNT_DEACTIVATED) para que el panel lo pueda explicar.
    - Emitir tokens / cookies es responsabilidad de la capa HTTP.

Collaborators:
    - AccountRepository: get_account_by_email / record_login
    - password_verifier: Callable[[str, str], bool] (identity.passwords)
===============================================================================
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

from ....crosscutting.logger import logger
from ....domain.repositories import AccountRepository
from .account_results import AccountError, AccountErrorCode, AccountResult


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuthenticateAccountUseCase:
    def __init__(
        self,
        account_repository: AccountRepository,
        password_verifier: Callable[[str, str], bool],
        *,
        session_ttl_minutes: int,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._accounts = account_repository
        self._verify_password = password_verifier
        self._session_ttl = timedelta(minutes=session_ttl_minutes)
        self._clock = clock

    def execute(self, email: str, password: str) -> AccountResult:
        normalized_email = (email or "").strip().lower()
        account = (
            self._accounts.get_account_by_email(normalized_email)
            if normalized_email
            else None
        )

        if account is None or not self._verify_password(password or "", account.password_hash):
            logger.info("Login rejected: invalid credentials")
            return AccountResult(
                error=AccountError(
                    code=AccountErrorCode.INVALID_CREDENTIALS,
                    message="Invalid email or password.",
                )
            )

        if not account.is_active:
            logger.info("Login rejected: account deactivated", extra={"account_id": account.id})
            return AccountResult(
                error=AccountError(
                    code=AccountErrorCode.ACCOUNT_DEACTIVATED,
                    message="Account is deactivated.",
                )
            )

        now = self._clock()
        self._accounts.record_login(
            account.id, logged_in_at=now, expires_at=now + self._session_ttl
        )
        account.last_login_at = now

        logger.info("Login succeeded", extra={"account_id": account.id})
        return AccountResult(account=account)
