"""
===============================================================================
TARJETA CRC — error_mapping.py (UseCase Error -> HTTP RFC7807)
===============================================================================

Responsabilidades:
  - Traducir errores tipados de casos de uso a AppHTTPException.
  - Centralizar el mapeo para que los routers no repitan reglas.

Reglas:
  - Validación -> 400 con el código específico y errors[] (field / allowed).
  - UNAUTHORIZED -> 401, FORBIDDEN -> 403, *_NOT_FOUND -> 404,
    USER_ALREADY_EXISTS -> 409.

Colaboradores:
  - application.usecases.threads (ThreadError / ThreadErrorCode)
  - application.usecases.accounts (AccountError / AccountErrorCode)
  - crosscutting.error_responses
===============================================================================
"""

from __future__ import annotations

from typing import Any, NoReturn

from backoffice.application.usecases.accounts import AccountError, AccountErrorCode
from backoffice.application.usecases.threads import ThreadError, ThreadErrorCode
from backoffice.crosscutting.error_responses import (
    ErrorCode,
    bad_request,
    conflict,
    forbidden,
    internal_error,
    not_found,
    unauthorized,
)

_THREAD_BAD_REQUEST = {
    ThreadErrorCode.INVALID_THREAD_ID,
    ThreadErrorCode.INVALID_STATUS,
    ThreadErrorCode.INVALID_PRIORITY,
    ThreadErrorCode.INVALID_FOLDER,
    ThreadErrorCode.VALIDATION_ERROR,
}

_ACCOUNT_BAD_REQUEST = {
    AccountErrorCode.MISSING_REQUIRED_FIELDS,
    AccountErrorCode.MISSING_USER_ID,
    AccountErrorCode.INVALID_ROLE,
    AccountErrorCode.VALIDATION_ERROR,
    AccountErrorCode.CANNOT_DELETE_SELF,
    AccountErrorCode.CANNOT_DELETE_SUPER_ADMIN,
}


def _thread_errors(error: ThreadError) -> list[dict[str, Any]] | None:
    if error.details:
        return list(error.details)
    if error.field:
        entry: dict[str, Any] = {"field": error.field}
        if error.allowed:
            entry["allowed"] = list(error.allowed)
        return [entry]
    return None


def raise_thread_error(error: ThreadError, *, thread_id: object = None) -> NoReturn:
    """Traduce ThreadError -> HTTP."""
    if error.code == ThreadErrorCode.UNAUTHORIZED:
        raise unauthorized(error.message)
    if error.code == ThreadErrorCode.FORBIDDEN:
        raise forbidden(error.message)
    if error.code == ThreadErrorCode.NOT_FOUND:
        raise not_found("Thread", str(thread_id), code=ErrorCode.THREAD_NOT_FOUND)
    if error.code in _THREAD_BAD_REQUEST:
        raise bad_request(
            error.message, code=ErrorCode(error.code.value), errors=_thread_errors(error)
        )

    # Código nuevo sin mapeo.
    raise internal_error()


def raise_account_error(error: AccountError, *, user_id: str | None = None) -> NoReturn:
    """Traduce AccountError -> HTTP."""
    code = error.code
    if code == AccountErrorCode.UNAUTHORIZED:
        raise unauthorized(error.message)
    if code == AccountErrorCode.INVALID_CREDENTIALS:
        raise unauthorized(error.message, code=ErrorCode.INVALID_CREDENTIALS)
    if code == AccountErrorCode.FORBIDDEN:
        raise forbidden(error.message)
    if code == AccountErrorCode.ACCOUNT_DEACTIVATED:
        raise forbidden(error.message, code=ErrorCode.ACCOUNT_DEACTIVATED)
    if code == AccountErrorCode.USER_NOT_FOUND:
        raise not_found("User", str(user_id), code=ErrorCode.USER_NOT_FOUND)
    if code == AccountErrorCode.USER_ALREADY_EXISTS:
        raise conflict(error.message, code=ErrorCode.USER_ALREADY_EXISTS)
    if code in _ACCOUNT_BAD_REQUEST:
        errors = (
            [{"field": "role", "allowed": list(error.allowed)}] if error.allowed else None
        )
        raise bad_request(error.message, code=ErrorCode(code.value), errors=errors)

    raise internal_error()
