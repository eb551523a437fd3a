"""
===============================================================================
ACCOUNT USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Name:
    Account Use Case Results

Business Goal:
    Contrato estable de resultados y errores para la gestión de cuentas de
    staff (list / create / update / delete).

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    account_results models (module)

Responsibilities:
    - AccountErrorCode: códigos estables expuestos por la API.
    - AccountError: code + message (+ allowed para INVALID_ROLE).
    - AccountResult / AccountListResult / DeleteAccountResult.

Collaborators:
    - domain.entities.Account / AccountSummary
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from ....domain.entities import Account, AccountSummary


class AccountErrorCode(str, Enum):
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    MISSING_REQUIRED_FIELDS = "MISSING_REQUIRED_FIELDS"
    MISSING_USER_ID = "MISSING_USER_ID"
    INVALID_ROLE = "INVALID_ROLE"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    USER_ALREADY_EXISTS = "USER_ALREADY_EXISTS"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    CANNOT_DELETE_SELF = "CANNOT_DELETE_SELF"
    CANNOT_DELETE_SUPER_ADMIN = "CANNOT_DELETE_SUPER_ADMIN"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    ACCOUNT_DEACTIVATED = "ACCOUNT_DEACTIVATED"


@dataclass(frozen=True)
class AccountError:
    code: AccountErrorCode
    message: str
    allowed: List[str] | None = None


@dataclass
class AccountResult:
    account: Account | None = None
    error: AccountError | None = None


@dataclass
class AccountListResult:
    accounts: List[AccountSummary] = field(default_factory=list)
    error: AccountError | None = None


@dataclass
class DeleteAccountResult:
    """deleted_email: email de la cuenta borrada (para el mensaje de respuesta)."""

    deleted_email: str | None = None
    error: AccountError | None = None
