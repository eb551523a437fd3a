"""
===============================================================================
TARJETA CRC — crosscutting/exceptions.py (Errores internos)
===============================================================================

Responsabilidades:
  - Jerarquía de errores de infraestructura con un código estable y un
    error_id que se devuelve al cliente y se registra en el log.

Colaboradores:
  - api/exception_handlers.py: BackofficeError -> 500 problem+json
  - infrastructure/repositories/*: lanzan DatabaseError / DuplicateAccountError
  - application/usecases/accounts/create_account.py: DuplicateAccountError -> 409
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class BackofficeError(Exception):
    """Base de los errores internos; `message` nunca incluye secretos."""

    error_code: str = "BACKOFFICE_ERROR"

    def __init__(self, message: str, *, error_id: str | None = None):
        super().__init__(message)
        self.message = message
        self.error_id = error_id or uuid4().hex


class DatabaseError(BackofficeError):
    error_code = "DATABASE_ERROR"


class DuplicateAccountError(DatabaseError):
    """El store rechazó un email ya registrado (carrera entre altas)."""

    error_code = "DUPLICATE_ACCOUNT"
