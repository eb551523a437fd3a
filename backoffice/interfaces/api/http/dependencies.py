"""
===============================================================================
TARJETA CRC — dependencies.py (Dependencias comunes de routers)
===============================================================================

Responsabilidades:
  - Resolver la identidad del request (cookie de sesión -> bearer) como
    dependencia FastAPI.
  - Publicar el actor en el contexto de logging.
  - Cortar con 403 a quien no tiene manageUsers antes de validar el body
    de las operaciones de cuentas.

Colaboradores:
  - identity.credentials (CredentialResolver / CredentialRequest)
  - container (get_admin_credential_resolver / get_staff_credential_resolver)
  - context.set_actor_context

Notas:
  - El resolver se inyecta con Depends(factory): los tests lo reemplazan con
    app.dependency_overrides.
===============================================================================
"""

from __future__ import annotations

from typing import Callable

from backoffice.container import (
    get_admin_credential_resolver,
    get_staff_credential_resolver,
)
from backoffice.application.usecases.accounts.account_access import check_manage_users
from backoffice.context import set_actor_context
from backoffice.identity.credentials import CredentialRequest, CredentialResolver
from backoffice.identity.roles import Identity
from fastapi import Depends, Header, Request

from .error_mapping import raise_account_error


def require_identity(resolver_factory: Callable[[], CredentialResolver]) -> Callable:
    """Dependency FastAPI: Identity o 401/403 (según el resolver)."""

    def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
        resolver: CredentialResolver = Depends(resolver_factory),
    ) -> Identity:
        identity = resolver.resolve(
            CredentialRequest(cookies=dict(request.cookies), authorization=authorization)
        )
        request.state.identity = identity
        set_actor_context(identity.id)
        return identity

    return dependency


# Recursos admin (hilos): sesión ADMIN/SUPER_ADMIN o bearer admin.
require_admin_identity = require_identity(get_admin_credential_resolver)

# Gestión de cuentas y /auth/me: sesión de cualquier rol o bearer admin.
require_staff_identity = require_identity(get_staff_credential_resolver)


def require_user_manager(
    identity: Identity = Depends(require_staff_identity),
) -> Identity:
    """Identity con manageUsers; FastAPI la resuelve antes que el body."""
    error = check_manage_users(identity)
    if error is not None:
        raise_account_error(error)
    return identity
