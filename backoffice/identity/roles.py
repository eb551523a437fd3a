"""
===============================================================================
TARJETA CRC — identity/roles.py
===============================================================================

Módulo:
    Identidad resuelta por request

Responsabilidades:
    - Definir Identity: quién hace el request (nunca se persiste).
    - Parsear roles crudos (claims / body) al dominio Role.

Colaboradores:
    - identity/credentials.py: construye Identity desde cookie o bearer.
    - identity/guard.py: decide capacidades sobre Identity.
    - application/usecases/*: reciben Identity como actor.

Notas:
    - can_manage_users viaja en la identidad porque el Guard lo necesita y el
      resolver es read-only (no consulta el store).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..domain.value_objects import Role, parse_enum


class CredentialSource(str, Enum):
    """De qué camino salió la identidad."""

    SESSION = "session"
    BEARER = "bearer"


@dataclass(frozen=True, slots=True)
class Identity:
    """Identidad autenticada del request."""

    id: str
    email: str
    role: Role
    can_manage_users: bool = False
    source: CredentialSource = CredentialSource.SESSION

    @property
    def is_super_admin(self) -> bool:
        return self.role == Role.SUPER_ADMIN


def parse_role(raw: object) -> Role | None:
    """Role desde un valor crudo; None si no pertenece al dominio."""
    return parse_enum(Role, raw)
