"""
===============================================================================
TARJETA CRC — identity/guard.py
===============================================================================

Módulo:
    Authorization Guard (capacidades)

Responsabilidades:
    - Definir las capacidades que protegen recursos del back-office.
    - Decidir (puro, sin estado) si una Identity tiene una capacidad.

Colaboradores:
    - identity/roles.py: Identity.
    - application/usecases/*: chequean capacidad antes de tocar el store.

Reglas:
    - MANAGE_USERS: can_manage_users o SUPER_ADMIN (independiente del rango).
    - VIEW_ADMIN_RESOURCE: rol ADMIN o SUPER_ADMIN.
===============================================================================
"""

from __future__ import annotations

from enum import Enum

from ..domain.value_objects import ADMIN_ROLES, Role
from .roles import Identity


class Capability(str, Enum):
    MANAGE_USERS = "manageUsers"
    VIEW_ADMIN_RESOURCE = "viewAdminResource"


def authorize(identity: Identity | None, capability: Capability) -> bool:
    """True si la identidad tiene la capacidad. Sin identidad -> False."""
    if identity is None:
        return False

    if capability == Capability.MANAGE_USERS:
        return identity.can_manage_users or identity.role == Role.SUPER_ADMIN

    if capability == Capability.VIEW_ADMIN_RESOURCE:
        return identity.role in ADMIN_ROLES

    return False
