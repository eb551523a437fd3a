"""
===============================================================================
ACCOUNT ACCESS HELPERS (manageUsers gate / role parsing)
===============================================================================

Business Goal:
    Un único punto para el chequeo que TODA operación de cuentas hace primero:
      - sin identidad -> UNAUTHORIZED
      - sin capacidad manageUsers -> FORBIDDEN

Collaborators:
    - identity.guard (Capability.MANAGE_USERS)
    - identity.roles.parse_role
===============================================================================
"""

from __future__ import annotations

from typing import Final, Tuple

from ....domain.value_objects import Role, allowed_values
from ....identity.guard import Capability, authorize
from ....identity.roles import Identity, parse_role
from .account_results import AccountError, AccountErrorCode

_MSG_UNAUTHORIZED: Final[str] = "Authentication required."
_MSG_FORBIDDEN: Final[str] = "Only Super Admin can manage users."


def check_manage_users(actor: Identity | None) -> AccountError | None:
    if actor is None:
        return AccountError(code=AccountErrorCode.UNAUTHORIZED, message=_MSG_UNAUTHORIZED)
    if not authorize(actor, Capability.MANAGE_USERS):
        return AccountError(code=AccountErrorCode.FORBIDDEN, message=_MSG_FORBIDDEN)
    return None


def resolve_role(raw: object | None) -> Tuple[Role | None, AccountError | None]:
    """
    None -> (None, None): el rol no fue provisto.
    Cualquier otro valor fuera del dominio -> INVALID_ROLE.
    """
    if raw is None:
        return None, None
    role = parse_role(raw)
    if role is None:
        allowed = allowed_values(Role)
        return None, AccountError(
            code=AccountErrorCode.INVALID_ROLE,
            message=f"Invalid role. Must be one of: {', '.join(allowed)}",
            allowed=allowed,
        )
    return role, None
