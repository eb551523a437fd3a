"""
===============================================================================
DOMAIN: Value Objects (Enumerated Domains)
===============================================================================

Name:
    Domain Value Objects

Qué es:
    Dominios cerrados de valores que el back-office persiste y valida:
    - Role: rol de staff (orden total USER < ... < SUPER_ADMIN)
    - ThreadStatus / ThreadPriority / ThreadFolder: estado de un hilo de soporte

Principios:
    - Inmutabilidad (Enum)
    - str + Enum para serializar directo a JSON / columnas TEXT
    - Sin side effects
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Final


class Role(str, Enum):
    """Rol de una cuenta de staff. El orden de declaración es el rango."""

    USER = "USER"
    CUSTOMER = "CUSTOMER"
    SUPPORT = "SUPPORT"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"

    @property
    def rank(self) -> int:
        return _ROLE_ORDER.index(self)

    def at_least(self, other: "Role") -> bool:
        return self.rank >= other.rank


_ROLE_ORDER: Final[tuple[Role, ...]] = tuple(Role)

# R: Roles que pueden operar recursos administrativos (threads, /auth/me por bearer).
ADMIN_ROLES: Final[frozenset[Role]] = frozenset({Role.ADMIN, Role.SUPER_ADMIN})


class ThreadStatus(str, Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"


class ThreadPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class ThreadFolder(str, Enum):
    INBOX = "INBOX"
    SENT = "SENT"
    TRASH = "TRASH"
    ARCHIVE = "ARCHIVE"
    SPAM = "SPAM"


def allowed_values(enum_cls: type[Enum]) -> list[str]:
    """Valores aceptados de un dominio, en orden de declaración."""
    return [member.value for member in enum_cls]


def parse_enum(enum_cls: type[Enum], raw: object) -> Enum | None:
    """
    Convierte un valor crudo al miembro del dominio, o None si no pertenece.

    - Comparación exacta (case-sensitive): "open" no es OPEN.
    - Valores no-string (None, int, bool) nunca pertenecen.
    """
    if not isinstance(raw, str):
        return None
    try:
        return enum_cls(raw)
    except ValueError:
        return None
