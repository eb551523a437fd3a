"""
===============================================================================
THREAD INPUTS (Id parsing / Patch validation / Access)
===============================================================================

Name:
    Thread Input Helpers

Business Goal:
    Centralizar la validación de entradas compartida por los casos de uso de
    hilos, garantizando que NINGUNA escritura ocurra con datos inválidos:
      - thread_id debe ser un entero (en rango de columna INTEGER)
      - cada campo enumerado del patch se valida contra su dominio
      - un solo campo inválido rechaza el patch completo

-------------------------------------------------------------------------------
CRC CARD (Functions-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    thread_inputs helpers (module-level)

Responsibilities:
    - parse_thread_id(raw) -> int | None
    - ThreadPatch: patch crudo con UNSET para "no provisto".
    - validate_thread_patch(patch) -> (ThreadChanges | None, ThreadError | None)
    - check_admin_access(actor) -> ThreadError | None

Collaborators:
    - domain.value_objects (ThreadStatus / ThreadPriority / ThreadFolder)
    - domain.entities (ThreadChanges, UNSET)
    - identity.guard (Capability.VIEW_ADMIN_RESOURCE)
===============================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Final, List, Tuple

from ....domain.entities import UNSET, ThreadChanges
from ....domain.value_objects import (
    ThreadFolder,
    ThreadPriority,
    ThreadStatus,
    allowed_values,
    parse_enum,
)
from ....identity.guard import Capability, authorize
from ....identity.roles import Identity
from .thread_results import ThreadError, ThreadErrorCode

_INT_PATTERN: Final = re.compile(r"^-?\d+$")
_PG_INT_MAX: Final[int] = 2**31 - 1

# R: Orden de validación = orden de reporte del primer error.
_ENUM_FIELDS: Final[Tuple[Tuple[str, type[Enum], ThreadErrorCode], ...]] = (
    ("status", ThreadStatus, ThreadErrorCode.INVALID_STATUS),
    ("priority", ThreadPriority, ThreadErrorCode.INVALID_PRIORITY),
    ("folder", ThreadFolder, ThreadErrorCode.INVALID_FOLDER),
)

_MSG_INVALID_ID: Final[str] = "Invalid thread ID"


def parse_thread_id(raw: object) -> int | None:
    """Entero desde str/int; None si no es un entero representable."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str) and _INT_PATTERN.match(raw.strip()):
        value = int(raw.strip())
    else:
        return None
    if abs(value) > _PG_INT_MAX:
        return None
    return value


def invalid_thread_id_error() -> ThreadError:
    return ThreadError(code=ThreadErrorCode.INVALID_THREAD_ID, message=_MSG_INVALID_ID)


def check_admin_access(actor: Identity | None) -> ThreadError | None:
    if actor is None:
        return ThreadError(
            code=ThreadErrorCode.UNAUTHORIZED, message="Authentication required."
        )
    if not authorize(actor, Capability.VIEW_ADMIN_RESOURCE):
        return ThreadError(code=ThreadErrorCode.FORBIDDEN, message="Admin access required.")
    return None


@dataclass(frozen=True)
class ThreadPatch:
    """
    Patch crudo (tal como llegó). UNSET = campo ausente en el request.

    Claves desconocidas nunca llegan acá: el borde HTTP las descarta.
    """

    status: Any = UNSET
    priority: Any = UNSET
    folder: Any = UNSET
    read: Any = UNSET
    private_note: Any = UNSET
    assigned_admin: Any = UNSET


def _enum_error(field_name: str, enum_cls: type[Enum], code: ThreadErrorCode) -> ThreadError:
    allowed = allowed_values(enum_cls)
    return ThreadError(
        code=code,
        message=f"Invalid {field_name}. Must be one of: {', '.join(allowed)}",
        field=field_name,
        allowed=allowed,
    )


def _type_error(field_name: str, expected: str) -> ThreadError:
    return ThreadError(
        code=ThreadErrorCode.VALIDATION_ERROR,
        message=f"Invalid {field_name}. Must be {expected}",
        field=field_name,
    )


def validate_thread_patch(
    patch: ThreadPatch,
) -> Tuple[ThreadChanges | None, ThreadError | None]:
    """
    Valida cada campo provisto de forma independiente.

    Retorna (ThreadChanges, None) si todo es válido, o (None, ThreadError)
    con el primer campo inválido como error principal y todos en details.
    """
    values: dict[str, Any] = {}
    errors: List[ThreadError] = []

    for field_name, enum_cls, code in _ENUM_FIELDS:
        raw = getattr(patch, field_name)
        if raw is UNSET:
            continue
        member = parse_enum(enum_cls, raw)
        if member is None:
            errors.append(_enum_error(field_name, enum_cls, code))
        else:
            values[field_name] = member

    if patch.read is not UNSET:
        if isinstance(patch.read, bool):
            values["read"] = patch.read
        else:
            errors.append(_type_error("read", "a boolean"))

    # R: None explícito limpia la nota / la asignación.
    for field_name in ("private_note", "assigned_admin"):
        raw = getattr(patch, field_name)
        if raw is UNSET:
            continue
        if raw is None or isinstance(raw, str):
            values[field_name] = raw
        else:
            errors.append(_type_error(field_name, "a string or null"))

    if errors:
        first = errors[0]
        details = [
            {"field": e.field, "code": e.code.value, **({"allowed": e.allowed} if e.allowed else {})}
            for e in errors
        ]
        return None, ThreadError(
            code=first.code,
            message=first.message,
            field=first.field,
            allowed=first.allowed,
            details=details,
        )

    return ThreadChanges(**values), None
