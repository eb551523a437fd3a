"""
===============================================================================
THREAD USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Name:
    Thread Use Case Results

Business Goal:
    Proveer modelos compartidos de resultados y errores para los casos de uso
    de hilos de soporte (read / list / update), con un contrato estable para:
      - validación de id y de valores enumerados
      - autorización
      - hilos inexistentes

Why (Context / Intención):
    - Los use cases devuelven resultados tipados en lugar de lanzar excepciones,
      y la capa HTTP los traduce a RFC7807.
    - Los errores de validación llevan el campo ofensivo y el set aceptado
      para que el panel pueda mostrar el error junto al control.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    thread_results models (module)

Responsibilities:
    - ThreadErrorCode: códigos estables (uno por tipo de rechazo).
    - ThreadError: code + message (+ field / allowed / details).
    - ThreadResult / ThreadListResult.

Collaborators:
    - domain.entities.MessageThread
===============================================================================
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, List

from ....domain.entities import MessageThread


class ThreadErrorCode(str, Enum):
    """
    Códigos:
      - INVALID_THREAD_ID: el id no es un entero.
      - INVALID_STATUS / INVALID_PRIORITY / INVALID_FOLDER: valor fuera del dominio.
      - VALIDATION_ERROR: tipo inválido en un campo no enumerado.
      - UNAUTHORIZED / FORBIDDEN: sin identidad / sin capacidad.
      - NOT_FOUND: el hilo no existe.
    """

    INVALID_THREAD_ID = "INVALID_THREAD_ID"
    INVALID_STATUS = "INVALID_STATUS"
    INVALID_PRIORITY = "INVALID_PRIORITY"
    INVALID_FOLDER = "INVALID_FOLDER"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"


@dataclass(frozen=True)
class ThreadError:
    """
    Error de caso de uso.

    - field / allowed: sólo para errores de validación de un campo.
    - details: un dict por campo inválido cuando hay más de uno.
    """

    code: ThreadErrorCode
    message: str
    field: str | None = None
    allowed: List[str] | None = None
    details: List[dict[str, Any]] = dataclasses.field(default_factory=list)


@dataclass
class ThreadResult:
    thread: MessageThread | None = None
    error: ThreadError | None = None


@dataclass
class ThreadListResult:
    threads: List[MessageThread] = dataclasses.field(default_factory=list)
    error: ThreadError | None = None
