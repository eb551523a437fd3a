"""
===============================================================================
TARJETA CRC — backoffice/context.py (Contexto por request)
===============================================================================

Responsabilidades:
  - Guardar en un único ContextVar el contexto del request en curso
    (request_id, method, path y la cuenta staff que actúa).
  - Exponerlo como dict plano para el logger.

Colaboradores:
  - crosscutting.middleware: abre y cierra el contexto por request.
  - interfaces.api.http.dependencies: agrega actor_id tras resolver identidad.
  - crosscutting.logger: lee get_context_dict().

Restricciones:
  - El contexto es inmutable; cada cambio reemplaza el valor del ContextVar.
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import asdict, dataclass, replace


@dataclass(frozen=True)
class RequestContext:
    request_id: str = ""
    method: str = ""
    path: str = ""
    actor_id: str = ""


_EMPTY = RequestContext()
_current: ContextVar[RequestContext] = ContextVar("backoffice_request", default=_EMPTY)


def set_request_context(
    *, request_id: str = "", method: str = "", path: str = ""
) -> None:
    """Inicia el contexto de un request (descarta el actor previo)."""
    _current.set(RequestContext(request_id=request_id, method=method, path=path))


def set_actor_context(actor_id: str) -> None:
    _current.set(replace(_current.get(), actor_id=actor_id or ""))


def get_context_dict() -> dict[str, str]:
    """Contexto actual sin claves vacías."""
    return {key: value for key, value in asdict(_current.get()).items() if value}


def clear_context() -> None:
    _current.set(_EMPTY)
