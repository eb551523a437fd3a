"""
===============================================================================
TARJETA CRC — crosscutting/middleware.py (Middleware de contexto)
===============================================================================

Responsabilidades:
  - Aceptar el X-Request-Id entrante (si es razonable) o generar uno nuevo.
  - Abrir el contexto del request para los logs y devolver el id en la
    respuesta.
  - Registrar una línea de acceso con status y latencia (salvo /healthz).

Colaboradores:
  - backoffice/context.py
  - crosscutting/logger.py
===============================================================================
"""

from __future__ import annotations

import re
import time
import uuid
from typing import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..context import clear_context, set_request_context
from .logger import logger

REQUEST_ID_HEADER = "X-Request-Id"

# Ids de clientes: imprimibles, sin espacios, acotados.
_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._:\-]{1,128}$")


def pick_request_id(incoming: str | None) -> str:
    candidate = (incoming or "").strip()
    if _REQUEST_ID_PATTERN.match(candidate):
        return candidate
    return uuid.uuid4().hex


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Correlación por request: id, contexto de log y línea de acceso."""

    quiet_paths: frozenset[str] = frozenset({"/healthz"})

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = pick_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        set_request_context(
            request_id=request_id, method=request.method, path=request.url.path
        )

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "Unhandled error while serving request",
                extra={"elapsed_ms": _elapsed_ms(started)},
            )
            clear_context()
            raise

        response.headers[REQUEST_ID_HEADER] = request_id
        if request.url.path not in self.quiet_paths:
            logger.info(
                "Request served",
                extra={
                    "status_code": response.status_code,
                    "elapsed_ms": _elapsed_ms(started),
                },
            )
        clear_context()
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
