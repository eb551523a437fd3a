"""
===============================================================================
TARJETA CRC — backoffice/api/exception_handlers.py (Manejo Centralizado de Excepciones)
===============================================================================

Responsabilidades:
  - Registrar en la app los handlers que convierten excepciones en
    problem+json.
  - Errores internos (store caído, fallas no tipadas): 500 genérico con
    error_id; el detalle real sólo va al log.
  - Body / query mal formados: 400 VALIDATION_ERROR sin eco del input.

Colaboradores:
  - crosscutting.error_responses: problem_response, app_exception_handler
  - crosscutting.exceptions: BackofficeError / DatabaseError
===============================================================================
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
    problem_response,
)
from ..crosscutting.exceptions import BackofficeError, DatabaseError
from ..crosscutting.logger import logger

_GENERIC_INTERNAL_DETAIL = "Internal server error"


def _internal_error_response(
    request: Request, errors: list[dict[str, Any]] | None = None
) -> JSONResponse:
    return problem_response(
        request,
        status=HTTPStatus.INTERNAL_SERVER_ERROR,
        code=ErrorCode.INTERNAL_ERROR,
        detail=_GENERIC_INTERNAL_DETAIL,
        errors=errors,
    )


async def backoffice_error_handler(
    request: Request, exc: BackofficeError
) -> JSONResponse:
    """DatabaseError y demás BackofficeError -> 500 con error_id."""
    log_message = (
        "Database failure" if isinstance(exc, DatabaseError) else "Service failure"
    )
    logger.error(
        log_message,
        extra={"code": exc.error_code, "error_id": exc.error_id, "error": exc.message},
    )
    return _internal_error_response(request, [{"error_id": exc.error_id}])


def _field_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    # R: loc / msg / type únicamente; el input del cliente no vuelve en la respuesta.
    field_errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query")]
        field_errors.append(
            {
                "field": ".".join(loc),
                "message": err.get("msg", ""),
                "type": err.get("type", ""),
            }
        )
    return field_errors


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return problem_response(
        request,
        status=HTTPStatus.BAD_REQUEST,
        code=ErrorCode.VALIDATION_ERROR,
        detail="Invalid request",
        errors=_field_errors(exc),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception", exc_info=exc, extra={"error": str(exc)})
    return _internal_error_response(request)


def register_exception_handlers(app: FastAPI) -> None:
    """El handler de Exception va último: es el fallback."""
    app.add_exception_handler(BackofficeError, backoffice_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers"]
