"""
===============================================================================
TARJETA CRC — crosscutting/error_responses.py (Problem Details)
===============================================================================

Responsabilidades:
  - Catálogo de códigos estables (ErrorCode) que el panel usa para decidir
    qué mostrar.
  - Cuerpo RFC 7807 (ErrorDetail) servido como application/problem+json.
  - Factories para los errores HTTP frecuentes y problem_response(), usado
    tanto por el handler de AppHTTPException como por los handlers de
    excepciones internas.

Colaboradores:
  - crosscutting/middleware.py: request.state.request_id
  - api/exception_handlers.py
  - interfaces/api/http/error_mapping.py
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from http import HTTPStatus
from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorCode(str, Enum):
    # 400 - genéricos
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # 400 - threads
    INVALID_THREAD_ID = "INVALID_THREAD_ID"
    INVALID_STATUS = "INVALID_STATUS"
    INVALID_PRIORITY = "INVALID_PRIORITY"
    INVALID_FOLDER = "INVALID_FOLDER"

    # 400 - cuentas
    MISSING_REQUIRED_FIELDS = "MISSING_REQUIRED_FIELDS"
    MISSING_USER_ID = "MISSING_USER_ID"
    INVALID_ROLE = "INVALID_ROLE"
    CANNOT_DELETE_SELF = "CANNOT_DELETE_SELF"
    CANNOT_DELETE_SUPER_ADMIN = "CANNOT_DELETE_SUPER_ADMIN"

    # 401 / 403
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    FORBIDDEN = "FORBIDDEN"
    ACCOUNT_DEACTIVATED = "ACCOUNT_DEACTIVATED"

    # 404 / 409
    NOT_FOUND = "NOT_FOUND"
    THREAD_NOT_FOUND = "THREAD_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    CONFLICT = "CONFLICT"
    USER_ALREADY_EXISTS = "USER_ALREADY_EXISTS"

    # 5xx
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


class ErrorDetail(BaseModel):
    """
    Problem Details (RFC 7807) + `code` estable + `errors[]` opcional
    (ej: [{"field": "status", "allowed": [...]}]).
    """

    type: str = "about:blank"
    title: str
    status: int
    detail: str
    code: ErrorCode
    instance: str | None = None
    errors: list[dict[str, Any]] | None = None


PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"

_DOCUMENTED_STATUSES = ("400", "401", "403", "404", "409", "default")

OPENAPI_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status: {
        "description": (
            "Error" if status == "default" else HTTPStatus(int(status)).phrase
        )
        + " (problem+json)",
        "model": ErrorDetail,
        "content": {
            PROBLEM_JSON_MEDIA_TYPE: {
                "schema": {"$ref": "#/components/schemas/ErrorDetail"}
            }
        },
    }
    for status in _DOCUMENTED_STATUSES
}


class AppHTTPException(HTTPException):
    """HTTPException con ErrorCode estable y errors[] opcional."""

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.code = code
        self.errors = errors


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------
def bad_request(
    detail: str,
    code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    errors: list[dict[str, Any]] | None = None,
) -> AppHTTPException:
    return AppHTTPException(HTTPStatus.BAD_REQUEST, code, detail, errors)


def not_found(
    resource: str, identifier: str, code: ErrorCode = ErrorCode.NOT_FOUND
) -> AppHTTPException:
    return AppHTTPException(
        HTTPStatus.NOT_FOUND, code, f"{resource} '{identifier}' not found"
    )


def conflict(detail: str, code: ErrorCode = ErrorCode.CONFLICT) -> AppHTTPException:
    return AppHTTPException(HTTPStatus.CONFLICT, code, detail)


def unauthorized(
    detail: str = "Authentication required",
    code: ErrorCode = ErrorCode.UNAUTHORIZED,
) -> AppHTTPException:
    return AppHTTPException(HTTPStatus.UNAUTHORIZED, code, detail)


def forbidden(
    detail: str = "Access denied", code: ErrorCode = ErrorCode.FORBIDDEN
) -> AppHTTPException:
    return AppHTTPException(HTTPStatus.FORBIDDEN, code, detail)


def internal_error(detail: str = "Internal server error") -> AppHTTPException:
    return AppHTTPException(
        HTTPStatus.INTERNAL_SERVER_ERROR, ErrorCode.INTERNAL_ERROR, detail
    )


def service_unavailable(service: str) -> AppHTTPException:
    return AppHTTPException(
        HTTPStatus.SERVICE_UNAVAILABLE,
        ErrorCode.SERVICE_UNAVAILABLE,
        f"Service temporarily unavailable: {service}",
    )


# ---------------------------------------------------------------------------
# Respuesta problem+json
# ---------------------------------------------------------------------------
def problem_response(
    request: Request,
    *,
    status: int,
    code: ErrorCode,
    detail: str,
    errors: list[dict[str, Any]] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """
    Arma el cuerpo RFC 7807 para `request`.

    El request_id (si el middleware lo asignó) se agrega como último
    elemento de errors[] para que el cliente pueda reportarlo.
    """
    items = list(errors or [])
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        items.append({"request_id": request_id})

    body = ErrorDetail(
        type=f"about:blank/{code.value.lower()}",
        title=HTTPStatus(status).phrase,
        status=status,
        detail=detail,
        code=code,
        instance=str(request.url),
        errors=items or None,
    )
    return JSONResponse(
        status_code=status,
        content=body.model_dump(mode="json", exclude_none=True),
        headers=headers,
        media_type=PROBLEM_JSON_MEDIA_TYPE,
    )


async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    return problem_response(
        request,
        status=int(exc.status_code),
        code=exc.code,
        detail=str(exc.detail),
        errors=exc.errors,
        headers=getattr(exc, "headers", None),
    )
