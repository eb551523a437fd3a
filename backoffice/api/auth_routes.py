"""
===============================================================================
TARJETA CRC — backoffice/api/auth_routes.py (Autenticación de staff)
===============================================================================

Responsabilidades:
  - Exponer login / logout / me.
  - Emitir el token de API (type=admin) y la cookie de sesión (type=session).
  - Gestionar la cookie httpOnly de forma consistente.

Patrones aplicados:
  - Adapter / Presentation Layer: traduce HTTP <-> caso de uso.
  - Fail-safe security: si la autenticación falla, se deniega por defecto.

Colaboradores:
  - application.usecases.accounts.AuthenticateAccountUseCase
  - identity.tokens: create_admin_token, create_session_token, get_auth_settings
  - interfaces.api.http.dependencies.require_staff_identity
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field, field_validator

from ..application.usecases.accounts import AuthenticateAccountUseCase
from ..container import get_authenticate_account_use_case
from ..crosscutting.error_responses import OPENAPI_ERROR_RESPONSES, service_unavailable
from ..domain.value_objects import Role
from ..identity.roles import Identity
from ..identity.tokens import (
    DEFAULT_SESSION_COOKIE,
    create_admin_token,
    create_session_token,
    get_auth_settings,
)
from ..interfaces.api.http.dependencies import require_staff_identity
from ..interfaces.api.http.error_mapping import raise_account_error
from ..interfaces.api.http.schemas.users import UserRes, to_user_res

router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)


# -----------------------------------------------------------------------------
# Modelos HTTP (DTOs)
# -----------------------------------------------------------------------------


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=512)

    @field_validator("email")
    @classmethod
    def normalizar_email(cls, v: str) -> str:
        return v.strip().lower()


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserRes


class IdentityResponse(BaseModel):
    id: str
    email: str
    role: Role
    can_manage_users: bool
    source: str


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------


def _cookie_name() -> str:
    return (get_auth_settings().session_cookie_name or "").strip() or DEFAULT_SESSION_COOKIE


def _set_session_cookie(response: Response, token: str, expires_in: int) -> None:
    """Setea la cookie httpOnly de sesión."""
    settings = get_auth_settings()
    response.set_cookie(
        key=_cookie_name(),
        value=token,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        max_age=expires_in,
        path="/",
    )


def _clear_session_cookie(response: Response) -> None:
    settings = get_auth_settings()
    response.delete_cookie(
        key=_cookie_name(),
        path="/",
        samesite="lax",
        secure=settings.session_cookie_secure,
    )


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------


@router.post("/auth/login", response_model=LoginResponse, tags=["auth"])
def login(
    req: LoginRequest,
    response: Response,
    use_case: AuthenticateAccountUseCase = Depends(get_authenticate_account_use_case),
):
    """
    Inicia sesión.

    - Devuelve el token de API (Authorization: Bearer).
    - Setea la cookie httpOnly de sesión.
    """
    result = use_case.execute(req.email, req.password)
    if result.error is not None:
        raise_account_error(result.error)
    if result.account is None:
        raise service_unavailable("Auth")

    access_token, expires_in = create_admin_token(result.account)
    session_token, session_expires_in = create_session_token(result.account)
    _set_session_cookie(response, session_token, session_expires_in)

    return LoginResponse(
        access_token=access_token,
        expires_in=expires_in,
        user=to_user_res(result.account),
    )


@router.post("/auth/logout", tags=["auth"])
def logout(response: Response):
    """
    Cierra sesión.

    - No requiere autenticación: es idempotente.
    """
    _clear_session_cookie(response)
    return {"ok": True}


@router.get("/auth/me", response_model=IdentityResponse, tags=["auth"])
def me(identity: Identity = Depends(require_staff_identity)):
    """Devuelve la identidad resuelta (cookie de sesión o bearer)."""
    return IdentityResponse(
        id=identity.id,
        email=identity.email,
        role=identity.role,
        can_manage_users=identity.can_manage_users,
        source=identity.source.value,
    )


__all__ = ["router"]
