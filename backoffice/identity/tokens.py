"""
===============================================================================
TARJETA CRC — identity/tokens.py
===============================================================================

Módulo:
    Tokens JWT (admin API token + cookie de sesión)

Responsabilidades:
    - Emitir JWT firmados (HS256, secreto compartido) con expiración.
    - Decodificar y validar firma + exp sin lanzar errores HTTP (el resolver
      decide qué significa un token inválido).
    - Extraer token desde `Authorization: Bearer <token>`.

Colaboradores:
    - crosscutting.config.get_settings: secreto, TTLs y nombre de cookie.
    - identity/credentials.py: consume decode_token().
    - api/auth_routes.py: emite tokens en login.

Decisiones de diseño:
    - Claims: id, email, role, type, canManageUsers, iat, exp.
    - type="admin" para tokens de API; type="session" para la cookie.
    - No loguear secretos ni tokens; solo info mínima y segura.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..domain.entities import Account
from ..domain.value_objects import Role
from .roles import parse_role

# ---------------------------------------------------------------------------
# Constantes (evitan strings mágicos)
# ---------------------------------------------------------------------------

JWT_ALGORITHM: str = "HS256"

DEFAULT_SESSION_COOKIE: str = "backoffice_session"

CLAIM_ID: str = "id"
CLAIM_EMAIL: str = "email"
CLAIM_ROLE: str = "role"
CLAIM_TYPE: str = "type"
CLAIM_CAN_MANAGE_USERS: str = "canManageUsers"
CLAIM_IAT: str = "iat"
CLAIM_EXP: str = "exp"

TOKEN_TYPE_ADMIN: str = "admin"
TOKEN_TYPE_SESSION: str = "session"


# ---------------------------------------------------------------------------
# Contratos internos
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AuthSettings:
    """Settings de auth (snapshot)."""

    jwt_secret: str
    jwt_access_ttl_minutes: int
    session_cookie_name: str
    session_cookie_secure: bool
    session_ttl_minutes: int


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """
    Claims de un token con firma y exp válidas.

    role es None si el claim no pertenece al dominio Role.
    """

    user_id: str | None
    email: str | None
    role: Role | None
    token_type: str | None
    can_manage_users: bool


def get_auth_settings() -> AuthSettings:
    """Construye un snapshot de settings de auth."""
    s = get_settings()
    return AuthSettings(
        jwt_secret=s.jwt_secret,
        jwt_access_ttl_minutes=s.jwt_access_ttl_minutes,
        session_cookie_name=s.session_cookie_name,
        session_cookie_secure=s.session_cookie_secure,
        session_ttl_minutes=s.session_ttl_minutes,
    )


# ---------------------------------------------------------------------------
# Emitir
# ---------------------------------------------------------------------------


def _encode(
    account: Account, *, token_type: str, ttl_minutes: int, secret: str
) -> tuple[str, int]:
    now = datetime.now(timezone.utc)
    expires_in = int(ttl_minutes * 60)

    payload: dict[str, object] = {
        CLAIM_ID: account.id,
        CLAIM_EMAIL: account.email,
        CLAIM_ROLE: account.role.value,
        CLAIM_TYPE: token_type,
        CLAIM_CAN_MANAGE_USERS: bool(account.can_manage_users),
        CLAIM_IAT: int(now.timestamp()),
        CLAIM_EXP: int((now + timedelta(seconds=expires_in)).timestamp()),
    }
    token = jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)
    return token, expires_in


def create_admin_token(
    account: Account, settings: AuthSettings | None = None
) -> tuple[str, int]:
    """Crea el JWT de API (type=admin).

    Retorna:
        (token, expires_in_seconds)
    """
    auth_settings = settings or get_auth_settings()
    return _encode(
        account,
        token_type=TOKEN_TYPE_ADMIN,
        ttl_minutes=auth_settings.jwt_access_ttl_minutes,
        secret=auth_settings.jwt_secret,
    )


def create_session_token(
    account: Account, settings: AuthSettings | None = None
) -> tuple[str, int]:
    """Crea el JWT que viaja en la cookie de sesión (type=session)."""
    auth_settings = settings or get_auth_settings()
    return _encode(
        account,
        token_type=TOKEN_TYPE_SESSION,
        ttl_minutes=auth_settings.session_ttl_minutes,
        secret=auth_settings.jwt_secret,
    )


# ---------------------------------------------------------------------------
# Decodificar
# ---------------------------------------------------------------------------


def decode_token(token: str, settings: AuthSettings | None = None) -> TokenClaims | None:
    """Decodifica un JWT verificando firma y exp.

    Retorna None si la firma es inválida, expiró o el token está malformado.
    """
    auth_settings = settings or get_auth_settings()

    try:
        payload = jwt.decode(
            token,
            auth_settings.jwt_secret,
            algorithms=[JWT_ALGORITHM],
            options={"require": [CLAIM_EXP]},
        )
    except jwt.ExpiredSignatureError:
        logger.info("Token expirado")
        return None
    except jwt.InvalidTokenError:
        logger.info("Token inválido")
        return None

    user_id = payload.get(CLAIM_ID)
    email = payload.get(CLAIM_EMAIL)
    token_type = payload.get(CLAIM_TYPE)

    return TokenClaims(
        user_id=str(user_id) if user_id else None,
        email=str(email) if email else None,
        role=parse_role(payload.get(CLAIM_ROLE)),
        token_type=str(token_type) if token_type is not None else None,
        # R: Solo un booleano real habilita la capacidad.
        can_manage_users=payload.get(CLAIM_CAN_MANAGE_USERS) is True,
    )


# ---------------------------------------------------------------------------
# Extracción de token (header)
# ---------------------------------------------------------------------------


def extract_bearer_token(authorization: str | None) -> str | None:
    """Extrae token desde `Authorization: Bearer <token>`."""
    if not authorization:
        return None
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None
