"""
===============================================================================
TARJETA CRC — identity/credentials.py
===============================================================================

Módulo:
    Credential Resolver (cookie de sesión + Bearer JWT)

Responsabilidades:
    - Evaluar una lista ordenada de estrategias de credenciales.
    - Cada estrategia devuelve un resultado tri-estado:
        AUTHENTICATED  -> identidad resuelta, se corta la evaluación
        REJECTED       -> credencial válida pero no admitida -> 403
        NOT_ATTEMPTED  -> no hay credencial usable -> se prueba la siguiente
    - Si ninguna estrategia autentica -> 401.

Colaboradores:
    - identity/tokens.py: decode_token, extract_bearer_token, AuthSettings.
    - identity/roles.py: Identity, CredentialSource.
    - crosscutting.error_responses: unauthorized/forbidden estándar.

Patrones:
    - Strategy (lista de caminos de auth, orden fijo).
    - Chain of Responsibility con corte en REJECTED.

Notas:
    - Read-only: no consulta el store ni escribe nada.
    - La cookie es tolerante (rol insuficiente -> NOT_ATTEMPTED); el bearer no
      (tipo o rol incorrecto -> REJECTED).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping, Protocol, Sequence

from ..crosscutting.error_responses import forbidden, unauthorized
from ..crosscutting.logger import logger
from ..domain.value_objects import ADMIN_ROLES, Role
from .roles import CredentialSource, Identity
from .tokens import (
    DEFAULT_SESSION_COOKIE,
    TOKEN_TYPE_ADMIN,
    TOKEN_TYPE_SESSION,
    AuthSettings,
    TokenClaims,
    decode_token,
    extract_bearer_token,
)

# ---------------------------------------------------------------------------
# Modelo de resolución
# ---------------------------------------------------------------------------


class ResolutionStatus(str, Enum):
    AUTHENTICATED = "authenticated"
    REJECTED = "rejected"
    NOT_ATTEMPTED = "not_attempted"


@dataclass(frozen=True, slots=True)
class ResolutionOutcome:
    status: ResolutionStatus
    identity: Identity | None = None
    reason: str = ""

    @classmethod
    def authenticated(cls, identity: Identity) -> "ResolutionOutcome":
        return cls(status=ResolutionStatus.AUTHENTICATED, identity=identity)

    @classmethod
    def rejected(cls, reason: str) -> "ResolutionOutcome":
        return cls(status=ResolutionStatus.REJECTED, reason=reason)

    @classmethod
    def not_attempted(cls, reason: str = "") -> "ResolutionOutcome":
        return cls(status=ResolutionStatus.NOT_ATTEMPTED, reason=reason)


@dataclass(frozen=True, slots=True)
class CredentialRequest:
    """Lo mínimo del request HTTP que necesitan las estrategias."""

    cookies: Mapping[str, str] = field(default_factory=dict)
    authorization: str | None = None


class CredentialStrategy(Protocol):
    name: str

    def resolve(self, request: CredentialRequest) -> ResolutionOutcome: ...


# ---------------------------------------------------------------------------
# Estrategias
# ---------------------------------------------------------------------------


def _identity_from_claims(
    claims: TokenClaims, source: CredentialSource
) -> Identity | None:
    if not claims.user_id or not claims.email or claims.role is None:
        return None
    return Identity(
        id=claims.user_id,
        email=claims.email,
        role=claims.role,
        can_manage_users=claims.can_manage_users,
        source=source,
    )


class SessionCookieStrategy:
    """
    Camino 1: cookie de sesión.

    Todo lo que no sea una sesión válida con rol admitido es NOT_ATTEMPTED.
    """

    name = "session"

    def __init__(self, settings: AuthSettings, admitted_roles: Iterable[Role]):
        self._settings = settings
        self._admitted = frozenset(admitted_roles)

    def resolve(self, request: CredentialRequest) -> ResolutionOutcome:
        cookie_name = (
            self._settings.session_cookie_name or ""
        ).strip() or DEFAULT_SESSION_COOKIE
        token = request.cookies.get(cookie_name)
        if not token:
            return ResolutionOutcome.not_attempted("no session cookie")

        claims = decode_token(token, self._settings)
        if claims is None:
            return ResolutionOutcome.not_attempted("undecodable session")
        if claims.token_type != TOKEN_TYPE_SESSION:
            return ResolutionOutcome.not_attempted("cookie token is not a session")

        identity = _identity_from_claims(claims, CredentialSource.SESSION)
        if identity is None:
            return ResolutionOutcome.not_attempted("incomplete session claims")

        if identity.role not in self._admitted:
            return ResolutionOutcome.not_attempted("session role not admitted")

        return ResolutionOutcome.authenticated(identity)


class BearerTokenStrategy:
    """
    Camino 2: `Authorization: Bearer <jwt>`.

    - Firma inválida / expirado -> NOT_ATTEMPTED (termina en 401).
    - type != "admin" o rol fuera de ADMIN_ROLES -> REJECTED (403).
    """

    name = "bearer"

    def __init__(self, settings: AuthSettings):
        self._settings = settings

    def resolve(self, request: CredentialRequest) -> ResolutionOutcome:
        token = extract_bearer_token(request.authorization)
        if not token:
            return ResolutionOutcome.not_attempted("no bearer token")

        claims = decode_token(token, self._settings)
        if claims is None:
            return ResolutionOutcome.not_attempted("invalid bearer token")

        if claims.token_type != TOKEN_TYPE_ADMIN:
            return ResolutionOutcome.rejected("token type is not admin")
        if claims.role not in ADMIN_ROLES:
            return ResolutionOutcome.rejected("token role is not admin")

        identity = _identity_from_claims(claims, CredentialSource.BEARER)
        if identity is None:
            return ResolutionOutcome.rejected("incomplete token claims")

        return ResolutionOutcome.authenticated(identity)


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class CredentialResolver:
    """Evalúa estrategias en orden y traduce el resultado a Identity / 401 / 403."""

    def __init__(self, strategies: Sequence[CredentialStrategy]):
        self._strategies = tuple(strategies)

    def evaluate(self, request: CredentialRequest) -> ResolutionOutcome:
        """Primer resultado terminal (AUTHENTICATED o REJECTED), o NOT_ATTEMPTED."""
        for strategy in self._strategies:
            outcome = strategy.resolve(request)
            if outcome.status != ResolutionStatus.NOT_ATTEMPTED:
                logger.debug(
                    "Credential strategy resolved",
                    extra={"strategy": strategy.name, "status": outcome.status.value},
                )
                return outcome
        return ResolutionOutcome.not_attempted("no credentials")

    def resolve(self, request: CredentialRequest) -> Identity:
        outcome = self.evaluate(request)

        if outcome.status == ResolutionStatus.AUTHENTICATED and outcome.identity:
            return outcome.identity

        if outcome.status == ResolutionStatus.REJECTED:
            logger.warning("Credencial rechazada", extra={"reason": outcome.reason})
            raise forbidden("Admin access required")

        raise unauthorized("Authentication required")


def build_admin_resolver(settings: AuthSettings) -> CredentialResolver:
    """Resolver para recursos admin: la sesión debe ser ADMIN o SUPER_ADMIN."""
    return CredentialResolver(
        [
            SessionCookieStrategy(settings, admitted_roles=ADMIN_ROLES),
            BearerTokenStrategy(settings),
        ]
    )


def build_staff_resolver(settings: AuthSettings) -> CredentialResolver:
    """
    Resolver para gestión de cuentas y /auth/me: cualquier rol desde la sesión.

    R: La capacidad manageUsers no depende del rango, la decide el Guard.
    """
    return CredentialResolver(
        [
            SessionCookieStrategy(settings, admitted_roles=tuple(Role)),
            BearerTokenStrategy(settings),
        ]
    )
