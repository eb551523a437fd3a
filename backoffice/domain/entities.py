"""
===============================================================================
TARJETA CRC — domain/entities.py
===============================================================================

Módulo:
    Entidades del Dominio (Account, MessageThread, Label, Message, Attachment)

Responsabilidades:
    - Definir estructuras centrales del back-office (sin infraestructura).
    - Brindar helpers mínimos para mantener invariantes simples.
    - Definir ThreadChanges: el patch ya validado que persisten los repositorios.

Colaboradores:
    - domain.repositories: persisten/recuperan estas entidades.
    - application/usecases: construyen/consumen estas entidades.
    - interfaces/api: serializan DTOs basados en estas entidades.

Principios:
    - Sin dependencias a DB/Redis/FastAPI.
    - password_hash nunca sale de la capa de aplicación hacia HTTP.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, Final, Optional

from .value_objects import Role, ThreadFolder, ThreadPriority, ThreadStatus


def _utcnow() -> datetime:
    """Fecha/hora UTC (helper interno)."""
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Account
# ---------------------------------------------------------------------------


@dataclass
class Account:
    """
    Cuenta de staff del back-office.

    Invariantes:
      - email se persiste normalizado (trim + lower) y es único.
      - role siempre pertenece a Role.
    """

    id: str
    name: str
    email: str
    password_hash: str
    role: Role = Role.ADMIN
    is_active: bool = True
    permissions: list[str] = field(default_factory=list)
    allowed_pages: list[str] = field(default_factory=list)
    can_manage_users: bool = False
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    @property
    def is_super_admin(self) -> bool:
        return self.role == Role.SUPER_ADMIN


@dataclass(frozen=True, slots=True)
class AccountSummary:
    """Proyección de listado: cuenta + cantidad de sesiones registradas."""

    account: Account
    session_count: int = 0


# ---------------------------------------------------------------------------
# Message threads
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Label:
    id: int
    name: str
    color: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Attachment:
    id: int
    file_name: str
    url: str
    mime_type: Optional[str] = None
    size_bytes: Optional[int] = None


@dataclass
class Message:
    """Mensaje dentro de un hilo (cliente o staff)."""

    id: int
    content: str
    author_role: str
    author_name: Optional[str] = None
    created_at: Optional[datetime] = None
    attachments: list[Attachment] = field(default_factory=list)


@dataclass
class MessageThread:
    """
    Hilo de soporte con estado administrable.

    Notas:
      - conversation va del mensaje más viejo al más nuevo.
      - latest_message solo se completa en listados (preview).
    """

    id: int
    subject: str
    sender_name: str
    sender_email: str
    status: ThreadStatus = ThreadStatus.OPEN
    priority: ThreadPriority = ThreadPriority.MEDIUM
    folder: ThreadFolder = ThreadFolder.INBOX
    read: bool = False
    private_note: Optional[str] = None
    assigned_admin: Optional[str] = None
    labels: list[Label] = field(default_factory=list)
    conversation: list[Message] = field(default_factory=list)
    latest_message: Optional[Message] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Partial update (patch validado)
# ---------------------------------------------------------------------------


class _Unset:
    """Marca un campo no provisto (distinto de None explícito)."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final[Any] = _Unset()


@dataclass(frozen=True)
class ThreadChanges:
    """
    Cambios ya validados sobre un hilo.

    - UNSET: el campo no se toca.
    - None en private_note / assigned_admin: se limpia el valor.
    """

    status: ThreadStatus | Any = UNSET
    priority: ThreadPriority | Any = UNSET
    folder: ThreadFolder | Any = UNSET
    read: bool | Any = UNSET
    private_note: Optional[str] | Any = UNSET
    assigned_admin: Optional[str] | Any = UNSET

    def supplied(self) -> dict[str, Any]:
        """Solo los campos provistos, en orden de declaración."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }

    def apply_to(self, thread: MessageThread, *, updated_at: datetime) -> None:
        """Aplica los cambios in-place (usado por el adapter in-memory)."""
        for name, value in self.supplied().items():
            setattr(thread, name, value)
        thread.updated_at = updated_at
