"""
===============================================================================
TARJETA CRC — schemas/threads.py
===============================================================================

Módulo:
    Schemas HTTP para hilos de soporte

Responsabilidades:
    - DTO de PATCH que preserva "campo ausente" vs "null explícito".
    - DTOs de respuesta (hilo + labels + conversación + adjuntos).

Colaboradores:
    - application.usecases.threads.ThreadPatch
    - domain.entities (MessageThread, Message, Label, Attachment)

Notas:
    - El PATCH acepta cualquier tipo en cada campo: la validación de dominio
      vive en el caso de uso (códigos INVALID_STATUS, etc.), no en pydantic.
    - Claves desconocidas se ignoran.
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from backoffice.application.usecases.threads import ThreadPatch
from backoffice.domain.entities import Attachment, Label, Message, MessageThread
from backoffice.domain.value_objects import ThreadFolder, ThreadPriority, ThreadStatus
from pydantic import AliasChoices, BaseModel, ConfigDict, Field


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------
class UpdateThreadReq(BaseModel):
    """PATCH parcial. Acepta camelCase (privateNote / assignedAdmin) y snake_case."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    status: Any = None
    priority: Any = None
    folder: Any = None
    read: Any = None
    private_note: Any = Field(
        default=None, validation_alias=AliasChoices("privateNote", "private_note")
    )
    assigned_admin: Any = Field(
        default=None,
        validation_alias=AliasChoices("assignedAdmin", "assigned_admin"),
    )

    def to_patch(self) -> ThreadPatch:
        """Solo los campos presentes en el body llegan al patch."""
        return ThreadPatch(
            **{name: getattr(self, name) for name in self.model_fields_set}
        )


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------
class AttachmentRes(BaseModel):
    id: int
    file_name: str
    url: str
    mime_type: str | None = None
    size_bytes: int | None = None


class MessageRes(BaseModel):
    id: int
    content: str
    author_role: str
    author_name: str | None = None
    created_at: datetime | None = None
    attachments: list[AttachmentRes] = Field(default_factory=list)


class LabelRes(BaseModel):
    id: int
    name: str
    color: str | None = None


class ThreadRes(BaseModel):
    """Hilo con su estado administrable."""

    id: int
    subject: str
    sender_name: str
    sender_email: str
    status: ThreadStatus
    priority: ThreadPriority
    folder: ThreadFolder
    read: bool
    private_note: str | None = None
    assigned_admin: str | None = None
    labels: list[LabelRes] = Field(default_factory=list)
    conversation: list[MessageRes] = Field(default_factory=list)
    latest_message: MessageRes | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ThreadEnvelopeRes(BaseModel):
    success: bool = True
    thread: ThreadRes


class ThreadListRes(BaseModel):
    success: bool = True
    threads: list[ThreadRes]
    next_offset: int | None = None


# -----------------------------------------------------------------------------
# Mappers (entidad -> DTO)
# -----------------------------------------------------------------------------
def _to_attachment_res(attachment: Attachment) -> AttachmentRes:
    return AttachmentRes(
        id=attachment.id,
        file_name=attachment.file_name,
        url=attachment.url,
        mime_type=attachment.mime_type,
        size_bytes=attachment.size_bytes,
    )


def _to_message_res(message: Message) -> MessageRes:
    return MessageRes(
        id=message.id,
        content=message.content,
        author_role=message.author_role,
        author_name=message.author_name,
        created_at=message.created_at,
        attachments=[_to_attachment_res(a) for a in message.attachments],
    )


def _to_label_res(label: Label) -> LabelRes:
    return LabelRes(id=label.id, name=label.name, color=label.color)


def to_thread_res(thread: MessageThread) -> ThreadRes:
    return ThreadRes(
        id=thread.id,
        subject=thread.subject,
        sender_name=thread.sender_name,
        sender_email=thread.sender_email,
        status=thread.status,
        priority=thread.priority,
        folder=thread.folder,
        read=thread.read,
        private_note=thread.private_note,
        assigned_admin=thread.assigned_admin,
        labels=[_to_label_res(label) for label in thread.labels],
        conversation=[_to_message_res(m) for m in thread.conversation],
        latest_message=(
            _to_message_res(thread.latest_message) if thread.latest_message else None
        ),
        created_at=thread.created_at,
        updated_at=thread.updated_at,
    )
