"""
===============================================================================
USE CASE: Update Thread (Partial state change)
===============================================================================

Name:
    Update Thread Use Case

Business Goal:
    Aplicar un cambio parcial de estado sobre un hilo de soporte (status,
    priority, folder, read, private_note, assigned_admin) y avisar a las
    vistas conectadas que el hilo cambió.

Why (Context / Intención):
    - Invariantes:
        * cada campo enumerado se valida contra su dominio
        * un solo valor inválido aborta TODO el patch (all-or-nothing)
        * la escritura es un único UPDATE (todos los campos + updated_at)
        * la notificación nunca hace fallar el request
    - Concurrencia: last-write-wins. El evento es una señal de re-fetch,
      no un log de cambios.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    UpdateThreadUseCase

Responsibilities:
    - Validar acceso (VIEW_ADMIN_RESOURCE) y thread_id.
    - Validar el patch completo antes de tocar el store.
    - Persistir en una sola escritura.
    - Publicar "thread_updated" (best-effort).
    - Devolver la misma vista joined que GetThread.

Collaborators:
    - ThreadRepository: update_thread / get_thread
    - ChangeNotifier: publish(event_name, payload)
    - thread_inputs: parse_thread_id, validate_thread_patch
===============================================================================
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Dict

from ....crosscutting.logger import logger
from ....domain.entities import MessageThread
from ....domain.repositories import ThreadRepository
from ....domain.services import EVENT_THREAD_UPDATED, ChangeNotifier
from ....identity.roles import Identity
from .thread_inputs import (
    ThreadPatch,
    check_admin_access,
    invalid_thread_id_error,
    parse_thread_id,
    validate_thread_patch,
)
from .thread_results import ThreadError, ThreadErrorCode, ThreadResult


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UpdateThreadUseCase:
    """
    Use Case (Application Service / Command):
        Cambio parcial validado + notificación de cambio.
    """

    def __init__(
        self,
        thread_repository: ThreadRepository,
        notifier: ChangeNotifier,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._threads = thread_repository
        self._notifier = notifier
        self._clock = clock

    def execute(
        self,
        thread_id: object,
        patch: ThreadPatch,
        actor: Identity | None,
    ) -> ThreadResult:
        # ---------------------------------------------------------------------
        # 1) Autorización.
        # ---------------------------------------------------------------------
        access_error = check_admin_access(actor)
        if access_error is not None:
            return ThreadResult(error=access_error)

        # ---------------------------------------------------------------------
        # 2) Id + patch (sin tocar el store).
        # ---------------------------------------------------------------------
        parsed_id = parse_thread_id(thread_id)
        if parsed_id is None:
            return ThreadResult(error=invalid_thread_id_error())

        changes, validation_error = validate_thread_patch(patch)
        if validation_error is not None:
            return ThreadResult(error=validation_error)

        # ---------------------------------------------------------------------
        # 3) Escritura única.
        # ---------------------------------------------------------------------
        updated_at = self._clock()
        if not self._threads.update_thread(parsed_id, changes, updated_at=updated_at):
            return self._not_found()

        # ---------------------------------------------------------------------
        # 4) Vista resultante.
        # ---------------------------------------------------------------------
        thread = self._threads.get_thread(parsed_id)
        if thread is None:
            # Borrado entre write y read.
            return self._not_found()

        logger.info(
            "Thread updated",
            extra={
                "thread_id": parsed_id,
                "fields": sorted(changes.supplied()),
                "actor_id": actor.id if actor else None,
            },
        )

        # ---------------------------------------------------------------------
        # 5) Notificación (best-effort).
        # ---------------------------------------------------------------------
        self._notify(thread)

        return ThreadResult(thread=thread)

    def _notify(self, thread: MessageThread) -> None:
        try:
            self._notifier.publish(EVENT_THREAD_UPDATED, self._event_payload(thread))
        except Exception as exc:
            logger.warning(
                "Thread change notification failed",
                extra={"thread_id": thread.id, "error": str(exc)},
            )

    @staticmethod
    def _event_payload(thread: MessageThread) -> Dict[str, Any]:
        return {
            "thread_id": thread.id,
            "updates": {
                "status": thread.status.value,
                "priority": thread.priority.value,
                "read": thread.read,
                "folder": thread.folder.value,
                "private_note": thread.private_note,
                "assigned_admin": thread.assigned_admin,
                "updated_at": thread.updated_at,
            },
        }

    @staticmethod
    def _not_found() -> ThreadResult:
        return ThreadResult(
            error=ThreadError(code=ThreadErrorCode.NOT_FOUND, message="Thread not found.")
        )
