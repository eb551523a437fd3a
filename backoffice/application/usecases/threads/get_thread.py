"""
===============================================================================
USE CASE: Get Thread
===============================================================================

Business Goal:
    Devolver un hilo de soporte con sus labels y la conversación completa
    (más viejo primero, con adjuntos) para el panel de administración.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    GetThreadUseCase

Responsibilities:
    - Validar acceso (VIEW_ADMIN_RESOURCE).
    - Parsear thread_id.
    - Cargar la vista joined o devolver NOT_FOUND.

Collaborators:
    - ThreadRepository.get_thread
    - thread_inputs: parse_thread_id, check_admin_access
===============================================================================
"""

from __future__ import annotations

from ....domain.repositories import ThreadRepository
from ....identity.roles import Identity
from .thread_inputs import check_admin_access, invalid_thread_id_error, parse_thread_id
from .thread_results import ThreadError, ThreadErrorCode, ThreadResult


class GetThreadUseCase:
    def __init__(self, thread_repository: ThreadRepository) -> None:
        self._threads = thread_repository

    def execute(self, thread_id: object, actor: Identity | None) -> ThreadResult:
        access_error = check_admin_access(actor)
        if access_error is not None:
            return ThreadResult(error=access_error)

        parsed_id = parse_thread_id(thread_id)
        if parsed_id is None:
            return ThreadResult(error=invalid_thread_id_error())

        thread = self._threads.get_thread(parsed_id)
        if thread is None:
            return ThreadResult(
                error=ThreadError(
                    code=ThreadErrorCode.NOT_FOUND, message="Thread not found."
                )
            )

        return ThreadResult(thread=thread)
