"""
===============================================================================
USE CASE: List Threads (Admin inbox)
===============================================================================

Business Goal:
    Listar hilos para la bandeja de administración, filtrando por folder /
    status / priority, del más recientemente actualizado al más viejo.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    ListThreadsUseCase

Responsibilities:
    - Validar acceso y filtros (mismos dominios que el patch).
    - Acotar paginación (limit 1..MAX_LIMIT, offset >= 0).

Collaborators:
    - ThreadRepository.list_threads
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Final, Optional

from ....domain.repositories import ThreadRepository
from ....domain.value_objects import (
    ThreadFolder,
    ThreadPriority,
    ThreadStatus,
    allowed_values,
    parse_enum,
)
from ....identity.roles import Identity
from .thread_inputs import check_admin_access
from .thread_results import ThreadError, ThreadErrorCode, ThreadListResult

DEFAULT_LIMIT: Final[int] = 50
MAX_LIMIT: Final[int] = 200


class ListThreadsUseCase:
    def __init__(self, thread_repository: ThreadRepository) -> None:
        self._threads = thread_repository

    def execute(
        self,
        actor: Identity | None,
        *,
        folder: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
    ) -> ThreadListResult:
        access_error = check_admin_access(actor)
        if access_error is not None:
            return ThreadListResult(error=access_error)

        parsed = {}
        for name, raw, enum_cls, code in (
            ("folder", folder, ThreadFolder, ThreadErrorCode.INVALID_FOLDER),
            ("status", status, ThreadStatus, ThreadErrorCode.INVALID_STATUS),
            ("priority", priority, ThreadPriority, ThreadErrorCode.INVALID_PRIORITY),
        ):
            if raw is None:
                parsed[name] = None
                continue
            member = parse_enum(enum_cls, raw)
            if member is None:
                return ThreadListResult(error=self._invalid_filter(name, enum_cls, code))
            parsed[name] = member

        if limit < 1 or offset < 0:
            return ThreadListResult(
                error=ThreadError(
                    code=ThreadErrorCode.VALIDATION_ERROR,
                    message="limit must be >= 1 and offset >= 0",
                )
            )

        threads = self._threads.list_threads(
            folder=parsed["folder"],
            status=parsed["status"],
            priority=parsed["priority"],
            limit=min(limit, MAX_LIMIT),
            offset=offset,
        )
        return ThreadListResult(threads=threads)

    @staticmethod
    def _invalid_filter(
        name: str, enum_cls: type[Enum], code: ThreadErrorCode
    ) -> ThreadError:
        allowed = allowed_values(enum_cls)
        return ThreadError(
            code=code,
            message=f"Invalid {name}. Must be one of: {', '.join(allowed)}",
            field=name,
            allowed=allowed,
        )
