"""
===============================================================================
TARJETA CRC — backoffice/interfaces/api/http/routers/threads.py
===============================================================================

Class/Module:
    Threads Router

Responsibilities:
    - Exponer lectura, listado y cambio parcial de estado de hilos de soporte.
    - Convertir requests HTTP -> inputs de casos de uso.
    - Traducir ThreadError -> RFC7807.

Collaborators:
    - application.usecases.threads (Get/List/Update)
    - dependencies.require_admin_identity
    - container (factories DI)
    - schemas.threads (DTOs Pydantic)

Patterns:
    - Controller / Router
    - Adapter (HTTP -> UseCase)
    - Error Mapping
===============================================================================
"""

from __future__ import annotations

from backoffice.application.usecases.threads import (
    GetThreadUseCase,
    ListThreadsUseCase,
    UpdateThreadUseCase,
)
from backoffice.container import (
    get_get_thread_use_case,
    get_list_threads_use_case,
    get_update_thread_use_case,
)
from backoffice.crosscutting.error_responses import service_unavailable
from backoffice.identity.roles import Identity
from fastapi import APIRouter, Depends, Query

from ..dependencies import require_admin_identity
from ..error_mapping import raise_thread_error
from ..schemas.threads import (
    ThreadEnvelopeRes,
    ThreadListRes,
    UpdateThreadReq,
    to_thread_res,
)

router = APIRouter()


@router.get("/threads", response_model=ThreadListRes, tags=["threads"])
def list_threads(
    folder: str | None = Query(None),
    status: str | None = Query(None),
    priority: str | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    use_case: ListThreadsUseCase = Depends(get_list_threads_use_case),
    identity: Identity = Depends(require_admin_identity),
):
    result = use_case.execute(
        identity,
        folder=folder,
        status=status,
        priority=priority,
        limit=limit,
        offset=offset,
    )
    if result.error is not None:
        raise_thread_error(result.error)

    threads = result.threads or []
    next_offset = offset + limit if len(threads) == limit else None
    return ThreadListRes(
        threads=[to_thread_res(t) for t in threads],
        next_offset=next_offset,
    )


@router.get("/threads/{thread_id}", response_model=ThreadEnvelopeRes, tags=["threads"])
def get_thread(
    thread_id: str,
    use_case: GetThreadUseCase = Depends(get_get_thread_use_case),
    identity: Identity = Depends(require_admin_identity),
):
    result = use_case.execute(thread_id, identity)
    if result.error is not None:
        raise_thread_error(result.error, thread_id=thread_id)
    if result.thread is None:
        raise service_unavailable("Thread")

    return ThreadEnvelopeRes(thread=to_thread_res(result.thread))


@router.patch(
    "/threads/{thread_id}", response_model=ThreadEnvelopeRes, tags=["threads"]
)
def update_thread(
    thread_id: str,
    req: UpdateThreadReq,
    use_case: UpdateThreadUseCase = Depends(get_update_thread_use_case),
    identity: Identity = Depends(require_admin_identity),
):
    result = use_case.execute(thread_id, req.to_patch(), identity)
    if result.error is not None:
        raise_thread_error(result.error, thread_id=thread_id)
    if result.thread is None:
        raise service_unavailable("Thread")

    return ThreadEnvelopeRes(thread=to_thread_res(result.thread))
