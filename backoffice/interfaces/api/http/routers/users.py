"""
===============================================================================
TARJETA CRC — backoffice/interfaces/api/http/routers/users.py
===============================================================================

Class/Module:
    Users Router (gestión de cuentas de staff)

Responsibilities:
    - GET/POST/PUT/DELETE /users.
    - Convertir requests HTTP -> inputs de casos de uso.
    - Traducir AccountError -> RFC7807.

Collaborators:
    - application.usecases.accounts (List/Create/Update/Delete)
    - dependencies.require_user_manager (401/403 antes de validar el body)
    - schemas.users (DTOs Pydantic)
===============================================================================
"""

from __future__ import annotations

from backoffice.application.usecases.accounts import (
    CreateAccountUseCase,
    DeleteAccountUseCase,
    ListAccountsUseCase,
    UpdateAccountUseCase,
)
from backoffice.container import (
    get_create_account_use_case,
    get_delete_account_use_case,
    get_list_accounts_use_case,
    get_update_account_use_case,
)
from backoffice.crosscutting.error_responses import service_unavailable
from backoffice.identity.roles import Identity
from fastapi import APIRouter, Depends, Query

from ..dependencies import require_user_manager
from ..error_mapping import raise_account_error
from ..schemas.users import (
    CreateUserReq,
    DeleteUserRes,
    UpdateUserReq,
    UserEnvelopeRes,
    UsersListRes,
    summary_to_user_res,
    to_user_res,
)

router = APIRouter()


@router.get("/users", response_model=UsersListRes, tags=["users"])
def list_users(
    use_case: ListAccountsUseCase = Depends(get_list_accounts_use_case),
    identity: Identity = Depends(require_user_manager),
):
    result = use_case.execute(identity)
    if result.error is not None:
        raise_account_error(result.error)

    users = [summary_to_user_res(s) for s in result.accounts]
    return UsersListRes(users=users, total_count=len(users))


@router.post(
    "/users", response_model=UserEnvelopeRes, status_code=201, tags=["users"]
)
def create_user(
    req: CreateUserReq,
    use_case: CreateAccountUseCase = Depends(get_create_account_use_case),
    identity: Identity = Depends(require_user_manager),
):
    result = use_case.execute(req.to_input(), identity)
    if result.error is not None:
        raise_account_error(result.error)
    if result.account is None:
        raise service_unavailable("User")

    return UserEnvelopeRes(user=to_user_res(result.account))


@router.put("/users", response_model=UserEnvelopeRes, tags=["users"])
def update_user(
    req: UpdateUserReq,
    use_case: UpdateAccountUseCase = Depends(get_update_account_use_case),
    identity: Identity = Depends(require_user_manager),
):
    result = use_case.execute(req.to_input(), identity)
    if result.error is not None:
        raise_account_error(result.error, user_id=req.user_id)
    if result.account is None:
        raise service_unavailable("User")

    return UserEnvelopeRes(user=to_user_res(result.account))


@router.delete("/users", response_model=DeleteUserRes, tags=["users"])
def delete_user(
    user_id: str | None = Query(None, alias="id"),
    use_case: DeleteAccountUseCase = Depends(get_delete_account_use_case),
    identity: Identity = Depends(require_user_manager),
):
    result = use_case.execute(user_id, identity)
    if result.error is not None:
        raise_account_error(result.error, user_id=user_id)

    return DeleteUserRes(
        message="User deleted successfully",
        deleted_user=result.deleted_email or "",
    )
