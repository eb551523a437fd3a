"""
===============================================================================
TARJETA CRC — schemas/users.py
===============================================================================

Módulo:
    Schemas HTTP para gestión de cuentas de staff

Responsabilidades:
    - DTOs de alta / modificación (camelCase o snake_case).
    - DTOs de respuesta SIN password_hash.

Colaboradores:
    - application.usecases.accounts (CreateAccountInput / UpdateAccountInput)
    - domain.entities.Account / AccountSummary

Notas:
    - role llega como texto libre: INVALID_ROLE lo decide el caso de uso.
    - name/email/password opcionales acá: MISSING_REQUIRED_FIELDS también.
===============================================================================
"""

from __future__ import annotations

from datetime import datetime

from backoffice.application.usecases.accounts import (
    CreateAccountInput,
    UpdateAccountInput,
)
from backoffice.domain.entities import Account, AccountSummary
from backoffice.domain.value_objects import Role
from pydantic import AliasChoices, BaseModel, ConfigDict, Field


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------
class CreateUserReq(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str | None = Field(default=None, max_length=200)
    email: str | None = Field(default=None, max_length=320)
    password: str | None = Field(default=None, max_length=512)
    role: str | None = None
    permissions: list[str] | None = None
    allowed_pages: list[str] | None = Field(
        default=None, validation_alias=AliasChoices("allowedPages", "allowed_pages")
    )

    def to_input(self) -> CreateAccountInput:
        return CreateAccountInput(
            name=self.name,
            email=self.email,
            password=self.password,
            role=self.role,
            permissions=self.permissions,
            allowed_pages=self.allowed_pages,
        )


class UpdateUserReq(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: str | None = Field(
        default=None, validation_alias=AliasChoices("userId", "user_id", "id")
    )
    role: str | None = None
    is_active: bool | None = Field(
        default=None, validation_alias=AliasChoices("isActive", "is_active")
    )
    permissions: list[str] | None = None
    allowed_pages: list[str] | None = Field(
        default=None, validation_alias=AliasChoices("allowedPages", "allowed_pages")
    )

    def to_input(self) -> UpdateAccountInput:
        return UpdateAccountInput(
            user_id=self.user_id,
            role=self.role,
            is_active=self.is_active,
            permissions=self.permissions,
            allowed_pages=self.allowed_pages,
        )


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------
class UserRes(BaseModel):
    """Proyección pública de una cuenta (nunca incluye el hash)."""

    id: str
    name: str
    email: str
    role: Role
    is_active: bool
    permissions: list[str] = Field(default_factory=list)
    allowed_pages: list[str] = Field(default_factory=list)
    can_manage_users: bool = False
    created_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    last_login_at: datetime | None = None
    session_count: int | None = None


class UsersListRes(BaseModel):
    success: bool = True
    users: list[UserRes]
    total_count: int


class UserEnvelopeRes(BaseModel):
    success: bool = True
    user: UserRes


class DeleteUserRes(BaseModel):
    success: bool = True
    message: str
    deleted_user: str


def to_user_res(account: Account, *, session_count: int | None = None) -> UserRes:
    return UserRes(
        id=account.id,
        name=account.name,
        email=account.email,
        role=account.role,
        is_active=account.is_active,
        permissions=list(account.permissions),
        allowed_pages=list(account.allowed_pages),
        can_manage_users=account.can_manage_users,
        created_by=account.created_by,
        created_at=account.created_at,
        updated_at=account.updated_at,
        last_login_at=account.last_login_at,
        session_count=session_count,
    )


def summary_to_user_res(summary: AccountSummary) -> UserRes:
    return to_user_res(summary.account, session_count=summary.session_count)
