from .account_results import (
    AccountError,
    AccountErrorCode,
    AccountListResult,
    AccountResult,
    DeleteAccountResult,
)
from .authenticate_account import AuthenticateAccountUseCase
from .create_account import CreateAccountInput, CreateAccountUseCase
from .delete_account import DeleteAccountUseCase
from .list_accounts import ListAccountsUseCase
from .update_account import UpdateAccountInput, UpdateAccountUseCase

__all__ = [
    "AccountError",
    "AccountErrorCode",
    "AccountListResult",
    "AccountResult",
    "AuthenticateAccountUseCase",
    "CreateAccountInput",
    "CreateAccountUseCase",
    "DeleteAccountResult",
    "DeleteAccountUseCase",
    "ListAccountsUseCase",
    "UpdateAccountInput",
    "UpdateAccountUseCase",
]
