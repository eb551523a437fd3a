"""
===============================================================================
TARJETA CRC — backoffice/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (repositorios, notifier, resolvers, casos de uso).
  - Exponer factories para FastAPI (Depends).
  - Mantener singletons con caching (lru_cache).
  - Centralizar decisiones runtime basadas en Settings (config).

Colaboradores:
  - backoffice.crosscutting.config.get_settings
  - backoffice.domain.repositories.* / domain.services.* (puertos)
  - backoffice.infrastructure.* (implementaciones)
  - backoffice.application.usecases.* (casos de uso)

Notas:
  - Este archivo NO contiene lógica de negocio.
  - Este archivo NO depende de FastAPI (solo expone factories).
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .application.usecases.accounts import (
    AuthenticateAccountUseCase,
    CreateAccountUseCase,
    DeleteAccountUseCase,
    ListAccountsUseCase,
    UpdateAccountUseCase,
)
from .application.usecases.threads import (
    GetThreadUseCase,
    ListThreadsUseCase,
    UpdateThreadUseCase,
)
from .crosscutting.config import get_settings
from .domain.repositories import AccountRepository, ThreadRepository
from .domain.services import ChangeNotifier
from .identity.credentials import (
    CredentialResolver,
    build_admin_resolver,
    build_staff_resolver,
)
from .identity.passwords import hash_password, verify_password
from .identity.tokens import get_auth_settings
from .infrastructure.notifier import (
    InMemoryChangeNotifier,
    NullChangeNotifier,
    RedisChangeNotifier,
    build_redis_client,
)
from .infrastructure.repositories import (
    InMemoryAccountRepository,
    InMemoryThreadRepository,
    PostgresAccountRepository,
    PostgresThreadRepository,
)

# =============================================================================
# Helpers internos
# =============================================================================


def _is_test_env() -> bool:
    """app_env ∈ {"test", "testing", "ci"} => in-memory adapters."""
    return get_settings().is_test()


# =============================================================================
# Repositorios (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_account_repository() -> AccountRepository:
    """Repositorio de cuentas (in-memory en test; Postgres en runtime)."""
    if _is_test_env():
        return InMemoryAccountRepository()
    return PostgresAccountRepository()


@lru_cache(maxsize=1)
def get_thread_repository() -> ThreadRepository:
    """Repositorio de hilos (in-memory en test; Postgres en runtime)."""
    if _is_test_env():
        return InMemoryThreadRepository()
    return PostgresThreadRepository()


# =============================================================================
# Notifier
# =============================================================================


@lru_cache(maxsize=1)
def get_change_notifier() -> ChangeNotifier:
    """
    Canal de cambios en vivo.

    - test: in-memory (inspeccionable)
    - redis_url configurada: Redis PUBLISH
    - sin canal: no-op
    """
    settings = get_settings()
    if _is_test_env():
        return InMemoryChangeNotifier()
    if not settings.redis_url.strip():
        return NullChangeNotifier()

    redis_conn = build_redis_client(
        settings.redis_url, timeout_ms=settings.notifier_timeout_ms
    )
    return RedisChangeNotifier(redis_conn, channel=settings.notifier_channel)


# =============================================================================
# Credential resolvers
# =============================================================================


@lru_cache(maxsize=1)
def get_admin_credential_resolver() -> CredentialResolver:
    """Sesión ADMIN/SUPER_ADMIN o bearer admin (hilos)."""
    return build_admin_resolver(get_auth_settings())


@lru_cache(maxsize=1)
def get_staff_credential_resolver() -> CredentialResolver:
    """Sesión de cualquier rol o bearer admin (cuentas, /auth/me)."""
    return build_staff_resolver(get_auth_settings())


# =============================================================================
# Casos de uso: hilos
# =============================================================================


def get_get_thread_use_case() -> GetThreadUseCase:
    return GetThreadUseCase(thread_repository=get_thread_repository())


def get_list_threads_use_case() -> ListThreadsUseCase:
    return ListThreadsUseCase(thread_repository=get_thread_repository())


def get_update_thread_use_case() -> UpdateThreadUseCase:
    return UpdateThreadUseCase(
        thread_repository=get_thread_repository(),
        notifier=get_change_notifier(),
    )


# =============================================================================
# Casos de uso: cuentas
# =============================================================================


def get_list_accounts_use_case() -> ListAccountsUseCase:
    return ListAccountsUseCase(account_repository=get_account_repository())


def get_create_account_use_case() -> CreateAccountUseCase:
    return CreateAccountUseCase(
        account_repository=get_account_repository(),
        password_hasher=hash_password,
    )


def get_update_account_use_case() -> UpdateAccountUseCase:
    return UpdateAccountUseCase(account_repository=get_account_repository())


def get_delete_account_use_case() -> DeleteAccountUseCase:
    return DeleteAccountUseCase(account_repository=get_account_repository())


def get_authenticate_account_use_case() -> AuthenticateAccountUseCase:
    return AuthenticateAccountUseCase(
        account_repository=get_account_repository(),
        password_verifier=verify_password,
        session_ttl_minutes=get_settings().session_ttl_minutes,
    )
