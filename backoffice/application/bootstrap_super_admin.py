"""
===============================================================================
TASK: Bootstrap Super Admin
===============================================================================

Qué es:
    Asegura que exista la cuenta SUPER_ADMIN configurada por entorno: es la
    única cuenta que puede entrar en un despliegue vacío y crear las demás.

Patrones:
    - Task orchestration (seed)
    - Dependency Injection (repo + hasher + verifier + clock)
    - Idempotencia (ensure-create / repair)

CRC:
    Component: ensure_super_admin
    Responsibilities:
      - No-op si email/password no están configurados
      - Crear la cuenta si falta
      - Reparar rol / flags / password si la cuenta existe pero divergió
    Collaborators:
      - account_repo (AccountRepository)
      - password_hasher / password_verifier (identity.passwords)
      - Settings
===============================================================================
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Final
from uuid import uuid4

from ..crosscutting.config import Settings
from ..crosscutting.logger import logger
from ..domain.entities import Account
from ..domain.repositories import AccountRepository
from ..domain.value_objects import Role

# Todas las páginas del panel.
SUPER_ADMIN_PAGES: Final[tuple[str, ...]] = (
    "/",
    "/orders",
    "/products",
    "/listings",
    "/message",
    "/discounts",
    "/content",
    "/dynamic-pages",
    "/customers",
    "/reviews",
    "/analytics",
    "/blogs",
    "/pages",
    "/support",
    "/profile",
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_super_admin(
    settings: Settings,
    *,
    account_repo: AccountRepository,
    password_hasher: Callable[[str], str],
    password_verifier: Callable[[str, str], bool],
    clock: Callable[[], datetime] = _utcnow,
) -> Account | None:
    """
    Ensure the configured super admin exists.

    Behavior:
      - Disabled (missing email or password): no-op, returns None
      - Missing: create with SUPER_ADMIN role, can_manage_users, all pages
      - Present: restore role/flags/pages; re-hash only if the password
        no longer verifies
    """
    email = (settings.super_admin_email or "").strip().lower()
    password = settings.super_admin_password or ""
    if not email or not password:
        logger.info("Super admin bootstrap: not configured; skipping")
        return None

    now = clock()
    existing = account_repo.get_account_by_email(email)

    if existing is None:
        created = account_repo.create_account(
            Account(
                id=str(uuid4()),
                name=settings.super_admin_name,
                email=email,
                password_hash=password_hasher(password),
                role=Role.SUPER_ADMIN,
                is_active=True,
                allowed_pages=list(SUPER_ADMIN_PAGES),
                can_manage_users=True,
                created_at=now,
                updated_at=now,
            )
        )
        logger.info("Super admin bootstrap: account created", extra={"account_id": created.id})
        return created

    needs_password = not password_verifier(password, existing.password_hash)
    needs_repair = (
        existing.role != Role.SUPER_ADMIN
        or not existing.is_active
        or not existing.can_manage_users
        or set(existing.allowed_pages) != set(SUPER_ADMIN_PAGES)
    )
    if not needs_password and not needs_repair:
        logger.info(
            "Super admin bootstrap: account up to date",
            extra={"account_id": existing.id},
        )
        return existing

    repaired = account_repo.update_account(
        existing.id,
        updated_at=now,
        role=Role.SUPER_ADMIN,
        is_active=True,
        can_manage_users=True,
        allowed_pages=list(SUPER_ADMIN_PAGES),
        password_hash=password_hasher(password) if needs_password else None,
    )
    logger.info(
        "Super admin bootstrap: account repaired",
        extra={"account_id": existing.id, "hash_reset": needs_password},
    )
    return repaired
