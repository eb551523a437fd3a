"""
===============================================================================
TARJETA CRC — backoffice/api/main.py (Aplicación FastAPI)
===============================================================================

Responsabilidades:
  - Armar la app: routers de hilos / usuarios / auth, handlers de errores,
    middleware de contexto y CORS.
  - Lifespan: logging, guardas de producción, pool de Postgres (fuera de
    test) y bootstrap del super admin.
  - /healthz: ping al store de hilos.

Colaboradores:
  - interfaces.api.http.router.build_router
  - application.bootstrap_super_admin.ensure_super_admin
  - infrastructure.db.pool

Notas:
  - APP_ENV=test no abre pool: el container entrega adapters in-memory.
  - Starlette ejecuta primero el último middleware agregado: CORS responde
    el preflight antes de que RequestContext asigne request_id.
===============================================================================
"""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..application.bootstrap_super_admin import ensure_super_admin
from ..container import get_account_repository, get_thread_repository
from ..crosscutting.config import get_settings
from ..crosscutting.logger import configure_logging, logger
from ..crosscutting.middleware import REQUEST_ID_HEADER, RequestContextMiddleware
from ..identity.passwords import hash_password, verify_password
from ..infrastructure.db.pool import close_pool, init_pool
from ..interfaces.api.http.router import build_router
from .auth_routes import router as auth_router
from .exception_handlers import register_exception_handlers

_OPENAPI_TAGS = [
    {"name": "threads", "description": "Support message threads (admin)"},
    {"name": "users", "description": "Staff account management (manageUsers)"},
    {"name": "auth", "description": "Staff authentication (session cookie / JWT)"},
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_json)

    opened_pool = not settings.is_test()
    if opened_pool:
        settings.validate_pool_params()
        init_pool(
            database_url=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            statement_timeout_ms=settings.db_statement_timeout_ms,
        )

    try:
        ensure_super_admin(
            settings,
            account_repo=get_account_repository(),
            password_hasher=hash_password,
            password_verifier=verify_password,
        )
        logger.info(
            "Back-office API ready",
            extra={
                "app_env": settings.app_env,
                "notifier": "redis" if settings.redis_url.strip() else "null",
                "pool": opened_pool,
            },
        )
        yield
    finally:
        if opened_pool:
            close_pool()
        logger.info("Back-office API stopped")


def _cors_options() -> dict[str, Any]:
    # R: la app se importa también sin entorno completo (openapi, tooling).
    try:
        settings = get_settings()
    except ValueError:
        return {"allow_origins": ["http://localhost:3000"], "allow_credentials": False}
    return {
        "allow_origins": settings.get_allowed_origins_list(),
        "allow_credentials": settings.cors_allow_credentials,
    }


def create_app() -> FastAPI:
    application = FastAPI(
        title="Back-office Control Plane API",
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=_OPENAPI_TAGS,
    )

    application.add_middleware(RequestContextMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", REQUEST_ID_HEADER],
        **_cors_options(),
    )

    application.include_router(build_router())
    application.include_router(auth_router)
    register_exception_handlers(application)

    application.add_api_route("/healthz", healthz, methods=["GET"], tags=["health"])
    return application


def healthz(request: Request) -> dict[str, Any]:
    """ok=True sólo si el store de hilos responde."""
    try:
        reachable = bool(get_thread_repository().ping())
    except Exception as exc:
        logger.warning("Health check: store unreachable", extra={"error": str(exc)})
        reachable = False

    return {
        "ok": reachable,
        "db": "connected" if reachable else "disconnected",
        "request_id": getattr(request.state, "request_id", None),
    }


app = create_app()
