"""
===============================================================================
TARJETA CRC — crosscutting/config.py (Settings)
===============================================================================

Responsabilidades:
  - Leer y tipar la configuración del back-office desde variables de entorno
    (y .env en desarrollo).
  - Rechazar al arranque combinaciones inseguras en producción (secreto JWT
    débil, cookie de sesión sin Secure).

Colaboradores:
  - api/main.py: CORS, pool y validación al arranque
  - container.py: adapters in-memory vs Postgres y elección del notifier
  - identity/tokens.py: secreto JWT, TTLs y nombre de la cookie de sesión
===============================================================================
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_WEAK_JWT_SECRETS = frozenset({"dev-secret", "changeme", "change-me", "password", "secret"})


class Settings(BaseSettings):
    """
    Configuración del back-office (una variable de entorno por campo).

    Attributes:
        database_url: PostgreSQL connection string
        app_env: Application environment (development/test/production)
        allowed_origins: Comma-separated CORS origins
        cors_allow_credentials: Allow cookies cross-origin (default: False)
        jwt_secret: Shared HS256 secret for admin tokens and session cookies
        jwt_access_ttl_minutes: Admin API token TTL in minutes (default: 24h)
        session_cookie_name: Cookie carrying the staff session
        session_cookie_secure: Set Secure on the session cookie
        session_ttl_minutes: Session cookie TTL in minutes
        redis_url: Redis connection string for the change notifier (optional)
        notifier_channel: Redis pub/sub channel for thread change events
        notifier_timeout_ms: Connect/socket timeout for each PUBLISH (bounds PATCH latency)
        super_admin_email: Bootstrap super admin email (optional)
        super_admin_password: Bootstrap super admin password (optional)
        super_admin_name: Bootstrap super admin display name
    """

    # Required (no defaults)
    database_url: str

    # Environment
    app_env: str = "development"

    # CORS configuration
    allowed_origins: str = "http://localhost:3000"
    cors_allow_credentials: bool = False

    # Security - JWT / session cookie
    jwt_secret: str = "dev-secret"
    jwt_access_ttl_minutes: int = 24 * 60
    session_cookie_name: str = "backoffice_session"
    session_cookie_secure: bool = False
    session_ttl_minutes: int = 24 * 60

    # Change notifier (Redis pub/sub)
    redis_url: str = ""
    notifier_channel: str = "backoffice:events"
    notifier_timeout_ms: int = 250

    # Database - Connection Pool
    db_pool_min_size: int = 2
    db_pool_max_size: int = 10
    db_statement_timeout_ms: int = 30000  # 30 seconds

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Super admin bootstrap
    super_admin_email: str = ""
    super_admin_password: str = ""
    super_admin_name: str = "Super Admin"

    @field_validator("jwt_access_ttl_minutes", "session_ttl_minutes")
    @classmethod
    def ttl_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("token TTL must be greater than 0")
        return v

    @field_validator("notifier_timeout_ms")
    @classmethod
    def notifier_timeout_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("notifier_timeout_ms must be greater than 0")
        return v

    @field_validator("db_pool_min_size")
    @classmethod
    def pool_min_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("db_pool_min_size must be >= 0")
        return v

    def validate_pool_params(self) -> None:
        """
        Cross-field validation: pool max must be >= pool min.
        Called explicitly after instantiation.
        """
        if self.db_pool_max_size < self.db_pool_min_size:
            raise ValueError(
                f"db_pool_max_size ({self.db_pool_max_size}) must be >= "
                f"db_pool_min_size ({self.db_pool_min_size})"
            )

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    @model_validator(mode="after")
    def validate_security_requirements(self):
        if not self.is_production():
            return self

        jwt_secret = (self.jwt_secret or "").strip()
        if not jwt_secret or jwt_secret in _WEAK_JWT_SECRETS:
            raise ValueError(
                "JWT_SECRET must be set to a strong, non-default value in production"
            )
        if len(jwt_secret) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters in production")
        if not self.session_cookie_secure:
            raise ValueError("SESSION_COOKIE_SECURE must be true in production")

        return self

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    def is_test(self) -> bool:
        return self.app_env.strip().lower() in {"test", "testing", "ci"}

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Settings del proceso (cacheadas). Falla con ValidationError si falta DATABASE_URL."""
    settings = Settings()
    settings.validate_pool_params()
    return settings
