"""
===============================================================================
TARJETA CRC — infrastructure/db/pool.py (Pool de conexiones)
===============================================================================

Responsabilidades:
  - Mantener un único psycopg_pool.ConnectionPool por proceso.
  - Aplicar statement_timeout a cada conexión nueva.
  - Fallar explícitamente si se usa antes de init_pool() o se inicializa dos
    veces.

Colaboradores:
  - api/main.py (lifespan: init_pool / close_pool)
  - container.py y repositories/postgres/* (get_pool)
===============================================================================
"""

from __future__ import annotations

import threading
from typing import Optional

from psycopg import Connection
from psycopg_pool import ConnectionPool

from ...crosscutting.logger import logger
from .errors import PoolAlreadyInitializedError, PoolNotInitializedError


class _PoolHolder:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pool: Optional[ConnectionPool] = None

    def open(
        self, database_url: str, min_size: int, max_size: int, statement_timeout_ms: int
    ) -> ConnectionPool:
        with self._lock:
            if self._pool is not None:
                raise PoolAlreadyInitializedError("El pool ya fue inicializado.")

            def configure(conn: Connection) -> None:
                if statement_timeout_ms > 0:
                    conn.execute(
                        "SELECT set_config('statement_timeout', %s, false)",
                        (str(statement_timeout_ms),),
                    )
                    conn.commit()

            self._pool = ConnectionPool(
                conninfo=database_url,
                min_size=min_size,
                max_size=max_size,
                configure=configure,
                open=True,
            )
            logger.info(
                "Postgres pool opened",
                extra={"min_size": min_size, "max_size": max_size},
            )
            return self._pool

    def get(self) -> ConnectionPool:
        pool = self._pool
        if pool is None:
            raise PoolNotInitializedError("Pool no inicializado: falta init_pool().")
        return pool

    def close(self) -> None:
        with self._lock:
            pool, self._pool = self._pool, None
        if pool is not None:
            pool.close()
            logger.info("Postgres pool closed")


_holder = _PoolHolder()


def init_pool(
    database_url: str, min_size: int, max_size: int, statement_timeout_ms: int = 0
) -> ConnectionPool:
    return _holder.open(database_url, min_size, max_size, statement_timeout_ms)


def get_pool() -> ConnectionPool:
    return _holder.get()


def close_pool() -> None:
    """Idempotente."""
    _holder.close()
