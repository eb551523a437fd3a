"""
============================================================
TARJETA CRC
============================================================
Class: backoffice.infrastructure.repositories (Package exports)

Responsibilities:
- Exponer implementaciones concretas de repositorios (Postgres e InMemory)
  en un único punto de importación.

Collaborators:
- Repositorios Postgres (SQL crudo)
- Repositorios InMemory (testing / local dev)
============================================================
"""

from .in_memory.account import InMemoryAccountRepository
from .in_memory.thread import InMemoryThreadRepository
from .postgres.account import PostgresAccountRepository
from .postgres.thread import PostgresThreadRepository

__all__ = [
    "InMemoryAccountRepository",
    "InMemoryThreadRepository",
    "PostgresAccountRepository",
    "PostgresThreadRepository",
]
