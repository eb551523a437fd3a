"""
CRC CARD — infrastructure/db/errors.py

Componente:
  Errores tipados del pool de conexiones

Responsabilidades:
  - Distinguir "pool no inicializado" de "pool inicializado dos veces".
  - Heredar de DatabaseError para que la API los mapee a 500 sin casos especiales.
"""

from ...crosscutting.exceptions import DatabaseError


class PoolAlreadyInitializedError(DatabaseError):
    """init_pool() fue llamado más de una vez en el proceso."""


class PoolNotInitializedError(DatabaseError):
    """Se pidió el pool antes de init_pool() (startup incompleto)."""
