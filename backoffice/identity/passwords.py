"""
TARJETA CRC — identity/passwords.py

Responsabilidades:
  - Hash y verificación de passwords con Argon2id (parámetros por defecto de
    argon2-cffi).

Colaboradores:
  - create_account y bootstrap_super_admin (hash)
  - authenticate_account y bootstrap_super_admin (verificación)
"""

from __future__ import annotations

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """False ante mismatch o hash ilegible; nunca levanta."""
    try:
        return _hasher.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False
