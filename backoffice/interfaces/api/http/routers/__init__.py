"""
===============================================================================
TARJETA CRC — backoffice/interfaces/api/http/routers/__init__.py
===============================================================================

Responsibilities:
    - Re-exportar routers por bounded context (threads / users).

Notas:
    - Este archivo NO define endpoints.
===============================================================================
"""

from .threads import router as threads_router
from .users import router as users_router

__all__ = ["threads_router", "users_router"]
