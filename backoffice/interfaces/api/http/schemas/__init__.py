"""
===============================================================================
TARJETA CRC — schemas/__init__.py
===============================================================================

Responsabilidades:
    - Re-exportar DTOs HTTP por feature (threads / users).
===============================================================================
"""

from .threads import ThreadEnvelopeRes, ThreadListRes, ThreadRes, UpdateThreadReq
from .users import (
    CreateUserReq,
    DeleteUserRes,
    UpdateUserReq,
    UserEnvelopeRes,
    UserRes,
    UsersListRes,
)

__all__ = [
    "CreateUserReq",
    "DeleteUserRes",
    "ThreadEnvelopeRes",
    "ThreadListRes",
    "ThreadRes",
    "UpdateThreadReq",
    "UpdateUserReq",
    "UserEnvelopeRes",
    "UserRes",
    "UsersListRes",
]
