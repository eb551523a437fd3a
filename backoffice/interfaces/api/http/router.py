"""
TARJETA CRC — interfaces/api/http/router.py

Responsabilidades:
  - Agrupar los routers del panel (hilos, usuarios) bajo un APIRouter que
    documenta las respuestas problem+json en OpenAPI.
"""

from __future__ import annotations

from fastapi import APIRouter

from ....crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from .routers import threads, users


def build_router() -> APIRouter:
    root = APIRouter(responses=OPENAPI_ERROR_RESPONSES)
    for feature in (threads, users):
        root.include_router(feature.router)
    return root


__all__ = ["build_router"]
