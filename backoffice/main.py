"""
Punto de entrada ASGI: `uvicorn backoffice.main:app`.
"""

from backoffice.api.main import app

__all__ = ["app"]
