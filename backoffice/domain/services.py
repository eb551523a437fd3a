"""
===============================================================================
TARJETA CRC — domain/services.py
===============================================================================

Módulo:
    Puertos de Servicios Externos (Protocols)

Responsabilidades:
    - Definir el contrato del canal de notificación de cambios.
    - Mantener a los casos de uso independientes del transporte (Redis, memoria).

Colaboradores:
    - infrastructure/notifier/*: implementaciones concretas.
    - application/usecases/threads/update_thread.py: publica thread_updated.

Reglas:
    - SOLO interfaces: nada de implementación.
    - Fire-and-forget: sin ack, sin reintentos, sin orden garantizado.
===============================================================================
"""

from __future__ import annotations

from typing import Any, Final, Mapping, Protocol

EVENT_THREAD_UPDATED: Final[str] = "thread_updated"


class ChangeNotifier(Protocol):
    """Contrato para avisar a observadores conectados que algo cambió."""

    def publish(self, event_name: str, payload: Mapping[str, Any]) -> None:
        """Publica un evento. Los observadores lo tratan como señal de re-fetch."""
        ...
