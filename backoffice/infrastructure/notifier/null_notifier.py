"""
Null Change Notifier.

Implementación no-op del puerto ChangeNotifier para despliegues sin canal
en vivo (los observadores refrescan por polling).
"""

from __future__ import annotations

from typing import Any, Mapping


class NullChangeNotifier:
    """Descarta todos los eventos."""

    def publish(self, event_name: str, payload: Mapping[str, Any]) -> None:
        return None
