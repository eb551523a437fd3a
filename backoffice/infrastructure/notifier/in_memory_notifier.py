"""
============================================================
TARJETA CRC — infrastructure/notifier/in_memory_notifier.py
============================================================
Class: InMemoryChangeNotifier

Responsibilities:
  - Fan-out en proceso de eventos a callbacks suscriptos.
  - Guardar un historial acotado de eventos publicados (tests / debug).

Collaborators:
  - domain.services.ChangeNotifier (contrato)

Constraints / Notes:
  - Un suscriptor que falla no corta la entrega a los demás.
  - Sin orden garantizado entre publicadores concurrentes.
============================================================
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Callable, Deque, Dict, List, Mapping

from ...crosscutting.logger import logger

Subscriber = Callable[[str, Dict[str, Any]], None]


@dataclass(frozen=True)
class PublishedEvent:
    name: str
    payload: Dict[str, Any] = field(default_factory=dict)


class InMemoryChangeNotifier:
    def __init__(self, *, history_size: int = 100) -> None:
        self._lock = Lock()
        self._subscribers: List[Subscriber] = []
        self._history: Deque[PublishedEvent] = deque(maxlen=max(history_size, 1))

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Registra un callback; devuelve la función para desuscribirlo."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, event_name: str, payload: Mapping[str, Any]) -> None:
        event = PublishedEvent(name=event_name, payload=dict(payload))
        with self._lock:
            self._history.append(event)
            subscribers = list(self._subscribers)

        for callback in subscribers:
            try:
                callback(event.name, dict(event.payload))
            except Exception:
                logger.warning(
                    "Change subscriber failed",
                    exc_info=True,
                    extra={"event_name": event_name},
                )

    @property
    def events(self) -> List[PublishedEvent]:
        with self._lock:
            return list(self._history)
