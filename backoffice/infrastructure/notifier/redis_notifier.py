"""
============================================================
TARJETA CRC — infrastructure/notifier/redis_notifier.py
============================================================
Class: RedisChangeNotifier

Responsibilities:
  - Publicar eventos de cambio como JSON en un canal Redis (PUBLISH).

Collaborators:
  - redis.Redis (cliente inyectado; se construye en container.py)
  - domain.services.ChangeNotifier (contrato)

Constraints / Notes:
  - Best-effort: errores de Redis se loguean y se descartan.
  - PUBLISH es sincrónico y corre dentro del PATCH: build_redis_client()
    acota connect y socket a NOTIFIER_TIMEOUT_MS (250 ms por defecto), que es
    lo máximo que un Redis caído agrega a la respuesta.
  - Mensaje: {"event": <nombre>, "payload": {...}} (datetimes -> ISO string).
============================================================
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Mapping

from redis import Redis
from redis.exceptions import RedisError

from ...crosscutting.logger import logger


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def build_redis_client(url: str, *, timeout_ms: int) -> Redis:
    timeout_s = timeout_ms / 1000
    return Redis.from_url(
        url,
        socket_connect_timeout=timeout_s,
        socket_timeout=timeout_s,
        health_check_interval=30,
    )


class RedisChangeNotifier:
    def __init__(self, redis: Redis, *, channel: str) -> None:
        if not channel:
            raise ValueError("channel is required")
        self._redis = redis
        self._channel = channel

    def publish(self, event_name: str, payload: Mapping[str, Any]) -> None:
        message = json.dumps(
            {"event": event_name, "payload": dict(payload)},
            ensure_ascii=False,
            default=_json_default,
        )
        try:
            receivers = self._redis.publish(self._channel, message)
        except RedisError as exc:
            logger.warning(
                "Change notification dropped",
                extra={
                    "event_name": event_name,
                    "channel": self._channel,
                    "error": str(exc),
                },
            )
            return

        logger.debug(
            "Change notification published",
            extra={"event_name": event_name, "receivers": receivers},
        )
