"""
===============================================================================
TARJETA CRC — crosscutting/logger.py (Logging estructurado)
===============================================================================

Responsabilidades:
  - Emitir una línea JSON por evento, con el contexto del request
    (request_id, method, path, actor_id) ya incorporado.
  - Ocultar credenciales: cualquier clave "extra" que contenga password,
    token, secret, cookie o authorization sale como "[redacted]".
  - Ofrecer un formato texto legible para desarrollo local (LOG_JSON=false).

Colaboradores:
  - backoffice/context.py: get_context_dict()
  - crosscutting/config.py: log_level / log_json (aplicados en el lifespan)

Uso:
  from backoffice.crosscutting.logger import logger
  logger.info("Thread updated", extra={"thread_id": 42})
===============================================================================
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from ..context import get_context_dict

LOGGER_NAME = "backoffice"

# Atributos estándar de LogRecord; todo lo demás vino por extra=...
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime", "taskName"}

_SENSITIVE_FRAGMENTS = ("password", "token", "secret", "cookie", "authorization")
_REDACTED = "[redacted]"
_MAX_VALUE_CHARS = 4_000


def redact(key: str, value: Any) -> Any:
    """Oculta valores de claves sensibles y recorta strings largos."""
    lowered = key.lower()
    if any(fragment in lowered for fragment in _SENSITIVE_FRAGMENTS):
        return _REDACTED
    if isinstance(value, dict):
        return {str(k): redact(str(k), v) for k, v in value.items()}
    if isinstance(value, str) and len(value) > _MAX_VALUE_CHARS:
        return value[:_MAX_VALUE_CHARS] + "...[truncated]"
    return value


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: redact(key, value)
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """LogRecord -> una línea JSON (contexto + extra + excepción)."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "where": f"{record.module}:{record.lineno}",
        }
        entry.update(get_context_dict())
        entry.update(_extra_fields(record))

        if record.exc_info and record.exc_info[0] is not None:
            entry["exc_type"] = record.exc_info[0].__name__
            entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


class ConsoleFormatter(logging.Formatter):
    """Formato humano: nivel, mensaje, request_id y extra en key=value."""

    def format(self, record: logging.LogRecord) -> str:
        parts = [f"{record.levelname:<7}", record.getMessage()]
        request_id = get_context_dict().get("request_id")
        if request_id:
            parts.append(f"[{request_id}]")
        parts.extend(f"{k}={v}" for k, v in _extra_fields(record).items())
        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(level: str = "INFO", json_output: bool = True) -> logging.Logger:
    """
    Aplica nivel y formato al logger del back-office.

    Idempotente: reemplaza el formatter del handler existente en vez de
    apilar handlers nuevos.
    """
    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(getattr(logging, (level or "INFO").upper(), logging.INFO))
    log.propagate = False

    formatter: logging.Formatter = JSONFormatter() if json_output else ConsoleFormatter()
    if not log.handlers:
        log.addHandler(logging.StreamHandler(sys.stdout))
    for handler in log.handlers:
        handler.setFormatter(formatter)
    return log


logger = configure_logging()
