"""Logging estructurado en JSON para Urna."""

from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timezone
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from .config import Settings

CALLER_HEADER = "x-caller-id"

# Atributos propios de LogRecord que no forman parte del evento.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


class JsonFormatter(logging.Formatter):
    """Emite cada registro como un objeto JSON por línea."""

    def __init__(self, instance_id: str) -> None:
        super().__init__()
        self.instance_id = instance_id

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "message": record.getMessage(),
            "instance_id": self.instance_id,
        }
        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS or key in payload or key.startswith("_"):
                continue
            payload[key] = value
        if record.exc_info:
            payload["error"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(settings: Settings) -> logging.Logger:
    """Configura el logger raíz con formato JSON."""
    logger = logging.getLogger()
    logger.setLevel(settings.log_level)
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter(instance_id=settings.instance_id))
    logger.handlers = [handler]
    return logger


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Registra cada solicitud con su latencia y el llamador declarado."""

    def __init__(self, app: Any, logger: logging.Logger) -> None:
        super().__init__(app)
        self.logger = logger

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        inicio = time.perf_counter()
        response = await call_next(request)
        extra: dict[str, Any] = {
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "latency_ms": round((time.perf_counter() - inicio) * 1000, 2),
        }
        caller = request.headers.get(CALLER_HEADER)
        if caller:
            extra["caller"] = caller
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            extra["request_id"] = request_id
        self.logger.info("request", extra=extra)
        return response
