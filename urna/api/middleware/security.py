"""Middlewares de seguridad para la API de Urna."""

from __future__ import annotations

import logging
from uuid import uuid4

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from urna.common.logging import CALLER_HEADER
from urna.common.security import validate_identity


class SecurityMiddleware(BaseHTTPMiddleware):
    """Limita el tamaño de las solicitudes y valida la identidad del llamador."""

    def __init__(
        self,
        app: ASGIApp,
        *,
        max_payload_bytes: int,
        instance_id: str,
        logger: logging.Logger,
    ) -> None:
        super().__init__(app)
        self._max_payload = max_payload_bytes
        self._instance_id = instance_id
        self._logger = logger

    def _reject(self, request_id: str, status_code: int, detail: str, reason: str) -> JSONResponse:
        self._logger.warning(
            "solicitud_rechazada", extra={"request_id": request_id, "reason": reason}
        )
        response = JSONResponse(status_code=status_code, content={"detail": detail})
        response.headers["X-Instance-ID"] = self._instance_id
        return response

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint):
        request_id = request.headers.get("x-request-id", str(uuid4()))
        request.state.request_id = request_id

        content_length_header = request.headers.get("content-length")
        if content_length_header and content_length_header.isdigit():
            if int(content_length_header) > self._max_payload:
                return self._reject(
                    request_id, 413, "Payload demasiado grande.", "content_length_exceeded"
                )

        raw_body = await request.body()
        if len(raw_body) > self._max_payload:
            return self._reject(request_id, 413, "Payload demasiado grande.", "body_exceeded")

        caller = request.headers.get(CALLER_HEADER)
        if caller is not None:
            try:
                request.state.caller = validate_identity(caller)
            except ValueError as exc:
                return self._reject(request_id, 400, str(exc), "invalid_caller")

        response = await call_next(request)
        response.headers["X-Instance-ID"] = self._instance_id
        return response


__all__ = ["SecurityMiddleware"]
