"""Punto de entrada de la API de Urna."""

from __future__ import annotations

import logging
from typing import Dict, Optional
from uuid import uuid4

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from urna.api.middleware.security import SecurityMiddleware
from urna.api.routes import election as election_routes
from urna.api.routes import events, health
from urna.common.config import Settings, get_settings
from urna.common.db import init_db
from urna.common.logging import RequestLoggingMiddleware, configure_logging
from urna.election import errors
from urna.election.election import Election
from urna.election.ledger import EventLedger

# Se resuelve recorriendo el MRO de la excepción; el primer match gana.
_STATUS_BY_ERROR: Dict[type[errors.ElectionError], int] = {
    errors.Unauthorized: 403,
    errors.NotAVoter: 403,
    errors.InvalidProposalIndex: 404,
    errors.EmptyProposal: 400,
    errors.InvalidPhaseTransition: 409,
    errors.PhaseClosed: 409,
    errors.AlreadyRegistered: 409,
    errors.AlreadyVoted: 409,
}


def status_for(exc: errors.ElectionError) -> int:
    """Código HTTP de un error electoral."""
    for klass in type(exc).__mro__:
        if klass in _STATUS_BY_ERROR:
            return _STATUS_BY_ERROR[klass]
    return 400


def create_app(
    settings: Optional[Settings] = None, election: Optional[Election] = None
) -> FastAPI:
    """Crea y configura la instancia de FastAPI con su propia elección."""
    settings = settings or get_settings()
    logger = configure_logging(settings)

    if election is None:
        election = Election(owner=settings.election_owner)
    session_factory = None
    if settings.ledger_enabled:
        session_factory = init_db(settings)
        election.subscribe(EventLedger(election.election_id, session_factory))

    limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])

    app = FastAPI(title=settings.app_name)
    app.state.settings = settings
    app.state.logger = logger
    app.state.limiter = limiter
    app.state.election = election
    app.state.session_factory = session_factory

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=False,
    )
    app.add_middleware(
        SecurityMiddleware,
        max_payload_bytes=settings.max_payload_bytes,
        instance_id=settings.instance_id,
        logger=logger,
    )
    app.add_middleware(RequestLoggingMiddleware, logger=logger)
    app.add_middleware(SlowAPIMiddleware)

    app.include_router(health.router)
    app.include_router(election_routes.router)
    app.include_router(events.router)

    registrar_manejadores(app, logger)
    logger.info(
        "eleccion_creada",
        extra={
            "election_id": election.election_id,
            "owner": election.owner,
            "ledger_enabled": settings.ledger_enabled,
        },
    )
    return app


def registrar_manejadores(app: FastAPI, logger: logging.Logger) -> None:
    """Registra manejadores de errores consistentes."""

    def _extra(request: Request, **campos: object) -> dict[str, object]:
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            campos["request_id"] = request_id
        return campos

    @app.exception_handler(errors.ElectionError)
    async def election_error_handler(
        request: Request, exc: errors.ElectionError
    ) -> JSONResponse:
        error = type(exc).__name__
        logger.info("operacion_rechazada", extra=_extra(request, error=error, detail=str(exc)))
        return JSONResponse(
            status_code=status_for(exc), content={"detail": str(exc), "error": error}
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.error("error_validacion", extra=_extra(request, errors=exc.errors()))
        return JSONResponse(
            status_code=400,
            content={"detail": "Solicitud inválida.", "errors": exc.errors()},
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        logger.error("error_validacion_valor", extra=_extra(request, detail=str(exc)))
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
        return JSONResponse(
            status_code=429, content={"detail": "Se excedió el límite de solicitudes."}
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = str(uuid4())
        logger.error("error_no_controlado", exc_info=exc, extra={"request_id": request_id})
        return JSONResponse(
            status_code=500,
            content={"detail": "Error interno del servidor.", "request_id": request_id},
        )


if __name__ == "__main__":  # pragma: no cover - punto de entrada CLI
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
