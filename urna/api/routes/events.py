"""Ruta de auditoría del ledger de notificaciones."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

from urna.common.db import session_scope
from urna.election import ledger

router = APIRouter(prefix="/election", tags=["auditoria"])


class EventRecord(BaseModel):
    """Representación serializada de una entrada del ledger."""

    id: int
    election_id: str
    sequence: int
    kind: str
    payload: dict[str, object]
    previous_hash: str
    hash: str
    timestamp: str


class EventsResponse(BaseModel):
    """Respuesta paginada de eventos con el estado de la cadena."""

    election_id: str
    items: list[EventRecord]
    limit: int
    offset: int
    chain_valid: bool


def _get_db_session(request: Request) -> Iterator[Session]:
    factory = request.app.state.session_factory
    if factory is None:
        raise HTTPException(status_code=404, detail="El ledger de eventos está deshabilitado.")
    with session_scope(factory) as session:
        yield session


@router.get("/events", response_model=EventsResponse)
def listar_eventos(
    request: Request,
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    session: Session = Depends(_get_db_session),  # noqa: B008
) -> EventsResponse:
    """Recupera las notificaciones persistidas en orden de emisión."""
    election_id = request.app.state.election.election_id
    registros = ledger.list_events(session, election_id, limit=limit, offset=offset)
    items = [EventRecord.model_validate(ledger.serialize_record(r)) for r in registros]
    return EventsResponse(
        election_id=election_id,
        items=items,
        limit=limit,
        offset=offset,
        chain_valid=ledger.verify_chain(session, election_id),
    )
