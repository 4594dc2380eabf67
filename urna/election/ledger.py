"""Persistencia auditable de las notificaciones de una elección."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from urna.common.db import ElectionEvent, session_scope
from urna.common.security import chain_hash
from urna.election.events import Notification

logger = logging.getLogger("urna.election.ledger")

GENESIS_HASH = "0" * 64


def make_hash(
    previous_hash: str, sequence: int, kind: str, payload: str, ts: str
) -> str:
    """Hash de una entrada encadenado al de la entrada anterior."""
    return chain_hash(previous_hash, f"{sequence}::{ts}::{kind}::{payload}")


def _last_hash(session: Session, election_id: str) -> str:
    consulta = (
        select(ElectionEvent.hash)
        .where(ElectionEvent.election_id == election_id)
        .order_by(ElectionEvent.sequence.desc())
        .limit(1)
    )
    return session.execute(consulta).scalar_one_or_none() or GENESIS_HASH


def persist_event(
    session: Session, election_id: str, sequence: int, notification: Notification
) -> ElectionEvent:
    """Inserta una notificación al final de la cadena de ``election_id``."""
    payload = json.dumps(notification.model_dump(mode="json"), sort_keys=True)
    ts = datetime.now(timezone.utc).isoformat()
    previous = _last_hash(session, election_id)
    registro = ElectionEvent(
        election_id=election_id,
        sequence=sequence,
        kind=notification.kind,
        payload=payload,
        previous_hash=previous,
        hash=make_hash(previous, sequence, notification.kind, payload, ts),
        timestamp=ts,
    )
    session.add(registro)
    session.flush()
    return registro


def serialize_record(registro: ElectionEvent) -> dict[str, int | str | dict[str, object]]:
    """Serializa una entrada del ledger a un diccionario seguro."""
    return {
        "id": registro.id,
        "election_id": registro.election_id,
        "sequence": registro.sequence,
        "kind": registro.kind,
        "payload": json.loads(registro.payload),
        "previous_hash": registro.previous_hash,
        "hash": registro.hash,
        "timestamp": registro.timestamp,
    }


def list_events(
    session: Session, election_id: str, limit: int = 50, offset: int = 0
) -> List[ElectionEvent]:
    consulta = (
        select(ElectionEvent)
        .where(ElectionEvent.election_id == election_id)
        .order_by(ElectionEvent.sequence.asc())
        .limit(limit)
        .offset(offset)
    )
    return list(session.execute(consulta).scalars().all())


def verify_chain(session: Session, election_id: str) -> bool:
    """Recalcula la cadena de una elección.

    Falla ante entradas alteradas y ante huecos en la numeración, que
    delatan notificaciones que no llegaron a persistirse.
    """
    consulta = (
        select(ElectionEvent)
        .where(ElectionEvent.election_id == election_id)
        .order_by(ElectionEvent.sequence.asc())
    )
    previous = GENESIS_HASH
    for esperado_seq, registro in enumerate(session.execute(consulta).scalars(), start=1):
        if registro.sequence != esperado_seq:
            logger.warning(
                "cadena_incompleta",
                extra={"election_id": election_id, "missing_sequence": esperado_seq},
            )
            return False
        esperado = make_hash(
            previous, registro.sequence, registro.kind, registro.payload, registro.timestamp
        )
        if registro.previous_hash != previous or registro.hash != esperado:
            logger.warning(
                "cadena_corrupta", extra={"election_id": election_id, "event_id": registro.id}
            )
            return False
        previous = registro.hash
    return True


class EventLedger:
    """Suscriptor que guarda las notificaciones de una elección.

    Cada notificación recibida consume un número de secuencia antes de
    escribirse, de modo que una escritura fallida deja un hueco que
    ``verify_chain`` detecta. Las pérdidas al final de la cadena solo se
    aprecian comparando con el historial en memoria de la elección.
    """

    def __init__(self, election_id: str, session_factory: sessionmaker[Session]) -> None:
        self._election_id = election_id
        self._session_factory = session_factory
        self._sequence = 0

    @property
    def election_id(self) -> str:
        return self._election_id

    def __call__(self, notification: Notification) -> None:
        self._sequence += 1
        with session_scope(self._session_factory) as session:
            registro = persist_event(session, self._election_id, self._sequence, notification)
            logger.debug(
                "evento_persistido",
                extra={"event_id": registro.id, "sequence": registro.sequence},
            )


__all__ = [
    "EventLedger",
    "GENESIS_HASH",
    "list_events",
    "make_hash",
    "persist_event",
    "serialize_record",
    "verify_chain",
]
