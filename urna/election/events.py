"""Notificaciones observables de la elección y su despachador."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import List, Literal, Union

from pydantic import BaseModel, ConfigDict

from urna.election.models import WorkflowStatus

logger = logging.getLogger("urna.election.events")


class _Notification(BaseModel):
    model_config = ConfigDict(frozen=True)


class WorkflowStatusChange(_Notification):
    """Se emite en cada transición de fase."""

    kind: Literal["WorkflowStatusChange"] = "WorkflowStatusChange"
    previous_status: WorkflowStatus
    new_status: WorkflowStatus


class VoterRegistered(_Notification):
    kind: Literal["VoterRegistered"] = "VoterRegistered"
    voter: str


class ProposalRegistered(_Notification):
    kind: Literal["ProposalRegistered"] = "ProposalRegistered"
    proposal_id: int


class Voted(_Notification):
    kind: Literal["Voted"] = "Voted"
    voter: str
    proposal_id: int


Notification = Union[WorkflowStatusChange, VoterRegistered, ProposalRegistered, Voted]
Listener = Callable[[Notification], None]


class EventBus:
    """Despacha notificaciones de forma síncrona y conserva su historial.

    Los suscriptores se invocan en orden de suscripción. Un suscriptor que
    falla queda registrado en el log pero no revierte la operación ya
    confirmada ni impide que el resto reciba la notificación.
    """

    def __init__(self) -> None:
        self._listeners: List[Listener] = []
        self._history: List[Notification] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def emit(self, notification: Notification) -> None:
        self._history.append(notification)
        logger.debug("notificacion", extra={"notification": notification.model_dump(mode="json")})
        for listener in list(self._listeners):
            try:
                listener(notification)
            except Exception:
                logger.exception(
                    "suscriptor_fallido", extra={"notification_kind": notification.kind}
                )

    @property
    def history(self) -> List[Notification]:
        return list(self._history)


__all__ = [
    "EventBus",
    "Listener",
    "Notification",
    "ProposalRegistered",
    "Voted",
    "VoterRegistered",
    "WorkflowStatusChange",
]
