"""Máquina de estados lineal que recorre las fases de la elección."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Dict, List, Optional

from urna.election.access import AccessControl
from urna.election.errors import (
    ElectionError,
    InvalidPhaseTransition,
    UnauthorizedTransition,
)
from urna.election.events import EventBus, WorkflowStatusChange
from urna.election.models import WorkflowStatus

logger = logging.getLogger("urna.election.workflow")

# Única fase alcanzable desde cada fase; VotesTallied es terminal.
_NEXT: Dict[WorkflowStatus, Optional[WorkflowStatus]] = {
    WorkflowStatus.RegisteringVoters: WorkflowStatus.ProposalsRegistrationStarted,
    WorkflowStatus.ProposalsRegistrationStarted: WorkflowStatus.ProposalsRegistrationEnded,
    WorkflowStatus.ProposalsRegistrationEnded: WorkflowStatus.VotingSessionStarted,
    WorkflowStatus.VotingSessionStarted: WorkflowStatus.VotingSessionEnded,
    WorkflowStatus.VotingSessionEnded: WorkflowStatus.VotesTallied,
    WorkflowStatus.VotesTallied: None,
}


class WorkflowStateMachine:
    """Mantiene la fase actual y valida cada transición.

    No tiene lock propio: la elección que la contiene serializa todas las
    llamadas.
    """

    def __init__(self, access: AccessControl, bus: EventBus) -> None:
        self._access = access
        self._bus = bus
        self._status = WorkflowStatus.RegisteringVoters
        self._on_enter: Dict[WorkflowStatus, List[Callable[[], None]]] = {}

    @property
    def status(self) -> WorkflowStatus:
        return self._status

    def on_enter(self, status: WorkflowStatus, hook: Callable[[], None]) -> None:
        """Registra un efecto que se ejecuta al entrar en ``status``."""

        self._on_enter.setdefault(status, []).append(hook)

    def require(self, status: WorkflowStatus, error: type[ElectionError], message: str) -> None:
        """Falla con ``error`` salvo que la fase actual sea exactamente ``status``."""

        if self._status is not status:
            raise error(message)

    def check_transition(self, caller: str, target: WorkflowStatus) -> None:
        """Valida que ``caller`` pueda llevar la elección a ``target`` ahora."""

        self._access.require_admin(caller, error=UnauthorizedTransition)
        if _NEXT[self._status] is not target:
            logger.warning(
                "transicion_invalida",
                extra={"current": self._status.name, "target": target.name},
            )
            raise InvalidPhaseTransition(
                f"No se puede pasar de {self._status.name} a {target.name}."
            )

    def commit(self, target: WorkflowStatus) -> None:
        """Aplica una transición ya validada con ``check_transition``."""

        previous = self._status
        for hook in self._on_enter.get(target, []):
            hook()
        self._status = target
        logger.info(
            "cambio_de_fase", extra={"previous": previous.name, "new": target.name}
        )
        self._bus.emit(WorkflowStatusChange(previous_status=previous, new_status=target))

    def advance(self, caller: str, target: WorkflowStatus) -> None:
        self.check_transition(caller, target)
        self.commit(target)


__all__ = ["WorkflowStateMachine"]
