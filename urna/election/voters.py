"""Padrón de votantes de la elección."""

from __future__ import annotations

import logging
from typing import Dict

from urna.election.access import AccessControl
from urna.election.errors import AlreadyRegistered, NotAVoter, RegistrationClosed
from urna.election.events import EventBus, VoterRegistered
from urna.election.models import Voter, WorkflowStatus
from urna.election.workflow import WorkflowStateMachine

logger = logging.getLogger("urna.election.voters")


class VoterRegistry:
    """Identidad → registro de votante. Los registros nunca se eliminan."""

    def __init__(
        self, access: AccessControl, workflow: WorkflowStateMachine, bus: EventBus
    ) -> None:
        self._access = access
        self._workflow = workflow
        self._bus = bus
        self._voters: Dict[str, Voter] = {}

    def add_voter(self, caller: str, identity: str) -> Voter:
        """Inscribe ``identity`` en el padrón."""

        self._access.require_admin(caller)
        self._workflow.require(
            WorkflowStatus.RegisteringVoters,
            RegistrationClosed,
            "El registro de votantes no está abierto.",
        )
        if not identity:
            raise ValueError("La identidad del votante no puede estar vacía.")
        if identity in self._voters:
            raise AlreadyRegistered(f"'{identity}' ya está registrado.")
        voter = Voter(is_registered=True)
        self._voters[identity] = voter
        logger.info("votante_registrado", extra={"voter": identity})
        self._bus.emit(VoterRegistered(voter=identity))
        return voter

    def get_voter(self, caller: str, identity: str) -> Voter:
        """Consulta un registro; una identidad desconocida devuelve el valor vacío."""

        self.require_voter(caller)
        return self._voters.get(identity, Voter())

    def require_voter(self, caller: str) -> Voter:
        voter = self._voters.get(caller)
        if voter is None:
            raise NotAVoter(f"'{caller}' no es un votante registrado.")
        return voter

    def record_vote(self, identity: str, proposal_id: int) -> Voter:
        voter = self._voters[identity]
        updated = voter.model_copy(
            update={"has_voted": True, "voted_proposal_id": proposal_id}
        )
        self._voters[identity] = updated
        return updated


__all__ = ["VoterRegistry"]
