"""Registro ordenado de propuestas y sus recuentos."""

from __future__ import annotations

import logging
from typing import List

from urna.election.errors import EmptyProposal, InvalidProposalIndex, ProposalsClosed
from urna.election.events import EventBus, ProposalRegistered
from urna.election.models import GENESIS_DESCRIPTION, Proposal, WorkflowStatus
from urna.election.voters import VoterRegistry
from urna.election.workflow import WorkflowStateMachine

logger = logging.getLogger("urna.election.proposals")


class ProposalRegistry:
    """Lista de propuestas indexada por orden de envío.

    El índice 0 es la propuesta centinela GENESIS, insertada al abrir la
    fase de propuestas y antes de cualquier envío de un votante.
    """

    def __init__(
        self, voters: VoterRegistry, workflow: WorkflowStateMachine, bus: EventBus
    ) -> None:
        self._voters = voters
        self._workflow = workflow
        self._bus = bus
        self._proposals: List[Proposal] = []
        workflow.on_enter(WorkflowStatus.ProposalsRegistrationStarted, self._add_genesis)

    def _add_genesis(self) -> None:
        self._proposals.append(Proposal(description=GENESIS_DESCRIPTION))

    def add_proposal(self, caller: str, description: str) -> int:
        """Agrega una propuesta y devuelve su índice.

        La descripción se valida tal cual llega: no se recortan espacios.
        """

        self._voters.require_voter(caller)
        self._workflow.require(
            WorkflowStatus.ProposalsRegistrationStarted,
            ProposalsClosed,
            "El registro de propuestas no está abierto.",
        )
        if description == "":
            raise EmptyProposal("No se puede enviar una propuesta vacía.")
        self._proposals.append(Proposal(description=description))
        proposal_id = len(self._proposals) - 1
        logger.info(
            "propuesta_registrada", extra={"proposal_id": proposal_id, "voter": caller}
        )
        self._bus.emit(ProposalRegistered(proposal_id=proposal_id))
        return proposal_id

    def get_one_proposal(self, caller: str, index: int) -> Proposal:
        self._voters.require_voter(caller)
        return self.get(index)

    def get(self, index: int) -> Proposal:
        self.require_index(index)
        return self._proposals[index]

    def require_index(self, index: int) -> None:
        if not 0 <= index < len(self._proposals):
            raise InvalidProposalIndex(f"La propuesta {index} no existe.")

    def increment(self, index: int) -> Proposal:
        proposal = self._proposals[index]
        updated = proposal.model_copy(update={"vote_count": proposal.vote_count + 1})
        self._proposals[index] = updated
        return updated

    def vote_counts(self) -> List[int]:
        return [proposal.vote_count for proposal in self._proposals]

    def __len__(self) -> int:
        return len(self._proposals)


__all__ = ["ProposalRegistry"]
