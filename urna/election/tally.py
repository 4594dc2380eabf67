"""Emisión de votos y escrutinio final."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from urna.election.errors import AlreadyVoted, VotingClosed
from urna.election.events import EventBus, Voted
from urna.election.models import WorkflowStatus
from urna.election.proposals import ProposalRegistry
from urna.election.voters import VoterRegistry
from urna.election.workflow import WorkflowStateMachine

logger = logging.getLogger("urna.election.tally")


def find_winner(vote_counts: Sequence[int]) -> int:
    """Índice de la propuesta con más votos.

    Recorre los índices en orden ascendente y solo reemplaza al líder ante un
    recuento estrictamente mayor, por lo que un empate lo gana el índice más
    bajo.
    """

    if not vote_counts:
        raise ValueError("No hay propuestas que escrutar.")
    winner = 0
    for index, count in enumerate(vote_counts):
        if count > vote_counts[winner]:
            winner = index
    return winner


class TallyEngine:
    """Registra los votos de la sesión y determina la propuesta ganadora."""

    def __init__(
        self,
        workflow: WorkflowStateMachine,
        voters: VoterRegistry,
        proposals: ProposalRegistry,
        bus: EventBus,
    ) -> None:
        self._workflow = workflow
        self._voters = voters
        self._proposals = proposals
        self._bus = bus
        self._winning_proposal_id = 0

    @property
    def winning_proposal_id(self) -> int:
        return self._winning_proposal_id

    def set_vote(self, caller: str, proposal_id: int) -> None:
        voter = self._voters.require_voter(caller)
        self._workflow.require(
            WorkflowStatus.VotingSessionStarted,
            VotingClosed,
            "La sesión de votación no está abierta.",
        )
        if voter.has_voted:
            raise AlreadyVoted(f"'{caller}' ya votó.")
        self._proposals.require_index(proposal_id)

        self._proposals.increment(proposal_id)
        self._voters.record_vote(caller, proposal_id)
        logger.info("voto_emitido", extra={"voter": caller, "proposal_id": proposal_id})
        self._bus.emit(Voted(voter=caller, proposal_id=proposal_id))

    def tally_votes(self, caller: str) -> int:
        """Escruta los votos y cierra la elección."""

        self._workflow.check_transition(caller, WorkflowStatus.VotesTallied)
        winner = find_winner(self._proposals.vote_counts())
        self._winning_proposal_id = winner
        logger.info(
            "escrutinio_completado",
            extra={"winning_proposal_id": winner, "proposals": len(self._proposals)},
        )
        self._workflow.commit(WorkflowStatus.VotesTallied)
        return winner


__all__ = ["TallyEngine", "find_winner"]
