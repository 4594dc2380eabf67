"""Elección única: punto de entrada serializado a todo el estado electoral."""

from __future__ import annotations

from threading import RLock
from typing import List, Optional
from uuid import uuid4

from urna.election.access import AccessControl
from urna.election.events import EventBus, Listener, Notification
from urna.election.models import Proposal, Voter, WorkflowStatus
from urna.election.proposals import ProposalRegistry
from urna.election.tally import TallyEngine
from urna.election.voters import VoterRegistry
from urna.election.workflow import WorkflowStateMachine


class Election:
    """Contexto explícito de una elección con su administrador.

    Todas las operaciones, incluidas las consultas, se ejecutan bajo un único
    ``RLock``: las comprobaciones y las mutaciones de una llamada ocurren en la
    misma sección crítica y las lecturas devuelven instantáneas inmutables.
    La identidad del llamador se recibe siempre como argumento.
    """

    def __init__(self, owner: str, election_id: Optional[str] = None) -> None:
        self._election_id = election_id or uuid4().hex
        self._lock = RLock()
        self._bus = EventBus()
        self._access = AccessControl(owner)
        self._workflow = WorkflowStateMachine(self._access, self._bus)
        self._voters = VoterRegistry(self._access, self._workflow, self._bus)
        self._proposals = ProposalRegistry(self._voters, self._workflow, self._bus)
        self._tally = TallyEngine(
            self._workflow, self._voters, self._proposals, self._bus
        )

    @property
    def election_id(self) -> str:
        return self._election_id

    @property
    def owner(self) -> str:
        return self._access.owner

    @property
    def workflow_status(self) -> WorkflowStatus:
        with self._lock:
            return self._workflow.status

    @property
    def winning_proposal_id(self) -> int:
        with self._lock:
            return self._tally.winning_proposal_id

    @property
    def proposal_count(self) -> int:
        with self._lock:
            return len(self._proposals)

    @property
    def events(self) -> List[Notification]:
        with self._lock:
            return self._bus.history

    def subscribe(self, listener: Listener) -> None:
        with self._lock:
            self._bus.subscribe(listener)

    def add_voter(self, caller: str, identity: str) -> Voter:
        with self._lock:
            return self._voters.add_voter(caller, identity)

    def get_voter(self, caller: str, identity: str) -> Voter:
        with self._lock:
            return self._voters.get_voter(caller, identity)

    def start_proposals_registering(self, caller: str) -> None:
        with self._lock:
            self._workflow.advance(caller, WorkflowStatus.ProposalsRegistrationStarted)

    def add_proposal(self, caller: str, description: str) -> int:
        with self._lock:
            return self._proposals.add_proposal(caller, description)

    def get_one_proposal(self, caller: str, index: int) -> Proposal:
        with self._lock:
            return self._proposals.get_one_proposal(caller, index)

    def end_proposals_registering(self, caller: str) -> None:
        with self._lock:
            self._workflow.advance(caller, WorkflowStatus.ProposalsRegistrationEnded)

    def start_voting_session(self, caller: str) -> None:
        with self._lock:
            self._workflow.advance(caller, WorkflowStatus.VotingSessionStarted)

    def set_vote(self, caller: str, proposal_id: int) -> None:
        with self._lock:
            self._tally.set_vote(caller, proposal_id)

    def end_voting_session(self, caller: str) -> None:
        with self._lock:
            self._workflow.advance(caller, WorkflowStatus.VotingSessionEnded)

    def tally_votes(self, caller: str) -> int:
        with self._lock:
            return self._tally.tally_votes(caller)


__all__ = ["Election"]
