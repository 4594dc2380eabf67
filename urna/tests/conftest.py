"""Fixtures compartidas para las pruebas de Urna."""

from __future__ import annotations

import pytest

from urna.election.election import Election

OWNER = "owner"
VOTER1 = "voter1"
VOTER2 = "voter2"
VOTER3 = "voter3"


@pytest.fixture
def election() -> Election:
    """Elección recién creada, sin votantes."""
    return Election(owner=OWNER)


@pytest.fixture
def election_with_voters(election: Election) -> Election:
    """Tres votantes inscritos, todavía en RegisteringVoters."""
    for voter in (VOTER1, VOTER2, VOTER3):
        election.add_voter(OWNER, voter)
    return election


@pytest.fixture
def election_with_proposals(election_with_voters: Election) -> Election:
    """Fase de propuestas abierta con GENESIS y dos propuestas."""
    election = election_with_voters
    election.start_proposals_registering(OWNER)
    election.add_proposal(VOTER1, "Proposal 1")
    election.add_proposal(VOTER2, "Proposal 2")
    return election


@pytest.fixture
def voting_election(election_with_proposals: Election) -> Election:
    """Sesión de votación abierta sobre las propuestas anteriores."""
    election = election_with_proposals
    election.end_proposals_registering(OWNER)
    election.start_voting_session(OWNER)
    return election
