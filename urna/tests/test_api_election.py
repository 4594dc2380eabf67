"""Pruebas de la API HTTP de la elección."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from urna.api.main import create_app
from urna.common.config import get_settings
from urna.tests.conftest import OWNER, VOTER1, VOTER2, VOTER3


def _headers(caller: str) -> dict[str, str]:
    return {"X-Caller-ID": caller}


@pytest.fixture
def client() -> Iterator[TestClient]:
    settings = get_settings().model_copy(
        update={"ledger_enabled": False, "rate_limit": "1000/minute", "election_owner": OWNER}
    )
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def client_with_proposals(client: TestClient) -> TestClient:
    for voter in (VOTER1, VOTER2, VOTER3):
        assert client.post(
            "/election/voters", json={"identity": voter}, headers=_headers(OWNER)
        ).status_code == 201
    assert client.post("/election/workflow/proposals/start", headers=_headers(OWNER)).status_code == 200
    for voter, description in ((VOTER1, "Proposal 1"), (VOTER2, "Proposal 2")):
        response = client.post(
            "/election/proposals", json={"description": description}, headers=_headers(voter)
        )
        assert response.status_code == 201
    return client


def test_status_of_new_election(client: TestClient) -> None:
    response = client.get("/election/status")
    assert response.status_code == 200
    assert response.json() == {
        "owner": OWNER,
        "workflow_status": 0,
        "workflow_status_name": "RegisteringVoters",
        "winning_proposal_id": 0,
        "proposal_count": 0,
    }


def test_health_reports_phase(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["workflow_status"] == "RegisteringVoters"
    assert "X-Instance-ID" in response.headers


def test_register_and_read_voter(client: TestClient) -> None:
    response = client.post("/election/voters", json={"identity": VOTER1}, headers=_headers(OWNER))
    assert response.status_code == 201
    assert response.json() == {"is_registered": True, "has_voted": False, "voted_proposal_id": 0}

    response = client.get(f"/election/voters/{VOTER1}", headers=_headers(VOTER1))
    assert response.json()["is_registered"] is True
    unknown = client.get("/election/voters/nadie", headers=_headers(VOTER1))
    assert unknown.status_code == 200
    assert unknown.json()["is_registered"] is False


def test_errors_map_to_status_codes(client: TestClient) -> None:
    client.post("/election/voters", json={"identity": VOTER1}, headers=_headers(OWNER))

    duplicate = client.post("/election/voters", json={"identity": VOTER1}, headers=_headers(OWNER))
    assert duplicate.status_code == 409
    assert duplicate.json()["error"] == "AlreadyRegistered"

    forbidden = client.post("/election/voters", json={"identity": VOTER2}, headers=_headers(VOTER1))
    assert forbidden.status_code == 403
    assert forbidden.json()["error"] == "Unauthorized"

    transition = client.post("/election/workflow/proposals/start", headers=_headers(VOTER1))
    assert transition.status_code == 403
    assert transition.json()["error"] == "UnauthorizedTransition"

    skipped = client.post("/election/workflow/voting/start", headers=_headers(OWNER))
    assert skipped.status_code == 409
    assert skipped.json()["error"] == "InvalidPhaseTransition"

    not_a_voter = client.get(f"/election/voters/{VOTER1}", headers=_headers("intruso"))
    assert not_a_voter.status_code == 403
    assert not_a_voter.json()["error"] == "NotAVoter"


def test_missing_caller_header_is_401(client: TestClient) -> None:
    response = client.post("/election/voters", json={"identity": VOTER1})
    assert response.status_code == 401


def test_malformed_caller_header_is_rejected(client: TestClient) -> None:
    response = client.post(
        "/election/voters", json={"identity": VOTER1}, headers=_headers("x" * 200)
    )
    assert response.status_code == 400


def test_proposal_errors(client_with_proposals: TestClient) -> None:
    empty = client_with_proposals.post(
        "/election/proposals", json={"description": ""}, headers=_headers(VOTER1)
    )
    assert empty.status_code == 400
    assert empty.json()["error"] == "EmptyProposal"

    missing = client_with_proposals.get("/election/proposals/7", headers=_headers(VOTER1))
    assert missing.status_code == 404
    assert missing.json()["error"] == "InvalidProposalIndex"

    genesis = client_with_proposals.get("/election/proposals/0", headers=_headers(VOTER1))
    assert genesis.json() == {"description": "GENESIS", "vote_count": 0}


def test_vote_before_session_is_conflict(client_with_proposals: TestClient) -> None:
    response = client_with_proposals.post(
        "/election/votes", json={"proposal_id": 0}, headers=_headers(VOTER1)
    )
    assert response.status_code == 409
    assert response.json()["error"] == "VotingClosed"


def test_full_election_over_http(client_with_proposals: TestClient) -> None:
    client = client_with_proposals
    assert client.post("/election/workflow/proposals/end", headers=_headers(OWNER)).status_code == 200
    assert client.post("/election/workflow/voting/start", headers=_headers(OWNER)).status_code == 200

    voto = client.post("/election/votes", json={"proposal_id": 1}, headers=_headers(VOTER1))
    assert voto.status_code == 201
    assert voto.json() == {"is_registered": True, "has_voted": True, "voted_proposal_id": 1}
    client.post("/election/votes", json={"proposal_id": 2}, headers=_headers(VOTER2))
    client.post("/election/votes", json={"proposal_id": 2}, headers=_headers(VOTER3))

    repetido = client.post("/election/votes", json={"proposal_id": 1}, headers=_headers(VOTER1))
    assert repetido.status_code == 409
    assert repetido.json()["error"] == "AlreadyVoted"

    assert client.post("/election/workflow/voting/end", headers=_headers(OWNER)).status_code == 200
    tally = client.post("/election/tally", headers=_headers(OWNER))
    assert tally.status_code == 200
    assert tally.json()["winning_proposal_id"] == 2
    assert tally.json()["workflow_status_name"] == "VotesTallied"


def test_negative_proposal_id_is_unknown_proposal(client_with_proposals: TestClient) -> None:
    client = client_with_proposals
    client.post("/election/workflow/proposals/end", headers=_headers(OWNER))
    client.post("/election/workflow/voting/start", headers=_headers(OWNER))

    response = client.post("/election/votes", json={"proposal_id": -1}, headers=_headers(VOTER1))
    assert response.status_code == 404
    assert response.json()["error"] == "InvalidProposalIndex"
    voter = client.get(f"/election/voters/{VOTER1}", headers=_headers(VOTER1)).json()
    assert voter["has_voted"] is False
