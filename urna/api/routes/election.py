"""Rutas de FastAPI para la elección."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from pydantic import BaseModel, Field

from urna.common.security import validate_identity
from urna.election.election import Election
from urna.election.models import Proposal, Voter

router = APIRouter(prefix="/election", tags=["election"])


class VoterPayload(BaseModel):
    identity: str = Field(..., min_length=1)


class ProposalPayload(BaseModel):
    # Sin min_length: la elección decide qué es una propuesta vacía.
    description: str


class ProposalCreated(BaseModel):
    proposal_id: int


class VotePayload(BaseModel):
    # Sin cota inferior: un índice negativo es una propuesta inexistente.
    proposal_id: int


class ElectionStatus(BaseModel):
    owner: str
    workflow_status: int
    workflow_status_name: str
    winning_proposal_id: int
    proposal_count: int


def get_election(request: Request) -> Election:
    return request.app.state.election


def get_caller(x_caller_id: Optional[str] = Header(default=None)) -> str:
    """Identidad del llamador provista por el entorno de ejecución."""

    if not x_caller_id:
        raise HTTPException(status_code=401, detail="Falta la cabecera X-Caller-ID.")
    try:
        return validate_identity(x_caller_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _status(election: Election) -> ElectionStatus:
    fase = election.workflow_status
    return ElectionStatus(
        owner=election.owner,
        workflow_status=int(fase),
        workflow_status_name=fase.name,
        winning_proposal_id=election.winning_proposal_id,
        proposal_count=election.proposal_count,
    )


@router.get("/status", response_model=ElectionStatus)
def election_status(election: Election = Depends(get_election)) -> ElectionStatus:  # noqa: B008
    """Fase actual, administrador y propuesta ganadora."""

    return _status(election)


@router.post("/voters", response_model=Voter, status_code=status.HTTP_201_CREATED)
def add_voter(
    payload: VoterPayload,
    caller: str = Depends(get_caller),  # noqa: B008
    election: Election = Depends(get_election),  # noqa: B008
) -> Voter:
    """Inscribe un votante. Solo el administrador."""

    return election.add_voter(caller, payload.identity)


@router.get("/voters/{identity}", response_model=Voter)
def get_voter(
    identity: str,
    caller: str = Depends(get_caller),  # noqa: B008
    election: Election = Depends(get_election),  # noqa: B008
) -> Voter:
    return election.get_voter(caller, identity)


@router.post("/proposals", response_model=ProposalCreated, status_code=status.HTTP_201_CREATED)
def add_proposal(
    payload: ProposalPayload,
    caller: str = Depends(get_caller),  # noqa: B008
    election: Election = Depends(get_election),  # noqa: B008
) -> ProposalCreated:
    """Envía una propuesta durante la fase de propuestas."""

    return ProposalCreated(proposal_id=election.add_proposal(caller, payload.description))


@router.get("/proposals/{index}", response_model=Proposal)
def get_one_proposal(
    index: int,
    caller: str = Depends(get_caller),  # noqa: B008
    election: Election = Depends(get_election),  # noqa: B008
) -> Proposal:
    return election.get_one_proposal(caller, index)


@router.post("/workflow/proposals/start", response_model=ElectionStatus)
def start_proposals_registering(
    caller: str = Depends(get_caller),  # noqa: B008
    election: Election = Depends(get_election),  # noqa: B008
) -> ElectionStatus:
    election.start_proposals_registering(caller)
    return _status(election)


@router.post("/workflow/proposals/end", response_model=ElectionStatus)
def end_proposals_registering(
    caller: str = Depends(get_caller),  # noqa: B008
    election: Election = Depends(get_election),  # noqa: B008
) -> ElectionStatus:
    election.end_proposals_registering(caller)
    return _status(election)


@router.post("/workflow/voting/start", response_model=ElectionStatus)
def start_voting_session(
    caller: str = Depends(get_caller),  # noqa: B008
    election: Election = Depends(get_election),  # noqa: B008
) -> ElectionStatus:
    election.start_voting_session(caller)
    return _status(election)


@router.post("/workflow/voting/end", response_model=ElectionStatus)
def end_voting_session(
    caller: str = Depends(get_caller),  # noqa: B008
    election: Election = Depends(get_election),  # noqa: B008
) -> ElectionStatus:
    election.end_voting_session(caller)
    return _status(election)


@router.post("/votes", status_code=status.HTTP_201_CREATED, response_model=Voter)
def set_vote(
    payload: VotePayload,
    caller: str = Depends(get_caller),  # noqa: B008
    election: Election = Depends(get_election),  # noqa: B008
) -> Voter:
    """Emite el único voto del llamador y devuelve su registro actualizado."""

    election.set_vote(caller, payload.proposal_id)
    return election.get_voter(caller, caller)


@router.post("/tally", response_model=ElectionStatus)
def tally_votes(
    caller: str = Depends(get_caller),  # noqa: B008
    election: Election = Depends(get_election),  # noqa: B008
) -> ElectionStatus:
    """Escruta los votos y publica la propuesta ganadora."""

    election.tally_votes(caller)
    return _status(election)


__all__ = ["router"]
