"""Modelos inmutables de la elección: votantes, propuestas y fases."""

from __future__ import annotations

from enum import IntEnum

from pydantic import BaseModel, ConfigDict, Field

GENESIS_DESCRIPTION = "GENESIS"


class WorkflowStatus(IntEnum):
    """Fases de la elección en su único orden permitido."""

    RegisteringVoters = 0
    ProposalsRegistrationStarted = 1
    ProposalsRegistrationEnded = 2
    VotingSessionStarted = 3
    VotingSessionEnded = 4
    VotesTallied = 5


class Voter(BaseModel):
    """Registro de un votante. El valor por defecto representa a un desconocido."""

    model_config = ConfigDict(frozen=True)

    is_registered: bool = False
    has_voted: bool = False
    voted_proposal_id: int = Field(default=0, ge=0)


class Proposal(BaseModel):
    """Propuesta enviada durante la fase de propuestas."""

    model_config = ConfigDict(frozen=True)

    description: str
    vote_count: int = Field(default=0, ge=0)


__all__ = ["GENESIS_DESCRIPTION", "Proposal", "Voter", "WorkflowStatus"]
