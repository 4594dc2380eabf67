"""Errores del dominio electoral de Urna."""

from __future__ import annotations


class ElectionError(Exception):
    """Error base para cualquier rechazo de una operación electoral."""


class Unauthorized(ElectionError):
    """El llamador no es el administrador de la elección."""

    def __init__(self, caller: str) -> None:
        super().__init__(f"La cuenta '{caller}' no está autorizada.")
        self.caller = caller


class InvalidPhaseTransition(ElectionError):
    """Transición de fase fuera de orden."""


class UnauthorizedTransition(Unauthorized, InvalidPhaseTransition):
    """Transición de fase solicitada por alguien distinto del administrador."""


class PhaseClosed(ElectionError):
    """La fase actual no admite la operación solicitada."""


class RegistrationClosed(PhaseClosed):
    """El registro de votantes no está abierto."""


class ProposalsClosed(PhaseClosed):
    """El registro de propuestas no está abierto."""


class VotingClosed(PhaseClosed):
    """La sesión de votación no está abierta."""


class AlreadyRegistered(ElectionError):
    """La identidad ya figura en el padrón."""


class NotAVoter(ElectionError):
    """El llamador no es un votante registrado."""


class EmptyProposal(ElectionError):
    """La descripción de la propuesta está vacía."""


class InvalidProposalIndex(ElectionError):
    """El índice no corresponde a ninguna propuesta."""


class AlreadyVoted(ElectionError):
    """El votante ya emitió su voto."""


__all__ = [
    "AlreadyRegistered",
    "AlreadyVoted",
    "ElectionError",
    "EmptyProposal",
    "InvalidPhaseTransition",
    "InvalidProposalIndex",
    "NotAVoter",
    "PhaseClosed",
    "ProposalsClosed",
    "RegistrationClosed",
    "Unauthorized",
    "UnauthorizedTransition",
    "VotingClosed",
]
