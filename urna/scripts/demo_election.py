"""Script que recorre una elección completa en memoria."""

from __future__ import annotations

from urna.election.election import Election

OWNER = "admin"
VOTANTES = ["ana", "bruno", "carla"]
PROPUESTAS = {
    "ana": "Ampliar la biblioteca del barrio",
    "bruno": "Instalar bicicleteros en la plaza",
}
VOTOS = {"ana": 1, "bruno": 1, "carla": 2}


def ejecutar() -> Election:
    """Registra votantes, propuestas y votos, y escruta el resultado."""
    election = Election(owner=OWNER)
    for votante in VOTANTES:
        election.add_voter(OWNER, votante)

    election.start_proposals_registering(OWNER)
    for votante, descripcion in PROPUESTAS.items():
        election.add_proposal(votante, descripcion)
    election.end_proposals_registering(OWNER)

    election.start_voting_session(OWNER)
    for votante, propuesta in VOTOS.items():
        election.set_vote(votante, propuesta)
    election.end_voting_session(OWNER)

    election.tally_votes(OWNER)
    return election


if __name__ == "__main__":  # pragma: no cover - ejecución manual
    resultado = ejecutar()
    ganadora = resultado.get_one_proposal(VOTANTES[0], resultado.winning_proposal_id)
    print(f"Propuesta ganadora #{resultado.winning_proposal_id}: {ganadora.description}")
