"""Ruta de salud del servicio Urna."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Request

router = APIRouter(tags=["status"])


@router.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """Retorna el estado básico del servicio y la fase de la elección."""
    settings = request.app.state.settings
    election = request.app.state.election
    return {
        "status": "ok",
        "instance_id": settings.instance_id,
        "workflow_status": election.workflow_status.name,
        "time": datetime.now(timezone.utc).isoformat(),
    }
