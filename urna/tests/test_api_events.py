"""Pruebas de la ruta de auditoría de eventos."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from sqlalchemy import inspect

from urna.api.main import create_app
from urna.common.config import Settings, get_settings
from urna.common.db import engine_of


def _settings(tmp_path: Path, **extra: object) -> Settings:
    update = {
        "ledger_enabled": True,
        "rate_limit": "1000/minute",
        "election_owner": "admin",
        "db_url": f"sqlite:///{tmp_path / 'urna.db'}",
    }
    update.update(extra)
    return get_settings().model_copy(update=update)


@pytest.mark.anyio("asyncio")
async def test_eventos_listan_la_cadena_de_notificaciones(tmp_path: Path) -> None:
    """Cada operación aceptada deja una entrada encadenada en el ledger."""
    app = create_app(_settings(tmp_path))
    transport = ASGITransport(app=app)
    admin = {"X-Caller-ID": "admin"}
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        for idx in range(3):
            await client.post("/election/voters", json={"identity": f"v{idx}"}, headers=admin)
        await client.post("/election/workflow/proposals/start", headers=admin)
        rechazo = await client.post("/election/voters", json={"identity": "tarde"}, headers=admin)
        respuesta = await client.get("/election/events", params={"limit": 10})

    assert rechazo.status_code == 409
    assert respuesta.status_code == 200
    cuerpo = respuesta.json()
    assert cuerpo["chain_valid"] is True
    assert cuerpo["election_id"] == app.state.election.election_id
    assert [item["kind"] for item in cuerpo["items"]] == [
        "VoterRegistered",
        "VoterRegistered",
        "VoterRegistered",
        "WorkflowStatusChange",
    ]
    assert [item["sequence"] for item in cuerpo["items"]] == [1, 2, 3, 4]
    hashes = {item["hash"] for item in cuerpo["items"]}
    assert len(hashes) == 4
    assert cuerpo["items"][3]["payload"]["new_status"] == 1


def test_db_url_configurada_recibe_las_tablas(tmp_path: Path) -> None:
    app = create_app(_settings(tmp_path))
    engine = engine_of(app.state.session_factory)

    assert str(engine.url) == f"sqlite:///{tmp_path / 'urna.db'}"
    assert (tmp_path / "urna.db").exists()
    assert inspect(engine).get_table_names() == ["election_events"]


def test_prod_no_crea_tablas(tmp_path: Path) -> None:
    app = create_app(_settings(tmp_path, env="prod"))

    assert inspect(engine_of(app.state.session_factory)).get_table_names() == []


def test_ledger_deshabilitado_no_expone_eventos(tmp_path: Path) -> None:
    app = create_app(_settings(tmp_path, ledger_enabled=False))

    assert app.state.session_factory is None
    with TestClient(app) as client:
        respuesta = client.get("/election/events")
    assert respuesta.status_code == 404
    assert not (tmp_path / "urna.db").exists()
