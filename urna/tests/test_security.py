"""Pruebas para los componentes de seguridad."""

from __future__ import annotations

import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from urna.api.main import status_for
from urna.api.middleware.security import SecurityMiddleware
from urna.common.security import chain_hash, hash_text_sha256, validate_identity
from urna.election import errors


def _build_app(max_bytes: int = 32) -> FastAPI:
    app = FastAPI()
    logger = logging.getLogger("test-security")
    logger.setLevel(logging.DEBUG)
    app.add_middleware(
        SecurityMiddleware,
        max_payload_bytes=max_bytes,
        instance_id="instancia-prueba",
        logger=logger,
    )

    @app.post("/echo")
    async def echo(
        payload: dict[str, object],
    ) -> dict[str, object]:  # pragma: no cover - indirecto
        return payload

    return app


def test_payload_demasiado_grande_retorna_413() -> None:
    client = TestClient(_build_app(max_bytes=10))

    response = client.post("/echo", json={"texto": "x" * 50})

    assert response.status_code == 413
    assert response.headers["X-Instance-ID"] == "instancia-prueba"


def test_caller_con_caracteres_de_control_retorna_400() -> None:
    client = TestClient(_build_app(max_bytes=1024))

    response = client.post("/echo", json={}, headers={"X-Caller-ID": "ana\tmaria"})

    assert response.status_code == 400


def test_solicitud_valida_pasa() -> None:
    client = TestClient(_build_app(max_bytes=1024))

    response = client.post("/echo", json={"a": 1}, headers={"X-Caller-ID": "ana"})

    assert response.status_code == 200
    assert response.json() == {"a": 1}


@pytest.mark.parametrize("identidad", ["", " ana", "ana\n", "x" * 129])
def test_validate_identity_rechaza(identidad: str) -> None:
    with pytest.raises(ValueError):
        validate_identity(identidad)


def test_validate_identity_no_normaliza() -> None:
    assert validate_identity("0xAbC") == "0xAbC"


def test_hash_text_sha256_reproduce_hash_conocido() -> None:
    assert (
        hash_text_sha256("seguridad")
        == "1ea9f394f510e2beb43cb0b317258b09bce9f4fccef69407360483690ac9b746"
    )


def test_chain_hash_depende_del_anterior() -> None:
    assert chain_hash("a", "x") != chain_hash("b", "x")
    assert chain_hash("a", "x") == hash_text_sha256("a::x")


def test_status_for_sigue_la_jerarquia() -> None:
    assert status_for(errors.UnauthorizedTransition("x")) == 403
    assert status_for(errors.RegistrationClosed("cerrado")) == 409
    assert status_for(errors.InvalidProposalIndex("9")) == 404
    assert status_for(errors.EmptyProposal("vacía")) == 400
