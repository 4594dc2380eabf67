"""Utilidades de seguridad para Urna."""

from __future__ import annotations

import hashlib
from typing import Final

MAX_IDENTITY_LENGTH: Final[int] = 128


def validate_identity(raw: str) -> str:
    """Valida una identidad de llamador recibida desde el entorno.

    Las identidades son opacas: no se normalizan, solo se rechazan las vacías,
    las demasiado largas y las que contienen caracteres no imprimibles.
    """

    if not raw:
        raise ValueError("La identidad no puede estar vacía.")
    if len(raw) > MAX_IDENTITY_LENGTH:
        raise ValueError("La identidad excede la longitud permitida.")
    if not raw.isprintable() or raw != raw.strip():
        raise ValueError("La identidad contiene caracteres no permitidos.")
    return raw


def hash_text_sha256(text: str) -> str:
    """Calcula el hash SHA-256 de un texto en UTF-8 y lo devuelve en hexadecimal."""

    digest = hashlib.sha256(text.encode("utf-8"))
    return digest.hexdigest()


def chain_hash(previous_hash: str, payload: str) -> str:
    """Encadena ``payload`` al hash anterior del ledger."""

    return hash_text_sha256(f"{previous_hash}::{payload}")


__all__ = ["MAX_IDENTITY_LENGTH", "chain_hash", "hash_text_sha256", "validate_identity"]
