"""Control de acceso del administrador de la elección."""

from __future__ import annotations

import logging

from urna.election.errors import Unauthorized

logger = logging.getLogger("urna.election.access")


class AccessControl:
    """Identifica al administrador fijado al crear la elección."""

    def __init__(self, owner: str) -> None:
        if not owner:
            raise ValueError("El administrador debe tener una identidad.")
        self._owner = owner

    @property
    def owner(self) -> str:
        return self._owner

    def is_admin(self, caller: str) -> bool:
        return caller == self._owner

    def require_admin(
        self, caller: str, *, error: type[Unauthorized] = Unauthorized
    ) -> None:
        """Rechaza al llamador si no es el administrador."""

        if not self.is_admin(caller):
            logger.warning("acceso_denegado", extra={"caller": caller})
            raise error(caller)


__all__ = ["AccessControl"]
