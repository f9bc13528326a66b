"""Resultado etiquetado de una llamada HTTP OCPI.

Por qué un resultado etiquetado:
- El reintento con la codificación alternativa depende de *qué* falló.
  Despachar por `kind` es explícito y no depende de inspeccionar tipos de
  excepción de la librería HTTP.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Union

from core.domain.models import OcpiResponse
from core.errors import OcpiTransportError


@dataclass(frozen=True)
class Success:
    response: OcpiResponse
    kind: Literal["success"] = "success"

    def unwrap(self) -> OcpiResponse:
        return self.response


@dataclass(frozen=True)
class TransportFailure:
    """El servidor respondió, pero con un status de error."""

    status_code: int
    body: str
    url: str
    kind: Literal["transport_failure"] = "transport_failure"

    def may_be_auth_problem(self) -> bool:
        # Cualquier 4xx: la codificación del token puede ser la causa.
        return 400 <= self.status_code < 500

    def unwrap(self) -> OcpiResponse:
        raise OcpiTransportError(self.status_code, self.body, self.url)


@dataclass(frozen=True)
class ConnectionFailure:
    """No hubo respuesta (DNS, conexión rechazada, timeout...)."""

    cause: Exception
    kind: Literal["connection_failure"] = "connection_failure"

    def unwrap(self) -> OcpiResponse:
        raise self.cause


RequestOutcome = Union[Success, TransportFailure, ConnectionFailure]
