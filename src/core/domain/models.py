"""Modelos del dominio OCPI (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- La sesión llega de un fichero JSON externo: validar en el borde evita que
  un endpoint mal formado llegue al motor de peticiones.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

# Formato estricto de party id tal como se guarda en la sesión (p.ej. "NLABC").
SESSION_PARTY_ID_PATTERN = re.compile(r"^[A-Z]{2}[A-Z0-9]{3}$")


class OcpiVersion(str, Enum):
    """Protocol versions a platform may negotiate."""

    V2_0 = "2.0"
    V2_1 = "2.1"
    V2_1_1 = "2.1.1"
    V2_2 = "2.2"
    V2_2_1 = "2.2.1"

    def prefers_encoded_token(self) -> bool:
        """Whether the first auth attempt should base64-encode the token."""

        return self in (OcpiVersion.V2_2, OcpiVersion.V2_2_1)

    def has_routing_headers(self) -> bool:
        """Routing headers (OCPI-from-*/OCPI-to-*) only exist since 2.2."""

        return self in (OcpiVersion.V2_2, OcpiVersion.V2_2_1)


class OcpiRole(str, Enum):
    SENDER = "SENDER"
    RECEIVER = "RECEIVER"


class OcpiEndpoint(BaseModel):
    """Endpoint publicado por la plataforma para un módulo."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    identifier: str = Field(
        ...,
        min_length=1,
        description="Identificador del módulo (p.ej. 'sessions', 'tariffs').",
    )
    url: str = Field(
        ...,
        min_length=1,
        description="URL absoluta del módulo.",
    )
    role: OcpiRole | None = Field(
        default=None,
        description="Rol del endpoint (solo 2.2+). Los RECEIVER aceptan datos, no los sirven.",
    )


class OcpiSession(BaseModel):
    """Sesión contra una plataforma OCPI.

    Por qué inmutable:
    - Se lee una vez por operación lógica y se comparte (solo lectura) entre
      streams concurrentes de distintos módulos.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    token: str = Field(
        ...,
        min_length=1,
        description="Token de credenciales (sin codificar).",
    )
    party_id: str = Field(
        ...,
        alias="partyId",
        description="Country code + party id propios (p.ej. 'NLABC').",
    )
    version: OcpiVersion = Field(
        ...,
        description="Versión OCPI negociada con la plataforma.",
    )
    endpoints: list[OcpiEndpoint] = Field(
        default_factory=list,
        description="Endpoints de módulos publicados por la plataforma.",
    )


class PageCursor(BaseModel):
    """Dónde continuar una lectura paginada."""

    model_config = ConfigDict(frozen=True)

    offset: int = Field(..., ge=0)
    limit: int = Field(..., gt=0)


class OcpiResponse(BaseModel):
    """Sobre JSON que devuelve toda llamada OCPI exitosa.

    Nota:
    - `next_page` no viene en el body: se deriva de la cabecera `Link`.
    - Somos permisivos: hay plataformas que omiten `timestamp` o `data`.
    """

    model_config = ConfigDict(extra="ignore")

    data: Any = Field(
        default=None,
        description="Carga útil; en GETs paginados, una lista de objetos.",
    )
    status_code: int | None = Field(
        default=None,
        description="Código de estado OCPI (1000 = éxito genérico).",
    )
    status_message: str | None = None
    timestamp: str | None = None
    next_page: PageCursor | None = Field(
        default=None,
        description="Cursor de la siguiente página, si la hay.",
    )

    def page_items(self) -> list[dict[str, Any]]:
        """Objetos de la página en el orden del servidor (vacío si no hay lista)."""

        if isinstance(self.data, list):
            return list(self.data)
        return []
