"""Codificación del header `Authorization` OCPI.

Por qué dos codificaciones:
- OCPI 2.2 exige el token en base64; 2.1.1 y anteriores lo envían tal cual.
- Hay plataformas que no siguen su propia versión, así que la preferencia
  por versión solo decide qué se intenta *primero*.
"""

from __future__ import annotations

import base64

from core.domain.models import OcpiVersion


def auth_header_value(token: str, encode: bool) -> str:
    """Valor literal del header: `Token <token>` o `Token <base64(token)>`."""

    if encode:
        token = base64.b64encode(token.encode("utf-8")).decode("ascii")
    return f"Token {token}"


def prefers_encoded_token(version: OcpiVersion | str | None) -> bool:
    if version is None:
        return False
    try:
        return OcpiVersion(version).prefers_encoded_token()
    except ValueError:
        return False
