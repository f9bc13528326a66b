"""Persistencia de la sesión OCPI en un fichero JSON.

Formato:
    {"session": {"token": "...", "partyId": "NLABC", "version": "2.2.1",
                 "endpoints": [{"identifier": "sessions", "url": "...", "role": "SENDER"}]}}

Nota:
- El fichero contiene el token en claro: se escribe con permisos 0600.
- El Core nunca llama aquí; la CLI carga la sesión y se la pasa al cliente.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from pydantic import ValidationError

from core.domain.models import OcpiSession
from core.errors import SessionFileError, SessionNotFoundError


def load_session(path: Path) -> OcpiSession:
    """Lee y valida la sesión guardada en `path`."""

    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise SessionNotFoundError(path) from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SessionFileError(path, f"not JSON ({exc.msg})") from exc
    if not isinstance(data, dict) or "session" not in data:
        raise SessionFileError(path, "missing 'session' key")

    try:
        return OcpiSession.model_validate(data["session"])
    except ValidationError as exc:
        raise SessionFileError(path, str(exc)) from exc


def save_session(session: OcpiSession, path: Path) -> Path:
    """Escribe la sesión con permisos de solo-propietario."""

    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {"session": session.model_dump(mode="json", by_alias=True, exclude_none=True)}
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as fh:
        fh.write(json.dumps(payload, ensure_ascii=False))
    # os.open no cambia el modo de un fichero que ya existía.
    os.chmod(path, 0o600)
    return path
