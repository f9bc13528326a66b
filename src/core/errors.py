"""Errores del cliente OCPI.

Por qué una jerarquía propia:
- La CLI distingue "sesión ausente", "party id inválido", "HTTP error" y
  "módulo no servido" para dar mensajes útiles.
- Los fallos de conexión (`httpx.TransportError`) NO se envuelven: se
  propagan tal cual para no confundirlos con problemas de autenticación.
"""

from __future__ import annotations

from pathlib import Path


class OcpiError(Exception):
    """Base de todos los errores propios del cliente."""


class InvalidPartyIdError(OcpiError, ValueError):
    """Party id con formato inválido; se detecta antes de cualquier I/O de red."""

    def __init__(self, side: str, value: str) -> None:
        super().__init__(f"invalid {side} party ID: [{value}]")
        self.side = side
        self.value = value


class OcpiTransportError(OcpiError):
    """La plataforma respondió con un status HTTP de error (resultado final)."""

    def __init__(self, status_code: int, body: str, url: str) -> None:
        super().__init__(f"HTTP {status_code} from {url}")
        self.status_code = status_code
        self.body = body
        self.url = url


class OcpiDecodeError(OcpiError):
    """Respuesta 2xx cuyo body no es un sobre JSON OCPI."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"undecodable OCPI response from {url}: {reason}")
        self.url = url
        self.reason = reason


class ModuleNotServedError(OcpiError):
    """La sesión no tiene ningún endpoint (no RECEIVER) para el módulo."""

    def __init__(self, module: str) -> None:
        super().__init__(f"no endpoint found for module {module}")
        self.module = module


class SessionNotFoundError(OcpiError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"no OCPI session stored at {path}")
        self.path = path


class SessionFileError(OcpiError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"invalid OCPI session file {path}: {reason}")
        self.path = path
        self.reason = reason
