"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP/sesión) lean config de forma consistente.

Nota:
- El Core no lee el fichero de sesión: solo conoce su ruta para que la CLI
  se la pase al adaptador `adapters.session_store`.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "ocpi-export"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "ocpi-export"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "ocpi-export"
    return Path.home() / ".config" / "ocpi-export"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def default_session_file() -> Path:
    return Path.home() / ".ocpi"


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="OCPI_EXPORT_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
        populate_by_name=True,
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request del transporte httpx (segundos).",
    )
    user_agent: str = Field(
        default="ocpi-export/0.1 (+https://local)",
        min_length=1,
        description="User-Agent para peticiones a la plataforma OCPI.",
    )
    session_file: Path = Field(
        default_factory=default_session_file,
        # OCPI_SESSION_FILE es el nombre histórico de la variable.
        validation_alias=AliasChoices("OCPI_EXPORT_SESSION_FILE", "OCPI_SESSION_FILE"),
        description="Fichero JSON con la sesión OCPI (token, versión, endpoints).",
    )
    page_size: int = Field(
        default=16,
        gt=0,
        le=10_000,
        description="Número de objetos pedidos por página (limit) en cada pull.",
    )
    log_level: str = Field(
        default="WARNING",
        min_length=1,
        description="Nivel de logging para la CLI (DEBUG, INFO, WARNING...).",
    )
