"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas en múltiples comandos.
"""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from core.domain.models import OcpiSession


def mask_token(token: str) -> str:
    """Muestra solo los últimos 4 caracteres del token."""

    if len(token) <= 4:
        return "*" * len(token)
    return "*" * (len(token) - 4) + token[-4:]


def build_session_table(session: OcpiSession) -> Table:
    table = Table(title="OCPI Session", show_header=False)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_row("Party", session.party_id)
    table.add_row("Version", session.version.value)
    table.add_row("Token", mask_token(session.token))
    return table


def build_endpoints_table(session: OcpiSession) -> Table:
    """Endpoints publicados; los RECEIVER se marcan porque no sirven datos."""

    table = Table(title="Endpoints")
    table.add_column("Module", style="cyan", no_wrap=True)
    table.add_column("Role", style="green")
    table.add_column("URL", style="magenta")
    for ep in session.endpoints:
        role = ep.role.value if ep.role else "-"
        table.add_row(ep.identifier, role, ep.url)
    return table


def print_session(console: Console, session: OcpiSession) -> None:
    console.print(build_session_table(session))
    console.print(build_endpoints_table(session))
