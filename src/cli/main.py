"""CLI de ocpi-export (Typer).

Comandos:
- `get <module>`: exporta todos los objetos de un módulo como NDJSON.
- `request <url>`: una petición OCPI suelta, imprime el sobre JSON.
- `session show` / `session import`: inspeccionar o guardar la sesión.

La CLI es la única capa que toca el fichero de sesión: lo carga y pasa la
sesión (inmutable) al cliente.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import httpx
import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.http_client import build_async_client
from adapters.json_exporter import export_objects_ndjson, write_ndjson
from adapters.session_store import load_session, save_session
from cli.ui_components import print_session
from core.config import AppSettings
from core.domain.modules import ModuleID
from core.errors import (
    InvalidPartyIdError,
    ModuleNotServedError,
    OcpiError,
    OcpiTransportError,
    SessionFileError,
    SessionNotFoundError,
)
from core.services.request_engine import OcpiClient

app = typer.Typer(no_args_is_help=True, help="Export data from an OCPI platform.")
session_app = typer.Typer(no_args_is_help=True, help="Inspect or store the OCPI session.")
app.add_typer(session_app, name="session")

_console = Console()
_err_console = Console(stderr=True)


class _State:
    settings: AppSettings | None = None

    def current(self) -> AppSettings:
        if self.settings is None:
            self.settings = AppSettings()
        return self.settings


_state = _State()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=_err_console, show_path=False)],
        force=True,
    )


def _fail(message: str, code: int = 1) -> typer.Exit:
    _err_console.print(f"[red]{message}[/red]")
    return typer.Exit(code=code)


def _exit_for(exc: Exception) -> typer.Exit:
    if isinstance(exc, SessionNotFoundError):
        return _fail(f"Not logged in: {exc}", code=2)
    if isinstance(exc, SessionFileError):
        return _fail(str(exc), code=2)
    if isinstance(exc, InvalidPartyIdError):
        return _fail(str(exc), code=2)
    if isinstance(exc, ModuleNotServedError):
        return _fail(str(exc), code=3)
    if isinstance(exc, OcpiTransportError):
        body = exc.body if len(exc.body) <= 500 else exc.body[:500] + "..."
        return _fail(f"{exc}\n{body}", code=4)
    return _fail(str(exc), code=1)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr."),
    session_file: Optional[Path] = typer.Option(
        None,
        "--session-file",
        help="Session file (default: $OCPI_SESSION_FILE or ~/.ocpi).",
    ),
) -> None:
    settings = AppSettings()
    if session_file is not None:
        settings = settings.model_copy(update={"session_file": session_file})
    _state.settings = settings
    _configure_logging("DEBUG" if verbose else settings.log_level)


async def _export(module: ModuleID, output: Path | None, page_size: int | None) -> int:
    settings = _state.current()
    session = load_session(settings.session_file)
    async with build_async_client(settings) as http:
        async with OcpiClient(session, settings, http_client=http) as ocpi:
            stream = ocpi.fetch_module(module, page_size=page_size)
            if output is None:
                return await write_ndjson(stream, sys.stdout)
            return await export_objects_ndjson(stream=stream, output_path=output)


@app.command()
def get(
    module: str = typer.Argument(..., help=f"One of: {', '.join(ModuleID.names())}."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="NDJSON file (default: stdout)."),
    page_size: Optional[int] = typer.Option(None, "--page-size", min=1, help="Objects per page request."),
) -> None:
    """Fetch every object of a module as NDJSON."""

    module_id = ModuleID.from_name(module)
    if module_id is None:
        raise typer.BadParameter(f"unknown module {module!r}; expected one of {ModuleID.names()}")

    try:
        count = asyncio.run(_export(module_id, output, page_size))
    except (OcpiError, httpx.HTTPError, httpx.InvalidURL) as exc:
        raise _exit_for(exc) from exc

    if output is not None:
        _err_console.print(f"[green]Exported {count} {module_id.value} to:[/green] {output}")


async def _single_request(method: str, url: str, from_party: str | None, to_party: str | None) -> dict:
    settings = _state.current()
    session = load_session(settings.session_file)
    async with build_async_client(settings) as http:
        async with OcpiClient(session, settings, http_client=http) as ocpi:
            response = await ocpi.request(method, url, from_party, to_party)  # type: ignore[arg-type]
    return response.model_dump(mode="json", exclude_none=True)


@app.command()
def request(
    url: str = typer.Argument(..., help="Absolute URL of the OCPI resource."),
    method: str = typer.Option("get", "--method", "-X", help="get, post, put or delete."),
    from_party: Optional[str] = typer.Option(None, "--from-party", help="Sender party id, e.g. NLABC."),
    to_party: Optional[str] = typer.Option(None, "--to-party", help="Receiver party id, e.g. DEXYZ."),
) -> None:
    """Send a single OCPI request and print the response envelope."""

    method = method.strip().lower()
    if method not in ("get", "post", "put", "delete"):
        raise typer.BadParameter("method must be one of get, post, put, delete")

    try:
        payload = asyncio.run(_single_request(method, url, from_party, to_party))
    except (OcpiError, httpx.HTTPError, httpx.InvalidURL) as exc:
        raise _exit_for(exc) from exc

    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


@session_app.command("show")
def session_show() -> None:
    """Show the stored session (token masked)."""

    try:
        session = load_session(_state.current().session_file)
    except OcpiError as exc:
        raise _exit_for(exc) from exc
    print_session(_console, session)


@session_app.command("import")
def session_import(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file with a session."),
) -> None:
    """Validate a session JSON file and store it as the current session."""

    try:
        session = load_session(source)
    except OcpiError as exc:
        raise _exit_for(exc) from exc

    path = save_session(session, _state.current().session_file)
    _console.print(f"[green]Saved OCPI session to:[/green] {path}")


def run() -> None:
    app()
