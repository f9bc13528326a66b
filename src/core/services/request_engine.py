"""Motor de peticiones OCPI con reintento por codificación del token.

Por qué reintentar:
- El formato del header `Authorization` cambió entre revisiones de OCPI y
  hay plataformas que no cumplen su propia versión. Un 4xx puede significar
  "codificación equivocada" y no "credenciales inválidas".
- Se hace como mucho UN reintento, con la codificación alternativa. 5xx y
  fallos de conexión no se reintentan nunca.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from adapters.http_client import OcpiRequestMethod, build_async_client, invoke_once
from core.config import AppSettings
from core.domain.models import OcpiResponse, OcpiSession, OcpiVersion, PageCursor
from core.domain.modules import ModuleID
from core.domain.outcome import RequestOutcome
from core.services.credentials import auth_header_value, prefers_encoded_token
from core.services.page_stream import PageStream
from core.services.routing import routing_headers

logger = logging.getLogger(__name__)


async def request_outcome_with_encoding_fallback(
    client: httpx.AsyncClient,
    method: OcpiRequestMethod,
    url: str,
    token: str,
    version: OcpiVersion | str | None,
    routing: Mapping[str, str],
    *,
    params: Mapping[str, Any] | None = None,
) -> RequestOutcome:
    """Primer intento con la codificación preferida; si da 4xx, un segundo con la otra.

    Devuelve el resultado autoritativo: el del segundo intento si lo hubo.
    """

    encode_first = prefers_encoded_token(version)
    first = await invoke_once(
        client, method, url, auth_header_value(token, encode_first), routing, params=params
    )
    if first.kind != "transport_failure" or not first.may_be_auth_problem():
        return first

    logger.debug(
        "HTTP %s with %s token on %s, retrying with %s token",
        first.status_code,
        "encoded" if encode_first else "raw",
        url,
        "raw" if encode_first else "encoded",
    )
    return await invoke_once(
        client, method, url, auth_header_value(token, not encode_first), routing, params=params
    )


async def request_retrying_auth_encoding(
    client: httpx.AsyncClient,
    method: OcpiRequestMethod,
    url: str,
    token: str,
    version: OcpiVersion | str | None = None,
    from_party_id: str | None = None,
    to_party_id: str | None = None,
    *,
    params: Mapping[str, Any] | None = None,
) -> OcpiResponse:
    """Petición OCPI con un token explícito (sin sesión).

    Raises:
        InvalidPartyIdError: party id mal formado; no se llega a la red.
        OcpiTransportError: status de error final.
        httpx.TransportError: sin respuesta del servidor (sin reintento).
    """

    routing = routing_headers(from_party_id, to_party_id)
    outcome = await request_outcome_with_encoding_fallback(
        client, method, url, token, version, routing, params=params
    )
    return outcome.unwrap()


class OcpiClient:
    """Cliente OCPI ligado a una sesión inmutable.

    Se usa como context manager asíncrono para cerrar el `httpx.AsyncClient`:

        async with OcpiClient(session) as ocpi:
            async for tariff in ocpi.fetch_module(ModuleID.TARIFFS):
                ...
    """

    def __init__(
        self,
        session: OcpiSession,
        settings: AppSettings | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._session = session
        self._settings = settings or AppSettings()
        self._owns_client = http_client is None
        self._http = http_client or build_async_client(self._settings)

    @property
    def session(self) -> OcpiSession:
        return self._session

    async def __aenter__(self) -> "OcpiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    def default_from_party_id(self) -> str | None:
        """Party id propio como emisor; solo 2.2+ tiene routing headers."""

        if self._session.version.has_routing_headers():
            return self._session.party_id
        return None

    async def request(
        self,
        method: OcpiRequestMethod,
        url: str,
        from_party_id: str | None = None,
        to_party_id: str | None = None,
        *,
        params: Mapping[str, Any] | None = None,
    ) -> OcpiResponse:
        return await request_retrying_auth_encoding(
            self._http,
            method,
            url,
            self._session.token,
            self._session.version,
            from_party_id,
            to_party_id,
            params=params,
        )

    async def _fetch_page(self, url: str, cursor: PageCursor) -> OcpiResponse:
        return await self.request(
            "get",
            url,
            self.default_from_party_id(),
            params={"offset": cursor.offset, "limit": cursor.limit},
        )

    def fetch_module(self, module: ModuleID, page_size: int | None = None) -> PageStream:
        """Stream perezoso con todos los objetos del módulo."""

        return PageStream(
            self._session,
            module,
            self._fetch_page,
            page_size=page_size or self._settings.page_size,
        )
