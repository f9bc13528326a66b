"""Wrapper de httpx para la plataforma OCPI.

Por qué un wrapper:
- Estandariza timeouts, headers y logging de todas las llamadas OCPI.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Literal, Mapping

import httpx
from pydantic import ValidationError

from core.config import AppSettings
from core.domain.models import OcpiResponse
from core.domain.outcome import ConnectionFailure, RequestOutcome, Success, TransportFailure
from core.errors import OcpiDecodeError
from core.services.pagination import next_page_from_response

logger = logging.getLogger(__name__)

OcpiRequestMethod = Literal["get", "post", "put", "delete"]

REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_ID_HEADER = "X-Correlation-ID"


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults para OCPI.

    Por qué un builder:
    - Centraliza timeouts/headers para que todas las llamadas se comporten igual.
    - `transport` permite sustituir la red en tests.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def tracing_headers() -> dict[str, str]:
    """IDs frescos para correlacionar la petición en ambos extremos."""

    return {
        REQUEST_ID_HEADER: str(uuid.uuid4()),
        CORRELATION_ID_HEADER: str(uuid.uuid4()),
    }


def _decode_envelope(response: httpx.Response) -> OcpiResponse:
    url = str(response.request.url)
    if not response.content.strip():
        # 204 y similares en put/delete: sobre vacío.
        return OcpiResponse(next_page=next_page_from_response(response))
    try:
        payload: Any = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise OcpiDecodeError(url, str(exc)) from exc
    if not isinstance(payload, dict):
        raise OcpiDecodeError(url, f"expected a JSON object, got {type(payload).__name__}")

    payload = {k: v for k, v in payload.items() if k != "next_page"}
    try:
        return OcpiResponse.model_validate({**payload, "next_page": next_page_from_response(response)})
    except ValidationError as exc:
        raise OcpiDecodeError(url, str(exc)) from exc


async def invoke_once(
    client: httpx.AsyncClient,
    method: OcpiRequestMethod,
    url: str,
    auth_header_value: str,
    routing: Mapping[str, str] | None = None,
    *,
    params: Mapping[str, Any] | None = None,
) -> RequestOutcome:
    """Hace exactamente una petición HTTP y clasifica el resultado.

    - 2xx: `Success` con el sobre OCPI y el cursor de la siguiente página.
    - status de error: `TransportFailure` con status y body.
    - sin respuesta (`httpx.TransportError`): `ConnectionFailure` con la causa.
    """

    headers = {
        "Authorization": auth_header_value,
        **tracing_headers(),
        **(routing or {}),
    }
    try:
        response = await client.request(method.upper(), url, headers=headers, params=params)
    except httpx.TransportError as exc:
        logger.debug("%s %s failed without response: %r", method.upper(), url, exc)
        return ConnectionFailure(cause=exc)

    logger.debug(
        "%s %s -> HTTP %s (request id %s)",
        method.upper(),
        response.request.url,
        response.status_code,
        headers[REQUEST_ID_HEADER],
    )
    if not response.is_success:
        return TransportFailure(
            status_code=response.status_code,
            body=response.text,
            url=str(response.request.url),
        )
    return Success(response=_decode_envelope(response))
