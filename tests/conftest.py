from __future__ import annotations

import base64
from typing import Any, Callable

import httpx
import pytest

from core.domain.models import OcpiEndpoint, OcpiRole, OcpiSession, OcpiVersion

TOKEN = "secret-token"
ENCODED_TOKEN = base64.b64encode(TOKEN.encode()).decode()


def ocpi_page(
    data: Any,
    *,
    next_url: str | None = None,
    status: int = 200,
) -> httpx.Response:
    headers = {"Link": f'<{next_url}>; rel="next"'} if next_url else {}
    return httpx.Response(
        status,
        json={"data": data, "status_code": 1000, "timestamp": "2024-05-01T12:00:00Z"},
        headers=headers,
    )


class FakePlatform:
    """Records every request and answers with `responder`."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []
        self._responder = responder

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responder(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))

    @property
    def auth_headers(self) -> list[str]:
        return [r.headers["Authorization"] for r in self.requests]


@pytest.fixture
def make_session() -> Callable[..., OcpiSession]:
    def _make(
        version: str = "2.2.1",
        endpoints: list[OcpiEndpoint] | None = None,
        party_id: str = "NLABC",
    ) -> OcpiSession:
        if endpoints is None:
            endpoints = [
                OcpiEndpoint(identifier="sessions", url="https://cpo.example/ocpi/sessions", role=OcpiRole.SENDER),
                OcpiEndpoint(identifier="tariffs", url="https://cpo.example/ocpi/tariffs", role=OcpiRole.SENDER),
            ]
        return OcpiSession(token=TOKEN, party_id=party_id, version=OcpiVersion(version), endpoints=endpoints)

    return _make
