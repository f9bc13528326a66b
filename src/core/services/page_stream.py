"""Lectura paginada de un módulo OCPI como secuencia *pull*.

Por qué pull y no push:
- Cada `pull()` trae exactamente una página; el consumidor marca el ritmo y
  nunca se pide más de lo que ha consumido (backpressure natural).
- El estado (sin empezar / en cursor / agotado) es explícito, así el orden
  y el cursor son triviales de razonar.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, AsyncIterator, Awaitable, Callable

from core.domain.models import OcpiEndpoint, OcpiResponse, OcpiRole, OcpiSession, PageCursor
from core.domain.modules import ModuleID
from core.errors import ModuleNotServedError

logger = logging.getLogger(__name__)

PageFetcher = Callable[[str, PageCursor], Awaitable[OcpiResponse]]


def resolve_module_endpoint(session: OcpiSession, module: ModuleID | str) -> OcpiEndpoint | None:
    """Primer endpoint del módulo que no sea RECEIVER (los RECEIVER no sirven datos)."""

    name = module.value if isinstance(module, ModuleID) else module
    for endpoint in session.endpoints:
        if endpoint.identifier == name and endpoint.role is not OcpiRole.RECEIVER:
            return endpoint
    return None


class StreamState(str, Enum):
    NOT_STARTED = "not_started"
    AT_CURSOR = "at_cursor"
    EXHAUSTED = "exhausted"


class PageStream:
    """Secuencia de objetos de un módulo, una página por `pull()`.

    Uso:
        async for obj in stream:
            ...

    o, controlando el tamaño de lote:
        while not stream.exhausted:
            batch = await stream.pull(50)
    """

    def __init__(
        self,
        session: OcpiSession,
        module: ModuleID,
        fetch_page: PageFetcher,
        *,
        page_size: int = 16,
    ) -> None:
        self._session = session
        self._module = module
        self._fetch_page = fetch_page
        self._page_size = page_size

        self._state = StreamState.NOT_STARTED
        self._cursor: PageCursor | None = None
        self._endpoint: OcpiEndpoint | None = None
        self._pages_fetched = 0

    @property
    def module(self) -> ModuleID:
        return self._module

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def cursor(self) -> PageCursor | None:
        return self._cursor

    @property
    def exhausted(self) -> bool:
        return self._state is StreamState.EXHAUSTED

    @property
    def pages_fetched(self) -> int:
        return self._pages_fetched

    async def pull(self, size: int | None = None) -> list[dict[str, Any]]:
        """Trae la siguiente página y devuelve sus objetos en orden.

        `size` solo fija el `limit` de la primera página; las siguientes usan
        el cursor que devuelve la plataforma. Agotado el stream, devuelve
        siempre `[]` sin hacer peticiones.

        Raises:
            ModuleNotServedError: la sesión no sirve el módulo (el stream queda agotado).
        """

        if self._state is StreamState.EXHAUSTED:
            logger.debug("pull() on exhausted %s stream, nothing to do", self._module.value)
            return []

        if self._state is StreamState.NOT_STARTED:
            endpoint = resolve_module_endpoint(self._session, self._module)
            if endpoint is None:
                self._state = StreamState.EXHAUSTED
                raise ModuleNotServedError(self._module.value)
            self._endpoint = endpoint
            cursor = PageCursor(offset=0, limit=size or self._page_size)
        else:
            assert self._cursor is not None
            cursor = self._cursor

        assert self._endpoint is not None
        logger.debug(
            "Fetching %s page offset=%s limit=%s",
            self._module.value,
            cursor.offset,
            cursor.limit,
        )
        page = await self._fetch_page(self._endpoint.url, cursor)
        self._pages_fetched += 1

        items = page.page_items()
        if page.next_page is not None:
            self._cursor = page.next_page
            self._state = StreamState.AT_CURSOR
        else:
            logger.debug("No next page for %s, ending object stream", self._module.value)
            self._cursor = None
            self._state = StreamState.EXHAUSTED
        return items

    async def __aiter__(self) -> AsyncIterator[dict[str, Any]]:
        while not self.exhausted:
            for item in await self.pull():
                yield item

    async def collect(self) -> list[dict[str, Any]]:
        return [item async for item in self]
