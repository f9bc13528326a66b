import httpx
import pytest

from core.domain.models import OcpiEndpoint, OcpiResponse, OcpiRole, PageCursor
from core.domain.modules import ModuleID
from core.errors import ModuleNotServedError, OcpiTransportError
from core.interfaces.object_stream import ObjectStream
from core.services.page_stream import PageStream, StreamState, resolve_module_endpoint


class ScriptedPages:
    """Serves pages keyed by offset and records every fetch."""

    def __init__(self, pages: dict[int, OcpiResponse]) -> None:
        self.pages = pages
        self.calls: list[tuple[str, PageCursor]] = []

    async def __call__(self, url: str, cursor: PageCursor) -> OcpiResponse:
        self.calls.append((url, cursor))
        return self.pages[cursor.offset]


def _page(ids, next_page=None):
    return OcpiResponse(data=[{"id": i} for i in ids], status_code=1000, next_page=next_page)


def _three_pages():
    return ScriptedPages(
        {
            0: _page(range(0, 20), PageCursor(offset=20, limit=20)),
            20: _page(range(20, 40), PageCursor(offset=40, limit=20)),
            40: _page(range(40, 45)),
        }
    )


@pytest.mark.asyncio
async def test_three_chained_pages_in_order(make_session):
    fetcher = _three_pages()
    stream = PageStream(make_session(), ModuleID.SESSIONS, fetcher)

    items = []
    while not stream.exhausted:
        items.extend(await stream.pull(20))

    assert [o["id"] for o in items] == list(range(45))
    assert len(fetcher.calls) == 3
    assert [c for _, c in fetcher.calls] == [
        PageCursor(offset=0, limit=20),
        PageCursor(offset=20, limit=20),
        PageCursor(offset=40, limit=20),
    ]
    assert stream.pages_fetched == 3


@pytest.mark.asyncio
async def test_one_page_per_pull(make_session):
    fetcher = _three_pages()
    stream = PageStream(make_session(), ModuleID.SESSIONS, fetcher)

    assert stream.state is StreamState.NOT_STARTED
    first = await stream.pull(20)
    assert len(first) == 20
    assert len(fetcher.calls) == 1
    assert stream.state is StreamState.AT_CURSOR
    assert stream.cursor == PageCursor(offset=20, limit=20)


@pytest.mark.asyncio
async def test_single_page_terminates_without_further_fetch(make_session):
    fetcher = ScriptedPages({0: _page(["a", "b"])})
    stream = PageStream(make_session(), ModuleID.TARIFFS, fetcher)

    assert [o["id"] for o in await stream.pull(10)] == ["a", "b"]
    assert stream.exhausted
    assert len(fetcher.calls) == 1


@pytest.mark.asyncio
async def test_pull_after_exhaustion_is_a_no_op(make_session):
    fetcher = ScriptedPages({0: _page(["a"])})
    stream = PageStream(make_session(), ModuleID.TARIFFS, fetcher)
    await stream.pull()

    assert await stream.pull() == []
    assert await stream.pull(50) == []
    assert len(fetcher.calls) == 1


@pytest.mark.asyncio
async def test_first_page_uses_default_page_size(make_session):
    fetcher = ScriptedPages({0: _page([])})
    stream = PageStream(make_session(), ModuleID.TARIFFS, fetcher, page_size=7)
    await stream.pull()

    assert fetcher.calls[0][1] == PageCursor(offset=0, limit=7)


@pytest.mark.asyncio
async def test_page_without_data_is_empty(make_session):
    fetcher = ScriptedPages({0: OcpiResponse(status_code=1000)})
    stream = PageStream(make_session(), ModuleID.TARIFFS, fetcher)

    assert await stream.collect() == []
    assert stream.exhausted


@pytest.mark.asyncio
async def test_async_iteration_yields_everything(make_session):
    stream = PageStream(make_session(), ModuleID.SESSIONS, _three_pages(), page_size=20)

    ids = [obj["id"] async for obj in stream]
    assert ids == list(range(45))


@pytest.mark.asyncio
async def test_module_not_served(make_session):
    fetcher = ScriptedPages({})
    stream = PageStream(make_session(), ModuleID.CDRS, fetcher)

    with pytest.raises(ModuleNotServedError) as excinfo:
        await stream.pull()
    assert excinfo.value.module == "cdrs"
    assert fetcher.calls == []
    assert stream.exhausted
    assert await stream.pull() == []


@pytest.mark.asyncio
async def test_receiver_endpoint_is_skipped(make_session):
    session = make_session(
        endpoints=[
            OcpiEndpoint(identifier="sessions", url="https://cpo.example/receiver", role=OcpiRole.RECEIVER),
            OcpiEndpoint(identifier="sessions", url="https://cpo.example/sender", role=OcpiRole.SENDER),
        ]
    )
    fetcher = ScriptedPages({0: _page([])})
    await PageStream(session, ModuleID.SESSIONS, fetcher).pull()

    assert fetcher.calls[0][0] == "https://cpo.example/sender"


def test_resolve_endpoint_without_role(make_session):
    session = make_session(
        "2.1.1",
        endpoints=[OcpiEndpoint(identifier="locations", url="https://cpo.example/locations")],
    )
    assert resolve_module_endpoint(session, ModuleID.LOCATIONS).url == "https://cpo.example/locations"
    assert resolve_module_endpoint(session, "locations") is not None
    assert resolve_module_endpoint(session, ModuleID.TOKENS) is None


def test_only_receiver_endpoint_means_not_served(make_session):
    session = make_session(
        endpoints=[OcpiEndpoint(identifier="tokens", url="https://cpo.example/t", role=OcpiRole.RECEIVER)]
    )
    assert resolve_module_endpoint(session, ModuleID.TOKENS) is None


def test_page_stream_satisfies_object_stream(make_session):
    stream = PageStream(make_session(), ModuleID.SESSIONS, ScriptedPages({}))
    assert isinstance(stream, ObjectStream)


class FailingSecondPage(ScriptedPages):
    def __init__(self, error: Exception) -> None:
        super().__init__(
            {
                0: _page(["a", "b"], PageCursor(offset=2, limit=2)),
                2: _page(["c"]),
            }
        )
        self.error = error
        self.fail = True

    async def __call__(self, url, cursor):
        if cursor.offset == 2 and self.fail:
            self.calls.append((url, cursor))
            raise self.error
        return await super().__call__(url, cursor)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        OcpiTransportError(503, "down", "https://cpo.example/ocpi/sessions"),
        httpx.ConnectError("connection refused"),
    ],
)
async def test_failure_on_second_page_propagates_and_keeps_cursor(make_session, error):
    fetcher = FailingSecondPage(error)
    stream = PageStream(make_session(), ModuleID.SESSIONS, fetcher)

    assert [o["id"] for o in await stream.pull(2)] == ["a", "b"]
    with pytest.raises(type(error)):
        await stream.pull()

    assert stream.state is StreamState.AT_CURSOR
    assert stream.cursor == PageCursor(offset=2, limit=2)
    assert stream.pages_fetched == 1

    fetcher.fail = False
    assert [o["id"] for o in await stream.pull()] == ["c"]
    assert [c.offset for _, c in fetcher.calls] == [0, 2, 2]
    assert stream.exhausted
