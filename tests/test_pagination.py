import httpx

from core.domain.models import PageCursor
from core.services.pagination import next_page_from_links, next_page_from_response


def _response(link: str | None) -> httpx.Response:
    headers = {"Link": link} if link is not None else {}
    return httpx.Response(200, headers=headers, request=httpx.Request("GET", "https://cpo.example/ocpi/sessions"))


def test_next_link_parsed():
    resp = _response('<https://cpo.example/ocpi/sessions?offset=20&limit=10>; rel="next"')
    assert next_page_from_response(resp) == PageCursor(offset=20, limit=10)


def test_next_link_among_other_relations():
    resp = _response(
        '<https://cpo.example/ocpi/sessions?offset=0&limit=10>; rel="first", '
        '<https://cpo.example/ocpi/sessions?offset=30&limit=10>; rel="next"'
    )
    assert next_page_from_response(resp) == PageCursor(offset=30, limit=10)


def test_missing_header_means_no_next_page():
    assert next_page_from_response(_response(None)) is None


def test_no_next_relation_means_no_next_page():
    resp = _response('<https://cpo.example/ocpi/sessions?offset=0&limit=10>; rel="first"')
    assert next_page_from_response(resp) is None


def test_garbage_header_means_no_next_page():
    assert next_page_from_response(_response("not a link header")) is None


def test_non_numeric_offset_means_no_next_page():
    links = {"next": {"url": "https://cpo.example/x?offset=abc&limit=10", "rel": "next"}}
    assert next_page_from_links(links) is None


def test_missing_limit_means_no_next_page():
    links = {"next": {"url": "https://cpo.example/x?offset=10", "rel": "next"}}
    assert next_page_from_links(links) is None


def test_invalid_cursor_values_mean_no_next_page():
    assert next_page_from_links({"next": {"url": "/x?offset=-1&limit=10"}}) is None
    assert next_page_from_links({"next": {"url": "/x?offset=0&limit=0"}}) is None


def test_empty_links():
    assert next_page_from_links(None) is None
    assert next_page_from_links({}) is None
