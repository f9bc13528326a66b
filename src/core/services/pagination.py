"""Paginación OCPI basada en la cabecera `Link`.

La plataforma indica la siguiente página con `Link: <url?offset=..&limit=..>; rel="next"`.
Es best-effort: cualquier metadata ilegible equivale a "no hay más páginas".
"""

from __future__ import annotations

import logging
from typing import Mapping

import httpx

from core.domain.models import PageCursor

logger = logging.getLogger(__name__)


def next_page_from_links(links: Mapping[str, Mapping[str, str]] | None) -> PageCursor | None:
    """Extrae offset/limit del enlace `rel="next"`, o `None` si no hay uno usable."""

    if not links:
        return None
    link = links.get("next")
    if not link:
        return None
    url = link.get("url")
    if not url:
        return None

    try:
        params = httpx.URL(url).params
        return PageCursor(offset=int(params["offset"]), limit=int(params["limit"]))
    except (KeyError, ValueError, TypeError, httpx.InvalidURL) as exc:
        logger.debug("Ignoring unusable next link %r: %s", url, exc)
        return None


def next_page_from_response(response: httpx.Response) -> PageCursor | None:
    try:
        links = response.links
    except (ValueError, IndexError) as exc:
        logger.debug("Unparseable Link header %r: %s", response.headers.get("link"), exc)
        return None
    return next_page_from_links(links)
