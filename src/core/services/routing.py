"""Routing headers OCPI 2.2 (`OCPI-from-*` / `OCPI-to-*`)."""

from __future__ import annotations

from core.domain.models import SESSION_PARTY_ID_PATTERN
from core.errors import InvalidPartyIdError

FROM_COUNTRY_CODE_HEADER = "OCPI-from-country-code"
FROM_PARTY_ID_HEADER = "OCPI-from-party-id"
TO_COUNTRY_CODE_HEADER = "OCPI-to-country-code"
TO_PARTY_ID_HEADER = "OCPI-to-party-id"


def _split_party(side: str, party: str) -> tuple[str, str]:
    if not SESSION_PARTY_ID_PATTERN.match(party):
        raise InvalidPartyIdError(side, party)
    return party[:2], party[2:]


def routing_headers(
    from_party_id: str | None = None,
    to_party_id: str | None = None,
) -> dict[str, str]:
    """Deriva los routing headers de los party ids de emisor/receptor.

    Un party id ausente (o vacío) no genera headers. Uno inválido lanza
    `InvalidPartyIdError` antes de que se haga ninguna petición.
    """

    headers: dict[str, str] = {}
    if from_party_id:
        country, party = _split_party("from", from_party_id)
        headers[FROM_COUNTRY_CODE_HEADER] = country
        headers[FROM_PARTY_ID_HEADER] = party
    if to_party_id:
        country, party = _split_party("to", to_party_id)
        headers[TO_COUNTRY_CODE_HEADER] = country
        headers[TO_PARTY_ID_HEADER] = party
    return headers
