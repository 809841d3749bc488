from __future__ import annotations

import aiohttp
import pytest
from fakes import FakeHttpSession

from teslamate_telegram._geocode import NominatimClient
from teslamate_telegram.exceptions import GeocodeError


@pytest.mark.asyncio
async def test_reverse_parses_result(http_session: FakeHttpSession) -> None:
    http_session.queue_json({"name": "19, Acton Way", "display_name": "19, Acton Way, Cambridge", "place_id": 1})
    client = NominatimClient(http_session, base_url="https://nominatim.example/")

    result = await client(52.223, 0.116)

    assert result.name == "19, Acton Way"
    assert result.display_name == "19, Acton Way, Cambridge"
    method, url, kwargs = http_session.calls[0]
    assert method == "GET"
    assert url == "https://nominatim.example/reverse"
    assert kwargs["params"] == {"lat": "52.223", "lon": "0.116", "format": "jsonv2", "addressdetails": "0"}


@pytest.mark.asyncio
async def test_reverse_missing_fields_are_empty(http_session: FakeHttpSession) -> None:
    http_session.queue_json({"name": None})
    result = await NominatimClient(http_session).reverse(0.0, 0.0)

    assert result.best_name == ""


@pytest.mark.asyncio
async def test_reverse_nominatim_error(http_session: FakeHttpSession) -> None:
    http_session.queue_json({"error": "Unable to geocode"})

    with pytest.raises(GeocodeError):
        await NominatimClient(http_session).reverse(0.0, 0.0)


@pytest.mark.asyncio
async def test_reverse_http_error(http_session: FakeHttpSession) -> None:
    http_session.queue_json({}, status=503)

    with pytest.raises(GeocodeError) as excinfo:
        await NominatimClient(http_session).reverse(0.0, 0.0)
    assert excinfo.value.status_code == 503


@pytest.mark.asyncio
async def test_reverse_network_error(http_session: FakeHttpSession) -> None:
    http_session.responses.append(aiohttp.ClientConnectionError("refused"))

    with pytest.raises(GeocodeError):
        await NominatimClient(http_session).reverse(0.0, 0.0)


@pytest.mark.asyncio
async def test_reverse_invalid_json(http_session: FakeHttpSession) -> None:
    http_session.queue_text("<html>")

    with pytest.raises(GeocodeError):
        await NominatimClient(http_session).reverse(0.0, 0.0)


@pytest.mark.asyncio
async def test_reverse_undecodable_body(http_session: FakeHttpSession) -> None:
    http_session.queue_text(b'{"name": "\xff\xfe bad"}')

    with pytest.raises(GeocodeError) as excinfo:
        await NominatimClient(http_session).reverse(52.2, 0.1)
    assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)
