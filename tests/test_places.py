from __future__ import annotations

import pytest
from fakes import FakeHttpSession

from teslamate_telegram._geocode import NominatimClient
from teslamate_telegram.exceptions import GeocodeError
from teslamate_telegram.models.geocode import LookupResult
from teslamate_telegram.models.snapshot import VehicleSnapshot
from teslamate_telegram.places import PlaceResolver, truncate

ADDRESS = "3, Hurrell Road, Cambridge, Cambridgeshire, East of England, England, CB4 3RQ, United Kingdom"


class FakeLookup:
    def __init__(self, result: LookupResult | None = None, error: Exception | None = None) -> None:
        self.result = result or LookupResult()
        self.error = error
        self.calls: list[tuple[float, float]] = []

    async def __call__(self, latitude: float, longitude: float) -> LookupResult:
        self.calls.append((latitude, longitude))
        if self.error is not None:
            raise self.error
        return self.result


def test_truncate_short_string_unchanged() -> None:
    assert truncate("A", 20) == "A"
    assert truncate("Short, with comma", 20) == "Short, with comma"


def test_truncate_cuts_at_last_comma() -> None:
    assert truncate(ADDRESS, 20) == "3, Hurrell Road"


def test_truncate_hard_cut_without_comma() -> None:
    assert truncate("A very long test without a comma", 20) == "A very long test wit"


@pytest.mark.asyncio
async def test_geofence_wins_over_coordinates() -> None:
    lookup = FakeLookup(LookupResult(name="Elsewhere"))
    resolver = PlaceResolver(lookup)
    snapshot = VehicleSnapshot(latitude=52.223, longitude=0.116, geofence="Home")

    assert await resolver.resolve(snapshot) == "Home"
    assert lookup.calls == []


@pytest.mark.asyncio
async def test_geofence_is_not_truncated() -> None:
    resolver = PlaceResolver(FakeLookup())
    label = "Supercharger Cambridge Services, A14"

    assert await resolver.resolve(VehicleSnapshot(geofence=label)) == label


@pytest.mark.asyncio
async def test_lookup_prefers_short_name() -> None:
    lookup = FakeLookup(LookupResult(name="19, Acton Way", display_name=ADDRESS))
    resolver = PlaceResolver(lookup)

    assert await resolver.resolve(VehicleSnapshot(latitude=52.223, longitude=0.116)) == "19, Acton Way"
    assert lookup.calls == [(52.223, 0.116)]


@pytest.mark.asyncio
async def test_lookup_falls_back_to_display_name() -> None:
    resolver = PlaceResolver(FakeLookup(LookupResult(display_name=ADDRESS)))

    assert await resolver.resolve(VehicleSnapshot(latitude=52.2, longitude=0.1)) == "3, Hurrell Road"


@pytest.mark.asyncio
async def test_empty_lookup_result_is_placeholder() -> None:
    resolver = PlaceResolver(FakeLookup(LookupResult()))

    assert await resolver.resolve(VehicleSnapshot(latitude=52.2, longitude=0.1)) == "?"


@pytest.mark.asyncio
async def test_lookup_failure_is_placeholder() -> None:
    resolver = PlaceResolver(FakeLookup(error=GeocodeError("boom")))

    assert await resolver.resolve(VehicleSnapshot(latitude=52.2, longitude=0.1)) == "?"


@pytest.mark.asyncio
async def test_undecodable_nominatim_reply_is_placeholder(http_session: FakeHttpSession) -> None:
    http_session.queue_text(b'{"name": "\xff\xfe bad"}')
    resolver = PlaceResolver(NominatimClient(http_session))

    assert await resolver.resolve(VehicleSnapshot(latitude=1.0, longitude=2.0)) == "?"
