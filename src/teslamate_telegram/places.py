"""Short display names for where a vehicle is."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from teslamate_telegram._constants import PLACE_NAME_LIMIT, UNKNOWN_PLACE
from teslamate_telegram.exceptions import GeocodeError
from teslamate_telegram.models.geocode import LookupResult
from teslamate_telegram.models.snapshot import VehicleSnapshot

_logger = logging.getLogger(__name__)

Lookup = Callable[[float, float], Awaitable[LookupResult]]


def truncate(text: str, limit: int) -> str:
    """Shorten *text* to at most *limit* characters.

    Cuts at the last comma within the limit when there is one, so a
    full address keeps just its leading segment.
    """
    if len(text) < limit:
        return text
    comma = text.rfind(",", 0, limit)
    if comma != -1:
        limit = comma
    return text[:limit]


class PlaceResolver:
    """Resolve a snapshot to a place name.

    Geofence names win; otherwise the coordinates are reverse geocoded
    through *lookup*.  Lookup failures resolve to ``"?"``.
    """

    def __init__(self, lookup: Lookup, *, limit: int = PLACE_NAME_LIMIT) -> None:
        self._lookup = lookup
        self._limit = limit

    async def resolve(self, snapshot: VehicleSnapshot) -> str:
        if snapshot.geofence:
            return snapshot.geofence
        try:
            result = await self._lookup(snapshot.latitude, snapshot.longitude)
        except GeocodeError:
            _logger.debug(
                "Reverse lookup failed lat=%s lon=%s",
                snapshot.latitude,
                snapshot.longitude,
                exc_info=True,
            )
            return UNKNOWN_PLACE
        name = result.best_name
        if not name:
            return UNKNOWN_PLACE
        return truncate(name, self._limit)
