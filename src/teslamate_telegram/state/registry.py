"""Process-wide collection of known vehicles."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from datetime import UTC, datetime

from teslamate_telegram.state.vehicle import Vehicle

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class VehicleRegistry:
    """Vehicles keyed by TeslaMate car id.

    The first vehicle ever seen becomes the default vehicle for the
    ``/status`` command and stays so for the life of the process.
    """

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._vehicles: dict[int, Vehicle] = {}
        self._default_id: int | None = None

    def __len__(self) -> int:
        return len(self._vehicles)

    def __iter__(self) -> Iterator[Vehicle]:
        return iter(self._vehicles.values())

    def __contains__(self, vehicle_id: object) -> bool:
        return vehicle_id in self._vehicles

    @property
    def default_vehicle(self) -> Vehicle | None:
        if self._default_id is None:
            return None
        return self._vehicles.get(self._default_id)

    def get(self, vehicle_id: int) -> Vehicle | None:
        return self._vehicles.get(vehicle_id)

    def vehicle(self, vehicle_id: int) -> Vehicle:
        """Return the vehicle for *vehicle_id*, creating it on first sight."""
        vehicle = self._vehicles.get(vehicle_id)
        if vehicle is None:
            _logger.info("New vehicle discovered: %s", vehicle_id)
            vehicle = Vehicle(vehicle_id)
            self._vehicles[vehicle_id] = vehicle
            if self._default_id is None:
                self._default_id = vehicle_id
        return vehicle

    def apply(self, vehicle_id: int, field_name: str, raw_value: str) -> Vehicle:
        """Apply a field update, timestamped with the registry clock."""
        vehicle = self.vehicle(vehicle_id)
        vehicle.update(field_name, raw_value, now=self._clock())
        return vehicle
