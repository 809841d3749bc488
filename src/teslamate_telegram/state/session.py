"""Active session data and session-end events."""

from __future__ import annotations

from dataclasses import dataclass, replace

from teslamate_telegram.models.snapshot import VehicleSnapshot


@dataclass(frozen=True)
class ChargingSession:
    """An in-progress charge.

    ``peak`` is the snapshot with the highest charger power seen so far.
    """

    start: VehicleSnapshot
    peak: VehicleSnapshot

    def with_peak(self, snapshot: VehicleSnapshot) -> ChargingSession:
        return replace(self, peak=snapshot)


@dataclass(frozen=True)
class DrivingSession:
    """An in-progress drive."""

    start: VehicleSnapshot


@dataclass(frozen=True)
class ChargingFinished:
    vehicle_id: int
    start: VehicleSnapshot
    end: VehicleSnapshot
    peak: VehicleSnapshot


@dataclass(frozen=True)
class DrivingFinished:
    vehicle_id: int
    start: VehicleSnapshot
    end: VehicleSnapshot


SessionEvent = ChargingFinished | DrivingFinished
