"""Per-vehicle aggregate."""

from __future__ import annotations

import logging
from datetime import datetime

from teslamate_telegram.ingestion.fields import VEHICLE_FIELDS, apply_field_update
from teslamate_telegram.models.snapshot import VehicleSnapshot
from teslamate_telegram.state.session import ChargingSession, DrivingSession

_logger = logging.getLogger(__name__)


class Vehicle:
    """Current snapshot and in-flight sessions for one vehicle.

    A session attribute of ``None`` means that axis is idle.
    """

    def __init__(self, vehicle_id: int) -> None:
        self.vehicle_id = vehicle_id
        self.display_name = ""
        self.state = ""
        self.snapshot = VehicleSnapshot()
        self.charging: ChargingSession | None = None
        self.driving: DrivingSession | None = None

    def __repr__(self) -> str:
        return f"Vehicle(vehicle_id={self.vehicle_id!r}, display_name={self.display_name!r}, state={self.state!r})"

    @property
    def is_charging(self) -> bool:
        return self.charging is not None

    @property
    def is_driving(self) -> bool:
        return self.driving is not None

    def update(self, field_name: str, raw_value: str, *, now: datetime) -> None:
        """Apply one TeslaMate field update."""
        _logger.debug("Vehicle %s update %s=%r", self.vehicle_id, field_name, raw_value)
        if field_name in VEHICLE_FIELDS:
            setattr(self, field_name, raw_value)
        self.snapshot = apply_field_update(self.snapshot, field_name, raw_value, now=now)
