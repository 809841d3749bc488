"""Point-in-time vehicle snapshot."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from teslamate_telegram.metrics import km_to_miles

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


class VehicleSnapshot(BaseModel):
    """Latest known value of every tracked telemetry field.

    Fields are updated independently as MQTT messages arrive, so a
    snapshot is the superposition of everything seen so far.  Fields
    that were never published keep their zero value.

    Parameters
    ----------
    timestamp : datetime
        When any field was last updated.
    geofence : str
        TeslaMate geofence name, empty when outside every geofence.
    charger_power : int
        Charger power in kW.
    charge_energy_added : float
        Energy added in the current charge, kWh.
    rated_battery_range_km : float
        Rated range, used as the proxy for stored energy.
    odometer : float
        Odometer in km.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    timestamp: datetime = Field(default=_EPOCH)
    geofence: str = ""
    charger_power: int = 0
    charger_voltage: int = 0
    charger_actual_current: int = 0
    time_to_full_charge: float = 0.0
    charge_energy_added: float = 0.0
    est_battery_range_km: float = 0.0
    rated_battery_range_km: float = 0.0
    ideal_battery_range_km: float = 0.0
    battery_level: int = 0
    shift_state: str = ""
    odometer: float = 0.0
    outside_temp: float = 0.0
    inside_temp: float = 0.0
    plugged_in: bool = False
    latitude: float = 0.0
    longitude: float = 0.0

    @field_validator("timestamp")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @property
    def rated_battery_range_miles(self) -> float:
        return km_to_miles(self.rated_battery_range_km)
