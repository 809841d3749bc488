"""TeslaMate field schema.

Maps each MQTT field name published under ``teslamate/cars/<id>/`` to
the snapshot attribute it sets and the parser for its text payload.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

from teslamate_telegram.ingestion.normalize import safe_bool, safe_float, safe_int, safe_str
from teslamate_telegram.models.snapshot import VehicleSnapshot

Parser = Callable[[Any], Any]

SNAPSHOT_FIELDS: dict[str, tuple[str, Parser]] = {
    "shift_state": ("shift_state", safe_str),
    "geofence": ("geofence", safe_str),
    "charger_power": ("charger_power", safe_int),
    "charger_voltage": ("charger_voltage", safe_int),
    "time_to_full_charge": ("time_to_full_charge", safe_float),
    "charger_actual_current": ("charger_actual_current", safe_int),
    "charge_energy_added": ("charge_energy_added", safe_float),
    "est_battery_range_km": ("est_battery_range_km", safe_float),
    "ideal_battery_range_km": ("ideal_battery_range_km", safe_float),
    "rated_battery_range_km": ("rated_battery_range_km", safe_float),
    "battery_level": ("battery_level", safe_int),
    "odometer": ("odometer", safe_float),
    "outside_temp": ("outside_temp", safe_float),
    "inside_temp": ("inside_temp", safe_float),
    "plugged_in": ("plugged_in", safe_bool),
    "latitude": ("latitude", safe_float),
    "longitude": ("longitude", safe_float),
}

# Fields that describe the vehicle itself rather than its telemetry.
VEHICLE_FIELDS: frozenset[str] = frozenset({"display_name", "state"})


def parse_field(field_name: str, raw_value: Any) -> tuple[str, Any] | None:
    """Return ``(attribute, value)`` for a recognised, parseable update."""
    entry = SNAPSHOT_FIELDS.get(field_name)
    if entry is None:
        return None
    attribute, parser = entry
    value = parser(raw_value)
    if value is None:
        return None
    return attribute, value


def apply_field_update(
    snapshot: VehicleSnapshot,
    field_name: str,
    raw_value: Any,
    *,
    now: datetime,
) -> VehicleSnapshot:
    """Apply a single field update and return the new snapshot.

    ``timestamp`` is refreshed on every call.  Unknown field names and
    unparseable values leave every other field untouched.
    """
    patch: dict[str, Any] = {"timestamp": now}
    parsed = parse_field(field_name, raw_value)
    if parsed is not None:
        attribute, value = parsed
        patch[attribute] = value
    return snapshot.model_copy(update=patch)
