"""Unit conversions and per-session derived metrics."""

from __future__ import annotations

from datetime import timedelta

from teslamate_telegram._constants import KM_PER_MILE, RATED_KM_PER_KWH


def km_to_miles(km: float) -> float:
    return km / KM_PER_MILE


def rated_km_to_kwh(km: float) -> float:
    """Convert rated range kilometres to the energy they represent."""
    return km / RATED_KM_PER_KWH


def efficiency_wh_per_mile(rated_km_used: float, distance_km: float) -> float:
    """Watt-hours consumed per mile travelled.

    Energy is derived from rated range depletion, not from the
    ``charge_energy_added`` field.  *distance_km* must be non-zero.
    """
    return rated_km_to_kwh(rated_km_used) * 1000 / distance_km * KM_PER_MILE


def average_power_kw(energy_kwh: float, duration: timedelta) -> float:
    """Average power over *duration*; ``0.0`` for an empty interval."""
    hours = duration.total_seconds() / 3600
    if hours <= 0:
        return 0.0
    return energy_kwh / hours


def round_minutes(duration: timedelta) -> int:
    """Round *duration* to the nearest whole minute (halves round up)."""
    seconds = duration.total_seconds()
    minutes, remainder = divmod(seconds, 60)
    if remainder >= 30:
        minutes += 1
    return int(minutes)


def format_duration(duration: timedelta) -> str:
    """Render a duration as ``"45m"`` or ``"1h30m"``.

    No zero padding and no rollover into days.
    """
    minutes = round_minutes(duration)
    if minutes < 60:
        return f"{minutes}m"
    return f"{minutes // 60}h{minutes % 60}m"
