"""Notification text for finished sessions and status queries.

Messages are sent with Telegram's HTML parse mode.  A formatter
returns ``""`` when a session is too small to be worth reporting.
"""

from __future__ import annotations

from datetime import datetime, tzinfo

from teslamate_telegram.metrics import (
    average_power_kw,
    efficiency_wh_per_mile,
    format_duration,
    km_to_miles,
)
from teslamate_telegram.models.snapshot import VehicleSnapshot
from teslamate_telegram.places import PlaceResolver
from teslamate_telegram.state.session import ChargingFinished, DrivingFinished, SessionEvent
from teslamate_telegram.state.vehicle import Vehicle

# Drives shorter than this many miles are treated as noise.
MIN_DRIVE_MILES = 0.1


def format_clock(moment: datetime, tz: tzinfo | None = None) -> str:
    """``HH:MM`` in *tz*, or the local time zone when *tz* is None."""
    return moment.astimezone(tz).strftime("%H:%M")


def format_status(vehicle: Vehicle) -> str:
    return f"🔋{vehicle.snapshot.battery_level}%"


class NotificationFormatter:
    """Render session-end events into message text."""

    def __init__(self, resolver: PlaceResolver, *, tz: tzinfo | None = None) -> None:
        self._resolver = resolver
        self._tz = tz

    async def format_event(self, event: SessionEvent) -> str:
        if isinstance(event, ChargingFinished):
            return await self.charging_finished(event.start, event.end, event.peak)
        return await self.driving_finished(event.start, event.end)

    async def charging_finished(
        self,
        start: VehicleSnapshot,
        end: VehicleSnapshot,
        peak: VehicleSnapshot,
    ) -> str:
        battery = end.battery_level - start.battery_level
        if battery == 0:
            return ""
        duration = end.timestamp - start.timestamp
        average_power = average_power_kw(end.charge_energy_added - start.charge_energy_added, duration)
        miles_added = km_to_miles(end.rated_battery_range_km - start.rated_battery_range_km)
        place = await self._resolver.resolve(start)
        return (
            f"🔌 Charging finished at {place}.\n"
            f"🕗 {format_clock(start.timestamp, self._tz)}→{format_clock(end.timestamp, self._tz)}"
            f" ({format_duration(duration)})\n"
            f"🔋 {start.battery_level}→{end.battery_level}% (+ {battery}%)\n"
            f"🚗 {start.rated_battery_range_miles:.0f}→{end.rated_battery_range_miles:.0f} miles"
            f" (+ {miles_added:.1f} miles).\n"
            f"⚡ + {end.charge_energy_added:.1f}kWh\n"
            f"Average Power: {average_power:.2f}kW (Peak {peak.charger_power}kW at {peak.battery_level}%)"
        )

    async def driving_finished(self, start: VehicleSnapshot, end: VehicleSnapshot) -> str:
        distance_km = end.odometer - start.odometer
        distance = km_to_miles(distance_km)
        if distance < MIN_DRIVE_MILES:
            return ""
        battery = end.battery_level - start.battery_level
        rated_km_used = start.rated_battery_range_km - end.rated_battery_range_km
        efficiency = efficiency_wh_per_mile(rated_km_used, distance_km)
        duration = end.timestamp - start.timestamp
        miles_used = km_to_miles(rated_km_used)
        start_place = await self._resolver.resolve(start)
        end_place = await self._resolver.resolve(end)
        return (
            f"🚗 {start_place}->{end_place} <code>{distance:.1f}</code> miles 🌡 {start.outside_temp:.1f}°C\n"
            f"🕗 {format_clock(start.timestamp, self._tz)}→{format_clock(end.timestamp, self._tz)}"
            f" ({format_duration(duration)})\n"
            f"🔋 {start.battery_level}→{end.battery_level}% ({battery}%)\n"
            f"🚘 {start.rated_battery_range_miles:.0f}→{end.rated_battery_range_miles:.0f} miles"
            f" ({miles_used:.1f} miles @ {efficiency:.0f}Wh/mi)"
        )
