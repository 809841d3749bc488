"""Charging and driving session detection.

Each vehicle has two independent axes, charging and driving, each
either idle (no session object) or active (a session object holding
the snapshots captured so far).  :func:`evaluate` advances both axes
from the vehicle's current snapshot and returns the sessions that
ended.
"""

from __future__ import annotations

import logging

from teslamate_telegram._constants import DRIVE_SHIFT_STATES
from teslamate_telegram.state.session import (
    ChargingFinished,
    ChargingSession,
    DrivingFinished,
    DrivingSession,
    SessionEvent,
)
from teslamate_telegram.state.vehicle import Vehicle

_logger = logging.getLogger(__name__)


def is_drive_shift_state(shift_state: str) -> bool:
    return shift_state in DRIVE_SHIFT_STATES


def _evaluate_charging(vehicle: Vehicle) -> ChargingFinished | None:
    current = vehicle.snapshot
    session = vehicle.charging

    if session is not None and current.charger_power == 0:
        _logger.info("Vehicle %s finished charging: %s", vehicle.vehicle_id, current)
        vehicle.charging = None
        return ChargingFinished(
            vehicle_id=vehicle.vehicle_id,
            start=session.start,
            end=current,
            peak=session.peak,
        )
    if session is not None and current.charger_power > session.peak.charger_power:
        _logger.debug("Vehicle %s new charging peak: %s", vehicle.vehicle_id, current)
        vehicle.charging = session.with_peak(current)
    elif session is None and current.charger_power > 0:
        _logger.info("Vehicle %s started charging: %s", vehicle.vehicle_id, current)
        vehicle.charging = ChargingSession(start=current, peak=current)
    return None


def _evaluate_driving(vehicle: Vehicle) -> DrivingFinished | None:
    current = vehicle.snapshot
    session = vehicle.driving
    driving_now = is_drive_shift_state(current.shift_state)

    if session is None and driving_now:
        _logger.info("Vehicle %s started driving: %s", vehicle.vehicle_id, current)
        vehicle.driving = DrivingSession(start=current)
    elif session is not None and not driving_now:
        _logger.info("Vehicle %s finished driving: %s", vehicle.vehicle_id, current)
        vehicle.driving = None
        return DrivingFinished(vehicle_id=vehicle.vehicle_id, start=session.start, end=current)
    return None


def evaluate(vehicle: Vehicle) -> list[SessionEvent]:
    """Advance both session axes and return any finished sessions.

    Charging is evaluated before driving; both are evaluated on every
    call.
    """
    events: list[SessionEvent] = []
    charging = _evaluate_charging(vehicle)
    if charging is not None:
        events.append(charging)
    driving = _evaluate_driving(vehicle)
    if driving is not None:
        events.append(driving)
    return events
