"""Ingestion layer.

Turns raw TeslaMate field updates (name + text payload) into typed
snapshot changes.  Nothing in here is allowed to raise on bad input.
"""

from teslamate_telegram.ingestion.fields import SNAPSHOT_FIELDS, VEHICLE_FIELDS, apply_field_update

__all__ = ["SNAPSHOT_FIELDS", "VEHICLE_FIELDS", "apply_field_update"]
