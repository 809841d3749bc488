"""State layer.

Per-vehicle telemetry snapshots and the charging/driving session state
machine.  This package is the single owner of vehicle state.
"""
