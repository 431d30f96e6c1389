# MIT License (see LICENSE)
"""
Input/Output utilities for the particle simulation.

This subpackage provides:
    - JSON snapshots: save and load engine configuration plus particles.
    - Validation: a malformed snapshot raises SnapshotError before any
      engine state is touched.

Typical usage:
    from particle_sim.io import load_engine, save_engine

    engine = load_engine("run.json")
    save_engine(engine, "output.json")
"""
from .json_io import (
    Snapshot,
    load_snapshot,
    load_snapshot_raw,
    load_engine,
    snapshot_from_json,
    particle_from_json,
    save_engine,
    engine_to_json,
    particles_to_json,
    particle_to_json,
)

__all__ = [
    # Loading
    "Snapshot",
    "load_snapshot",
    "load_snapshot_raw",
    "load_engine",
    "snapshot_from_json",
    "particle_from_json",
    # Saving
    "save_engine",
    "engine_to_json",
    "particles_to_json",
    "particle_to_json",
]
