# MIT License (see LICENSE)
"""
Exception types raised by the simulation.

Every error derives from SimulationError. Input errors also derive from
ValueError so callers that already catch ValueError keep working.
"""
from __future__ import annotations


class SimulationError(Exception):
    """Base class for all particle_sim errors."""


class ConfigError(SimulationError, ValueError):
    """An engine configuration or generation request was rejected."""


class SnapshotError(SimulationError, ValueError):
    """A persisted snapshot could not be read or is malformed."""


class TickInProgressError(SimulationError, RuntimeError):
    """Engine.tick() was entered while another tick was still running."""
