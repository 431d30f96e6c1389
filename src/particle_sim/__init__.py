# MIT License (see LICENSE)
"""
particle_sim - A 2D particle simulator with artificial forces.

Particles interact through three force laws (inverse-square gravity, a
signed inverse-cube "close charge" and a distance-proportional "far
charge"). Colliding particles either merge into one or bounce elastically,
and may reflect off the walls of a bounded environment.

Main entry points:
    - Engine: Owns the particles and configuration, runs ticks.
    - EngineConfig: Force strengths, environment and collision tuning.
    - Particle: A point mass with two charges.
    - PhysicsLoop: Fixed-interval tick scheduler.

Submodules:
    - core: Force model, integration, invariants.
    - collision: Merge/bounce resolution and wall reflection.
    - io: JSON snapshot load/save.
    - renderer: Optional visualization adapters.

Example:
    from particle_sim import Engine

    engine = Engine(seed=1)
    engine.regenerate(50, 250)
    result = engine.tick()
    if result.merge.occurred:
        print(result.merge.status_text())
"""
from .config import EngineConfig
from .engine import Engine
from .errors import SimulationError, ConfigError, SnapshotError, TickInProgressError
from .loop import PhysicsLoop
from .types import Particle
from .view import ParticleView, MergeEvent, TickResult

__all__ = [
    # Core simulation
    "Engine",
    "EngineConfig",
    "Particle",
    "PhysicsLoop",
    # Results
    "ParticleView",
    "MergeEvent",
    "TickResult",
    # Errors
    "SimulationError",
    "ConfigError",
    "SnapshotError",
    "TickInProgressError",
]
