# MIT License (see LICENSE)
"""
The simulation engine and its tick.

The Engine owns the particle roster, the configuration and the initial
snapshot used for reset. It manages:
- The tick, which runs in a fixed order:
    1. Pairwise forces, plus merge/bounce classification of new contacts.
    2. Position integration (with trail recording).
    3. Stable sort by descending mass.
    4. Merge aggregation.
    5. Wall reflection.
- Configuration changes, regeneration, reset, load and save. These are
  serialized against the tick and take effect on the next one.

Structure:
    - User creates an Engine (optionally with a config and seed).
    - User calls engine.regenerate(count, average_mass) or engine.load(path).
    - User calls engine.tick() in a loop and draws the returned view.
"""
from __future__ import annotations
import contextlib
import logging
import math
import threading
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from .config import EngineConfig
from .constants import (
    DEFAULT_NUMBER_OF_PARTICLES,
    DEFAULT_AVERAGE_MASS,
    DEFAULT_LOOP_SPEED_MS,
    MASS_SPREAD,
    MASS_FLOOR,
    MASS_MIN_FACTOR,
    MASS_MAX_FACTOR,
)
from .errors import ConfigError, TickInProgressError
from .profiler import Profiler
from .types import Particle
from .view import ParticleView, TickResult, NO_MERGE
from .core.forces import apply_pairwise_forces
from .core.integrators import integrate_positions
from .collision.resolver import aggregate_merges
from .collision.boundary import resolve_walls
from .io.json_io import Snapshot, load_snapshot, save_engine

logger = logging.getLogger(__name__)


@dataclass
class Engine:
    """
    Particle simulation world.

    Attributes:
        config: Force strengths, environment, collision tuning and trail
            settings. Change it with configure().
        seed: Seed for the random generator used by regenerate().
        profiler: Optional Profiler collecting per-phase timings.
        particles: The roster. After a tick it is sorted by descending mass,
            except that particles created by merges are appended at the end.
        number_of_particles: Particle count of the last generation request.
        average_mass: Average mass of the last generation request.
        loop_speed_ms: Tick interval the scheduler should use.
        tick_count: Number of ticks run since the last regenerate/load/reset.
    """
    config: EngineConfig = field(default_factory=EngineConfig)
    seed: int | None = None
    profiler: Profiler | None = None
    particles: list[Particle] = field(default_factory=list)
    number_of_particles: int = DEFAULT_NUMBER_OF_PARTICLES
    average_mass: float = DEFAULT_AVERAGE_MASS
    loop_speed_ms: int = DEFAULT_LOOP_SPEED_MS
    tick_count: int = 0

    def __post_init__(self) -> None:
        self._rng = np.random.default_rng(self.seed)
        self._lock = threading.Lock()
        self._initial: list[Particle] = []
        self._apply_history_settings()
        self.save_initial()

    # -------------------------------------------------------------------------
    # Roster
    # -------------------------------------------------------------------------

    @property
    def initial_particles(self) -> tuple[Particle, ...]:
        """Copies of the particles as they were at the last generate/load."""
        return tuple(p.clone() for p in self._initial)

    def add_particle(self, particle: Particle, as_initial: bool = False) -> None:
        """
        Add a particle, applying the current trail settings to it.

        The reset point is only taken at generate/load, so a particle added
        here is dropped by reset_to_initial() unless as_initial is True, in
        which case the whole current roster becomes the new reset point.
        """
        with self._lock:
            particle.track_history = self.config.history_trail
            particle.history_size = self.config.history_length
            self.particles.append(particle)
            if as_initial:
                self.save_initial()

    def save_initial(self) -> None:
        """Remember the current roster as the state reset_to_initial() restores."""
        self._initial = [p.clone() for p in self.particles]

    def reset_to_initial(self) -> None:
        """
        Restore the roster saved at the last generate/load.

        Trails are cleared; trail settings are kept.
        """
        with self._lock:
            self.particles = [p.clone() for p in self._initial]
            self._apply_history_settings()
            self.tick_count = 0
        logger.info("Reset to %d initial particle(s)", len(self.particles))

    def regenerate(self, count: int | None = None, average_mass: float | None = None) -> None:
        """
        Replace the roster with freshly sampled particles.

        Mass is normal around average_mass (sd 0.55 * avg) clipped to
        [max(4, 0.2 * avg), 1.75 * avg]; close charge is uniform in [-1, 1),
        far charge uniform in [0, 1), position uniform in the environment,
        velocity zero.

        Args:
            count: Number of particles (defaults to the last request).
            average_mass: Mean mass (defaults to the last request).

        Raises:
            ConfigError: If count is negative or average_mass not positive.
        """
        count = self.number_of_particles if count is None else count
        average_mass = self.average_mass if average_mass is None else average_mass
        if isinstance(count, bool) or not isinstance(count, (int, np.integer)) or count < 0:
            raise ConfigError(f"Particle count must be a non-negative integer, got {count!r}")
        if isinstance(average_mass, bool) or not isinstance(average_mass, (int, float)):
            raise ConfigError(f"Average mass must be a number, got {average_mass!r}")
        try:
            average_mass = float(average_mass)
        except OverflowError as e:
            raise ConfigError(f"Average mass is out of range: {e}") from e
        if not math.isfinite(average_mass) or average_mass <= 0:
            raise ConfigError(f"Average mass must be positive, got {average_mass}")

        with self._lock:
            self.particles = self._sample_particles(int(count), average_mass)
            self.number_of_particles = int(count)
            self.average_mass = average_mass
            self._apply_history_settings()
            self.save_initial()
            self.tick_count = 0
        logger.info("Generated %d particle(s), average mass %s", count, average_mass)

    def _sample_particles(self, count: int, avg: float) -> list[Particle]:
        rng = self._rng
        size = self.config.environment_size
        # np.clip is max-then-min, so hi wins when the bounds cross for tiny averages
        masses = np.clip(
            rng.standard_normal(count) * MASS_SPREAD * avg + avg,
            max(MASS_FLOOR, MASS_MIN_FACTOR * avg),
            MASS_MAX_FACTOR * avg,
        )
        close_charges = rng.uniform(-1.0, 1.0, count)
        far_charges = rng.random(count)
        positions = rng.random((count, 2)) * size
        return [
            Particle(m, cc, fc, position=pos)
            for m, cc, fc, pos in zip(masses, close_charges, far_charges, positions)
        ]

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def configure(self, **changes: Any) -> EngineConfig:
        """
        Change configuration fields, effective from the next tick.

        All changes are validated first; on error nothing is applied.

        Raises:
            ConfigError: On an unknown field or invalid value.
        """
        new = self.config.replace(**changes)
        with self._lock:
            old = self.config
            self.config = new
            if (old.history_trail, old.history_length) != (new.history_trail, new.history_length):
                self._apply_history_settings()
        logger.info("Configuration changed: %s", changes)
        return new

    def set_history_trail(self, enabled: bool) -> None:
        self.configure(history_trail=enabled)

    def set_history_length(self, length: int) -> None:
        """Resize every particle's trail; longer trails lose their oldest points."""
        self.configure(history_length=length)

    def _apply_history_settings(self) -> None:
        for p in self.particles:
            p.track_history = self.config.history_trail
            p.history_size = self.config.history_length

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def apply_snapshot(self, snapshot: Snapshot) -> None:
        """
        Replace configuration and roster with a loaded snapshot.

        Derived fields are recomputed by particle construction, trails are
        reset from the snapshot's trail settings and the initial state for
        reset_to_initial() is re-established.
        """
        with self._lock:
            self.config = snapshot.config
            self.particles = [p.clone() for p in snapshot.particles]
            self.number_of_particles = snapshot.number_of_particles
            self.average_mass = snapshot.average_mass
            self.loop_speed_ms = snapshot.physics_loop_speed
            self._apply_history_settings()
            self.save_initial()
            self.tick_count = 0

    def load(self, path: str) -> None:
        """
        Load a snapshot file into this engine.

        Raises:
            SnapshotError: If the file is unreadable or malformed. The engine
                is left untouched in that case.
        """
        snapshot = load_snapshot(path)
        self.apply_snapshot(snapshot)
        logger.info("Loaded %d particle(s) from %s", len(self.particles), path)

    def save(self, path: str) -> None:
        """Write configuration and the current roster to a snapshot file."""
        with self._lock:
            save_engine(self, path)
        logger.info("Saved %d particle(s) to %s", len(self.particles), path)

    # -------------------------------------------------------------------------
    # Tick
    # -------------------------------------------------------------------------

    def _section(self, name: str):
        if self.profiler is None:
            return contextlib.nullcontext()
        return self.profiler.section(name)

    def views(self) -> tuple[ParticleView, ...]:
        """Immutable view of the current roster."""
        return tuple(ParticleView.of(p) for p in self.particles)

    def tick(self) -> TickResult:
        """
        Advance the simulation by one tick.

        Returns:
            The merge summary and a view of the roster after the tick.

        Raises:
            TickInProgressError: If another tick (or a configuration change)
                is in progress. Ticks must be serialized by the caller.
        """
        if not self._lock.acquire(blocking=False):
            raise TickInProgressError("Engine.tick() called while the engine is busy")
        try:
            cfg = self.config
            particles = self.particles

            with self._section("forces"):
                apply_pairwise_forces(particles, cfg)

            with self._section("integrate"):
                integrate_positions(particles)

            # Largest first: merge roots and draw order
            with self._section("sort"):
                particles.sort(key=lambda p: p.mass, reverse=True)

            merge = NO_MERGE
            if cfg.allow_merge:
                with self._section("merge"):
                    merge = aggregate_merges(particles)

            if cfg.wall_bounce:
                with self._section("walls"):
                    resolve_walls(particles, cfg.environment_size)

            self.tick_count += 1
            return TickResult(tick=self.tick_count, merge=merge, particles=self.views())
        finally:
            self._lock.release()

