# MIT License (see LICENSE)
"""
JSON snapshots of the simulation.

A snapshot holds the engine configuration, the generation settings and
every particle's fundamental state. Derived values (radius, colours),
merge/bounce state and trails are not stored; they are recomputed or reset
on load. The format is indented JSON so saved runs can be diffed.

JSON Schema Overview:
---------------------
{
  "physics_engine": {
    "gravity_strength": float,          # Default: 15
    "close_charge_strength": float,     # Default: 1.5e8
    "far_charge_strength": float,       # Default: 7.5
    "environment_size": int,            # Default: 800
    "allow_merge": bool,                # Default: true
    "wall_bounce": bool,                # Default: true
    "bounce_complete_dist_factor": float,   # Optional tuning constants
    "merge_mass_ratio_threshold": float,
    "merge_close_charge_threshold": float,
    "particles": [
      {
        "mass": float,                  # Required, > 0
        "close_charge": float,          # Clamped to [-1, 1], default 0
        "far_charge": float,            # Clamped to [0, 1], default 0
        "position": [x, y],             # Default: [0, 0]
        "velocity": [vx, vy]            # Default: [0, 0]
      }
    ]
  },
  "number_of_particles": int,           # Last generation request
  "average_mass": float,
  "history_trail": bool,
  "history_length": int,
  "physics_loop_speed": int             # Tick interval in ms
}

Loading parses and validates the whole file before anything is returned,
so a failed load never leaves an engine half-overwritten.
"""
from __future__ import annotations
import json
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..config import EngineConfig
from ..constants import (
    DEFAULT_NUMBER_OF_PARTICLES,
    DEFAULT_AVERAGE_MASS,
    DEFAULT_LOOP_SPEED_MS,
)
from ..errors import ConfigError, SnapshotError
from ..types import Particle
from ..util import to_list

if TYPE_CHECKING:
    from ..engine import Engine

# Keys of the "physics_engine" block that map onto EngineConfig
ENGINE_KEYS = (
    "gravity_strength",
    "close_charge_strength",
    "far_charge_strength",
    "environment_size",
    "allow_merge",
    "wall_bounce",
    "bounce_complete_dist_factor",
    "merge_mass_ratio_threshold",
    "merge_close_charge_threshold",
)


@dataclass(frozen=True)
class Snapshot:
    """A fully parsed and validated snapshot, ready to apply to an engine."""
    config: EngineConfig
    particles: tuple[Particle, ...]
    number_of_particles: int = DEFAULT_NUMBER_OF_PARTICLES
    average_mass: float = DEFAULT_AVERAGE_MASS
    physics_loop_speed: int = DEFAULT_LOOP_SPEED_MS


# =============================================================================
# Loading
# =============================================================================

def load_snapshot_raw(path: str) -> dict[str, Any]:
    """
    Load raw JSON data from a snapshot file without object construction.

    Raises:
        SnapshotError: If the file cannot be read or is not valid JSON.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise SnapshotError(f"Cannot read snapshot {path!r}: {e}") from e
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot {path!r} is not valid JSON: {e}") from e
    except UnicodeDecodeError as e:
        raise SnapshotError(f"Snapshot {path!r} is not valid UTF-8: {e}") from e


def load_snapshot(path: str) -> Snapshot:
    """
    Read and validate a snapshot file.

    Raises:
        SnapshotError: If the file is unreadable, not JSON, or malformed.
    """
    return snapshot_from_json(load_snapshot_raw(path))


def load_engine(path: str, **engine_kwargs: Any) -> "Engine":
    """
    Build a new Engine from a snapshot file.

    Args:
        path: Path to the JSON snapshot.
        **engine_kwargs: Extra Engine arguments (seed, profiler).
    """
    # Import locally to avoid circular import (Engine imports json_io)
    from ..engine import Engine

    engine = Engine(**engine_kwargs)
    engine.apply_snapshot(load_snapshot(path))
    return engine


def snapshot_from_json(data: Any) -> Snapshot:
    """
    Parse a decoded snapshot document.

    Raises:
        SnapshotError: If a required field is missing or a value is invalid.
    """
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot root must be a JSON object")
    engine_data = data.get("physics_engine")
    if not isinstance(engine_data, dict):
        raise SnapshotError("Snapshot is missing the 'physics_engine' object")
    particle_list = engine_data.get("particles", [])
    if not isinstance(particle_list, list):
        raise SnapshotError("'physics_engine.particles' must be a list")

    settings = {k: engine_data[k] for k in ENGINE_KEYS if k in engine_data}
    for key in ("history_trail", "history_length"):
        if key in data:
            settings[key] = data[key]

    try:
        config = EngineConfig.from_dict(settings)
    except ConfigError as e:
        raise SnapshotError(f"Invalid engine settings: {e}") from e

    particles = []
    for i, d in enumerate(particle_list):
        try:
            particles.append(particle_from_json(d))
        except (ValueError, TypeError, KeyError) as e:
            raise SnapshotError(f"Invalid particle at index {i}: {e}") from e

    number_of_particles = data.get("number_of_particles", len(particles))
    average_mass = data.get("average_mass", DEFAULT_AVERAGE_MASS)
    loop_speed = data.get("physics_loop_speed", DEFAULT_LOOP_SPEED_MS)
    if isinstance(number_of_particles, bool) or not isinstance(number_of_particles, int) \
            or number_of_particles < 0:
        raise SnapshotError(f"Invalid number_of_particles: {number_of_particles!r}")
    try:
        average_mass = _number(average_mass, "average_mass")
    except (ValueError, TypeError) as e:
        raise SnapshotError(f"Invalid average_mass: {e}") from e
    if average_mass <= 0:
        raise SnapshotError(f"Invalid average_mass: {average_mass!r}")
    if isinstance(loop_speed, bool) or not isinstance(loop_speed, int) or loop_speed < 0:
        raise SnapshotError(f"Invalid physics_loop_speed: {loop_speed!r}")

    return Snapshot(
        config=config,
        particles=tuple(particles),
        number_of_particles=number_of_particles,
        average_mass=average_mass,
        physics_loop_speed=loop_speed,
    )


def particle_from_json(d: dict[str, Any]) -> Particle:
    """
    Parse a single particle definition.

    Charges are clamped by the Particle setters, as on any other write.

    Raises:
        KeyError: If 'mass' is missing.
        ValueError / TypeError: On a malformed value.
    """
    if not isinstance(d, dict):
        raise TypeError(f"Particle definition must be an object, got {type(d).__name__}")
    return Particle(
        mass=_number(d["mass"], "mass"),
        close_charge=_number(d.get("close_charge", 0.0), "close_charge"),
        far_charge=_number(d.get("far_charge", 0.0), "far_charge"),
        position=_vector(d.get("position", [0.0, 0.0]), "position"),
        velocity=_vector(d.get("velocity", [0.0, 0.0]), "velocity"),
    )


def _number(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"'{name}' must be a number, got {value!r}")
    try:
        number = float(value)
    except OverflowError as e:
        raise ValueError(f"'{name}' is out of range: {e}") from e
    if not math.isfinite(number):
        raise ValueError(f"'{name}' must be finite, got {value!r}")
    return number


def _vector(value: Any, name: str) -> tuple[float, float]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError(f"'{name}' must be a list of two numbers, got {value!r}")
    return (_number(value[0], name), _number(value[1], name))


# =============================================================================
# Saving
# =============================================================================

def particle_to_json(p: Particle) -> dict[str, Any]:
    """Serialize the fundamental (non-derived) state of a particle."""
    return {
        "mass": p.mass,
        "close_charge": p.close_charge,
        "far_charge": p.far_charge,
        "position": to_list(p.position),
        "velocity": to_list(p.velocity),
    }


def particles_to_json(particles: list[Particle]) -> list[dict[str, Any]]:
    return [particle_to_json(p) for p in particles]


def engine_to_json(engine: "Engine") -> dict[str, Any]:
    """
    Serialize an engine's configuration and roster to a dictionary.

    The trail itself is not stored, only whether trails are on and their length.
    """
    cfg = engine.config
    engine_block: dict[str, Any] = {k: getattr(cfg, k) for k in ENGINE_KEYS}
    engine_block["particles"] = particles_to_json(engine.particles)
    return {
        "physics_engine": engine_block,
        "number_of_particles": engine.number_of_particles,
        "average_mass": engine.average_mass,
        "history_trail": cfg.history_trail,
        "history_length": cfg.history_length,
        "physics_loop_speed": engine.loop_speed_ms,
    }


def save_engine(engine: "Engine", path: str, indent: int = 2) -> None:
    """
    Save an engine to a JSON file on disk.

    Raises:
        OSError: If the file cannot be written.
    """
    data = engine_to_json(engine)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent)
        f.write("\n")
