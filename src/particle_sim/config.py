# MIT License (see LICENSE)
"""
Engine configuration.

EngineConfig holds every knob the control surface may change between ticks:
the three force strengths, the environment size, the merge and wall
toggles, the collision tuning constants and the history trail settings.

Configurations are validated as a whole. An invalid value raises ConfigError
before anything is assigned, so the engine never sees a half-applied change.
"""
from __future__ import annotations
import math
from dataclasses import dataclass, fields, asdict, replace as dc_replace
from typing import Any

from .constants import (
    DEFAULT_GRAVITY_STRENGTH,
    DEFAULT_CLOSE_CHARGE_STRENGTH,
    DEFAULT_FAR_CHARGE_STRENGTH,
    DEFAULT_ENVIRONMENT_SIZE,
    DEFAULT_BOUNCE_COMPLETE_DIST_FACTOR,
    DEFAULT_MERGE_MASS_RATIO_THRESHOLD,
    DEFAULT_MERGE_CLOSE_CHARGE_THRESHOLD,
    DEFAULT_HISTORY_LENGTH,
)
from .errors import ConfigError


@dataclass(frozen=True)
class EngineConfig:
    """
    Simulation parameters.

    Attributes:
        gravity_strength: G, scales the always-attractive inverse-square force.
        close_charge_strength: C, scales the signed inverse-cube force.
        far_charge_strength: F, scales the distance-proportional attraction.
        environment_size: Side length of the square environment.
        allow_merge: If False, colliding particles always bounce.
        wall_bounce: If True, particles reflect off the environment edges.
        bounce_complete_dist_factor: A bounce ends once the pair is this many
            combined radii apart.
        merge_mass_ratio_threshold: Minimum max/min mass ratio for a merge.
        merge_close_charge_threshold: Same-sign close charges summing to at
            least this block a merge.
        history_trail: Whether particles record their past positions.
        history_length: Capacity of each particle's position history.
    """
    gravity_strength: float = DEFAULT_GRAVITY_STRENGTH
    close_charge_strength: float = DEFAULT_CLOSE_CHARGE_STRENGTH
    far_charge_strength: float = DEFAULT_FAR_CHARGE_STRENGTH
    environment_size: int = DEFAULT_ENVIRONMENT_SIZE
    allow_merge: bool = True
    wall_bounce: bool = True
    bounce_complete_dist_factor: float = DEFAULT_BOUNCE_COMPLETE_DIST_FACTOR
    merge_mass_ratio_threshold: float = DEFAULT_MERGE_MASS_RATIO_THRESHOLD
    merge_close_charge_threshold: float = DEFAULT_MERGE_CLOSE_CHARGE_THRESHOLD
    history_trail: bool = True
    history_length: int = DEFAULT_HISTORY_LENGTH

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """
        Check every field.

        Raises:
            ConfigError: On a wrong type, a non-finite strength, a
                non-positive environment size or tuning constant, or a
                negative history length.
        """
        for name in ("gravity_strength", "close_charge_strength", "far_charge_strength"):
            value = _as_float(name, getattr(self, name))
            if not math.isfinite(value):
                raise ConfigError(f"{name} must be finite, got {value!r}")

        for name in ("environment_size", "history_length"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{name} must be an integer, got {value!r}")
        _as_float("environment_size", self.environment_size)
        if self.environment_size <= 0:
            raise ConfigError(f"environment_size must be positive, got {self.environment_size}")
        if self.history_length < 0:
            raise ConfigError(f"history_length must be >= 0, got {self.history_length}")

        for name in ("allow_merge", "wall_bounce", "history_trail"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ConfigError(f"{name} must be a bool, got {value!r}")

        for name in (
            "bounce_complete_dist_factor",
            "merge_mass_ratio_threshold",
            "merge_close_charge_threshold",
        ):
            value = _as_float(name, getattr(self, name))
            if not math.isfinite(value) or value <= 0:
                raise ConfigError(f"{name} must be positive and finite, got {value!r}")

    def replace(self, **changes: Any) -> "EngineConfig":
        """
        Return a validated copy with the given fields changed.

        Raises:
            ConfigError: If a field name is unknown or a value is invalid.
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration field(s): {', '.join(unknown)}")
        return dc_replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EngineConfig":
        """
        Build a config from a mapping, ignoring keys that are not fields.

        Missing fields take their defaults.
        """
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


def _as_float(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{name} must be a number, got {value!r}")
    try:
        return float(value)
    except OverflowError as e:
        # Python ints can exceed the float range
        raise ConfigError(f"{name} is out of range: {e}") from e
