# MIT License (see LICENSE)
"""
Core type definitions for the particle simulation.

A Particle carries three "charges" that drive the three artificial forces:
  - mass:         gravity, ~1/r², always attractive. Masses add on merge.
  - close charge: ~1/r³, signed in [-1, 1]. Same sign repels.
  - far charge:   ~r, in [0, 1]. Always attractive.

Display proxies (radius, red/green, alpha) are derived from these and are
recomputed by the setters; they cannot be set directly.
"""
from __future__ import annotations
import math
from typing import Iterable

import numpy as np

from .constants import RADIUS_DIVISOR, ALPHA_MIN, ALPHA_SPAN
from .history import PositionHistory
from .util import f64, clamp


def radius_for_mass(mass: float) -> int:
    """Display radius for a mass: max(round(sqrt(m) / (2 sqrt(pi))), 1)."""
    # Halves round up, not to even
    return max(math.floor(math.sqrt(mass) / RADIUS_DIVISOR + 0.5), 1)


class Particle:
    """
    A point mass with two charges, position and velocity.

    Attributes:
        position: Position [x, y] (float64 array).
        velocity: Velocity [vx, vy] in units per tick (float64 array).
        track_history: Whether position_history is appended on each move.
        merging: True while a merge is pending within the current tick.
        merging_with: Particles this one is merging with this tick.
        bouncing: True while a bounce against bouncing_against is active.
            Forces between the two are suspended until they separate.
        bouncing_against: The partner of the active bounce, if any.

    Particles compare and hash by identity, so they can be kept in sets.
    """

    def __init__(
        self,
        mass: float,
        close_charge: float = 0.0,
        far_charge: float = 0.0,
        position: np.ndarray | tuple[float, float] = (0.0, 0.0),
        velocity: np.ndarray | tuple[float, float] = (0.0, 0.0),
        track_history: bool = False,
        history_size: int = 0,
    ):
        self.position = f64(position)
        self.velocity = f64(velocity)
        if self.position.shape != (2,) or self.velocity.shape != (2,):
            raise ValueError("position and velocity must be 2-vectors")

        # Setters compute the proxies
        self.mass = mass
        self.close_charge = close_charge
        self.far_charge = far_charge

        self.track_history = track_history
        self._history = PositionHistory(history_size)

        self.merging = False
        self.merging_with: set[Particle] = set()
        self.bouncing = False
        self.bouncing_against: Particle | None = None

    # -------------------------------------------------------------------------
    # Mass (gravity)
    # -------------------------------------------------------------------------

    @property
    def mass(self) -> float:
        return self._mass

    @mass.setter
    def mass(self, mass: float) -> None:
        mass = float(mass)
        if not math.isfinite(mass) or mass <= 0:
            raise ValueError(f"Particle mass must be positive and finite, got {mass}")
        self._mass = mass
        self._radius = radius_for_mass(mass)

    @property
    def radius(self) -> int:
        """Display/collision radius, derived from mass."""
        return self._radius

    # -------------------------------------------------------------------------
    # Charges
    # -------------------------------------------------------------------------

    @property
    def close_charge(self) -> float:
        return self._close_charge

    @close_charge.setter
    def close_charge(self, close_charge: float) -> None:
        close_charge = clamp(float(close_charge), -1.0, 1.0)
        self._close_charge = close_charge
        # Negative is red, positive is green, zero is black. Truncation, not rounding.
        if close_charge < 0:
            self._r, self._g = int(255.0 * abs(close_charge)), 0
        else:
            self._r, self._g = 0, int(255.0 * abs(close_charge))

    @property
    def far_charge(self) -> float:
        return self._far_charge

    @far_charge.setter
    def far_charge(self, far_charge: float) -> None:
        far_charge = clamp(float(far_charge), 0.0, 1.0)
        self._far_charge = far_charge
        self._a = int(ALPHA_SPAN * far_charge) + ALPHA_MIN

    @property
    def rgba(self) -> tuple[int, int, int, int]:
        """Display colour: red/green from close charge, alpha from far charge."""
        return (self._r, self._g, 0, self._a)

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    @property
    def history_size(self) -> int:
        return self._history.capacity

    @history_size.setter
    def history_size(self, size: int) -> None:
        self._history.resize(size)

    @property
    def position_history(self) -> PositionHistory:
        """Previous positions, oldest first. Restartable iterable."""
        return self._history

    @position_history.setter
    def position_history(self, positions: Iterable[np.ndarray]) -> None:
        self._history.replace(positions)

    # -------------------------------------------------------------------------
    # Copies & display
    # -------------------------------------------------------------------------

    def clone(self) -> "Particle":
        """
        Copy mass, charges, position and velocity.

        History settings and ephemeral merge/bounce state are not copied.
        """
        return Particle(
            self.mass,
            self.close_charge,
            self.far_charge,
            position=self.position,
            velocity=self.velocity,
        )

    def clear_collision_state(self) -> None:
        self.merging = False
        self.merging_with.clear()
        self.bouncing = False
        self.bouncing_against = None

    def short_string(self) -> str:
        """Compact '{mass; [x y]; [vx vy]}' form used in status messages."""
        x, y = self.position
        vx, vy = self.velocity
        return f"{{{self.mass:.1f}; [{x:.3g} {y:.3g}]; [{vx:.3g} {vy:.3g}]}}"

    def __repr__(self) -> str:
        return (
            f"Particle(mass={self.mass:.3f}, close_charge={self.close_charge:.3f}, "
            f"far_charge={self.far_charge:.3f}, position={self.position.tolist()}, "
            f"velocity={self.velocity.tolist()})"
        )
