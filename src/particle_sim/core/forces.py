# MIT License (see LICENSE)
"""
Force model: per-tick acceleration from every other particle.

For a particle p and a neighbour o, with d = p.position - o.position and
r = |d|, the three acceleration contributions are

    gravity       g = d * (-G * m_o / r³)                always attractive
    close charge  c = d * (C * q_p * q_o / (m_p * r⁴))   same sign repels
    far charge    f = d * (-F * k_p * k_o / m_p)         grows with r, attractive

Each is the unit vector d/r scaled by the felt acceleration (force / m_p),
with the powers of r folded together. The contributions are averaged over
the neighbours that actually interacted with p and the sum of the three
averages is added to p.velocity (one tick is one unit of time).

Pairs that are merging, in an active bounce, or overlapping for the first
time contribute nothing; the latter are handed to the collision resolver.

Pairwise evaluation is O(N²).
"""
from __future__ import annotations
import logging

import numpy as np

from ..config import EngineConfig
from ..types import Particle
from ..util import norm
from ..collision.resolver import classify

logger = logging.getLogger(__name__)


def gravity_acceleration(d: np.ndarray, r: float, other: Particle, G: float) -> np.ndarray:
    """Acceleration of p toward `other` from gravity (m_p divides out)."""
    return d * (-G * other.mass / r ** 3)


def close_charge_acceleration(
    d: np.ndarray, r: float, p: Particle, other: Particle, C: float
) -> np.ndarray:
    """Signed inverse-cube acceleration; positive product pushes p away."""
    return d * (C * p.close_charge * other.close_charge / (p.mass * r ** 4))


def far_charge_acceleration(d: np.ndarray, p: Particle, other: Particle, F: float) -> np.ndarray:
    """Distance-proportional attraction (|d| cancels the unit-vector divisor)."""
    return d * (-F * p.far_charge * other.far_charge / p.mass)


def apply_pairwise_forces(particles: list[Particle], config: EngineConfig) -> int:
    """
    Update every particle's velocity from its interactions with all others.

    Also ends bounces whose pair has separated far enough, and classifies
    first-contact collisions (merge or bounce) via the collision resolver.

    Args:
        particles: The roster. Velocities and collision state are mutated.
        config: Force strengths and collision tuning.

    Returns:
        Number of new collisions detected this pass.
    """
    G = config.gravity_strength
    C = config.close_charge_strength
    F = config.far_charge_strength
    release_factor = config.bounce_complete_dist_factor
    collisions = 0

    for p in particles:
        g = np.zeros(2, dtype=np.float64)
        c = np.zeros(2, dtype=np.float64)
        f = np.zeros(2, dtype=np.float64)
        count = 0

        for o in particles:
            if o is p or o in p.merging_with:
                continue

            d = p.position - o.position
            r = norm(d)
            contact = p.radius + o.radius

            if p.bouncing and p.bouncing_against is o:
                if r > release_factor * contact:
                    p.bouncing = False
                    p.bouncing_against = None
                continue

            # Radii are >= 1, so r == 0 always lands here and never divides below
            if r < contact:
                classify(p, o, config)
                collisions += 1
                continue

            count += 1
            g += gravity_acceleration(d, r, o, G)
            c += close_charge_acceleration(d, r, p, o, C)
            f += far_charge_acceleration(d, p, o, F)

        # No interacting neighbours: nothing to average
        if count == 0:
            continue
        p.velocity += (g + c + f) / count

    return collisions
