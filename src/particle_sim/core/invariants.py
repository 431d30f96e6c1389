# MIT License (see LICENSE)
"""
Utilities for calculating conserved and monitored quantities.

Used for verifying simulation correctness and debugging. Merging conserves
total mass exactly (up to float rounding); elastic bounces and wall
reflections preserve each particle's speed. Momentum is *not* conserved by
merges because of the root-relative velocity aggregation.
"""
from __future__ import annotations
import numpy as np

from ..types import Particle


def total_mass(particles: list[Particle]) -> float:
    """Sum of all particle masses."""
    return float(sum(p.mass for p in particles))


def kinetic_energy(particles: list[Particle]) -> float:
    """
    Total kinetic energy.

    T = Σ 0.5 * m * v²
    """
    ke = 0.0
    for p in particles:
        ke += 0.5 * p.mass * float(np.dot(p.velocity, p.velocity))
    return ke


def linear_momentum(particles: list[Particle]) -> np.ndarray:
    """
    Total linear momentum.

    P = Σ m * v
    """
    total = np.zeros(2, dtype=np.float64)
    for p in particles:
        total += p.mass * p.velocity
    return total


def center_of_mass(particles: list[Particle]) -> np.ndarray:
    """Mass-weighted mean position (zero vector for an empty roster)."""
    m = total_mass(particles)
    if m == 0.0:
        return np.zeros(2, dtype=np.float64)
    acc = np.zeros(2, dtype=np.float64)
    for p in particles:
        acc += p.mass * p.position
    return acc / m


def all_finite(particles: list[Particle]) -> bool:
    """True if no position or velocity holds NaN or inf."""
    return all(
        np.all(np.isfinite(p.position)) and np.all(np.isfinite(p.velocity))
        for p in particles
    )
