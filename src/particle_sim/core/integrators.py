# MIT License (see LICENSE)
"""
Position integration.

The simulation advances in whole ticks with velocity already holding the
per-tick displacement, so integration is a single explicit Euler step:

    x_{n+1} = x_n + v_{n+1}

Velocities are updated first by the force model (semi-implicit Euler).
"""
from __future__ import annotations

from ..history import record_position
from ..types import Particle


def euler_step(p: Particle) -> None:
    """Record the current position in the trail, then move by one velocity."""
    record_position(p)
    p.position = p.position + p.velocity


def integrate_positions(particles: list[Particle]) -> None:
    for p in particles:
        euler_step(p)
