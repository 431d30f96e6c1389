# MIT License (see LICENSE)
"""
Wall reflection for a bounded square environment [0, size - 1]².

A particle whose circle crosses a wall has its velocity reflected across
the wall normal and its centre clamped back inside. Only one axis is
resolved per particle per tick: if the horizontal bounds are violated the
vertical ones are not checked until the next tick.

Bounds tests use the truncated integer position, like the display grid.
"""
from __future__ import annotations
import logging

from ..types import Particle
from ..util import X_AXIS, Y_AXIS, reflect, clamp

logger = logging.getLogger(__name__)


def _outside(coord: float, radius: int, size: int) -> bool:
    c = int(coord)
    return c - radius < 0 or c + radius > size - 1


def reflect_off_walls(p: Particle, size: int) -> bool:
    """
    Bounce p off at most one pair of walls.

    Returns:
        True if p was reflected.
    """
    r = p.radius
    for axis, normal in ((0, X_AXIS), (1, Y_AXIS)):
        if _outside(p.position[axis], r, size):
            p.velocity = reflect(p.velocity, normal)
            p.position[axis] = clamp(float(p.position[axis]), float(r), float(size - r - 1))
            return True
    return False


def resolve_walls(particles: list[Particle], size: int) -> int:
    """
    Apply wall reflection to every particle.

    Returns:
        Number of particles reflected.
    """
    hits = 0
    for p in particles:
        if reflect_off_walls(p, size):
            hits += 1
    if hits:
        logger.debug("Wall bounce: %d particle(s)", hits)
    return hits
