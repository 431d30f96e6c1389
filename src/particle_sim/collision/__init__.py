# MIT License (see LICENSE)
"""
Collision handling subsystem.

This subpackage provides:
    - Resolver: merge-or-bounce classification on first contact, bounce
      reflection, and end-of-tick merge aggregation.
    - Boundary: reflection off the walls of a bounded environment.

Typical usage:
    from particle_sim.collision import aggregate_merges, resolve_walls

    event = aggregate_merges(particles)
    resolve_walls(particles, config.environment_size)
"""
from .resolver import (
    CollisionOutcome,
    classify,
    should_merge,
    mass_ratio,
    bounce,
    bounce_normal,
    merge_cluster,
    aggregate_merges,
    remove_indices,
)
from .boundary import reflect_off_walls, resolve_walls

__all__ = [
    # Resolver
    "CollisionOutcome",
    "classify",
    "should_merge",
    "mass_ratio",
    "bounce",
    "bounce_normal",
    "merge_cluster",
    "aggregate_merges",
    "remove_indices",
    # Boundary
    "reflect_off_walls",
    "resolve_walls",
]
