# MIT License (see LICENSE)
"""
Collision classification, bounce response and merge aggregation.

When two particles first overlap (distance < sum of radii) the pair either
merges or bounces:

  merge   iff merging is allowed, max(m)/min(m) > mass ratio threshold, and
          the close charges do not repel enough to prevent it (opposite
          signs, or |q_p| + |q_o| below the close charge threshold).
  bounce  otherwise: p's velocity is reflected across the axis the pair is
          moving along least, and p is flagged as bouncing against o until
          they separate.

Merges are only marked during the force pass; the particles are combined
later in the tick by aggregate_merges(), once positions have been updated
and the roster sorted by descending mass.
"""
from __future__ import annotations
import logging
import math
from enum import Enum

import numpy as np

from ..config import EngineConfig
from ..types import Particle
from ..util import X_AXIS, Y_AXIS, reflect
from ..view import MergeEvent, NO_MERGE

logger = logging.getLogger(__name__)


class CollisionOutcome(Enum):
    MERGE = "merge"
    BOUNCE = "bounce"


# =============================================================================
# Classification
# =============================================================================

def mass_ratio(p: Particle, o: Particle) -> float:
    """Ratio of the larger mass to the smaller one (>= 1)."""
    return max(p.mass, o.mass) / min(p.mass, o.mass)


def should_merge(p: Particle, o: Particle, config: EngineConfig) -> bool:
    if not config.allow_merge:
        return False
    if mass_ratio(p, o) <= config.merge_mass_ratio_threshold:
        return False
    # Sign bit comparison: -0.0 counts as negative
    opposite = math.copysign(1.0, p.close_charge) != math.copysign(1.0, o.close_charge)
    weak = abs(p.close_charge) + abs(o.close_charge) < config.merge_close_charge_threshold
    return opposite or weak


def mark_merging(p: Particle, o: Particle) -> None:
    """Record a pending merge on both particles."""
    p.merging = True
    o.merging = True
    p.merging_with.add(o)
    o.merging_with.add(p)
    # A pair is never bouncing and merging at once
    if p.bouncing_against is o:
        p.bouncing, p.bouncing_against = False, None
    if o.bouncing_against is p:
        o.bouncing, o.bouncing_against = False, None


def bounce_normal(p: Particle, o: Particle) -> np.ndarray:
    """
    Reflection normal for a bounce.

    If the pair moves mostly horizontally the vertical component is
    reflected (n = (0, 1)), otherwise the horizontal one (n = (1, 0)).
    """
    horizontal = abs(p.velocity[0]) + abs(o.velocity[0])
    vertical = abs(p.velocity[1]) + abs(o.velocity[1])
    return Y_AXIS if horizontal > vertical else X_AXIS


def bounce(p: Particle, o: Particle) -> None:
    """Reflect p's velocity and mark p (only p) as bouncing against o."""
    p.velocity = reflect(p.velocity, bounce_normal(p, o))
    p.bouncing = True
    p.bouncing_against = o


def classify(p: Particle, o: Particle, config: EngineConfig) -> CollisionOutcome:
    """
    Resolve a first contact between p and o.

    Merges are only marked here; bounces take effect immediately.
    """
    if should_merge(p, o, config):
        mark_merging(p, o)
        logger.debug("Merge pending: %s + %s", p.short_string(), o.short_string())
        return CollisionOutcome.MERGE
    bounce(p, o)
    logger.debug("Bounce: %s off %s", p.short_string(), o.short_string())
    return CollisionOutcome.BOUNCE


# =============================================================================
# Merge aggregation
# =============================================================================

def merge_cluster(root: Particle, partners: list[Particle]) -> Particle:
    """
    Combine root and partners into a new particle.

    Mass adds; charges and position are mass-weighted averages. Velocity is
    root.v + Σ o.v * (m_o / m_root), which is not a true momentum average;
    it is kept as is so that existing scenarios replay identically. The
    trail settings and trail are inherited from the root.
    """
    mass = root.mass
    close_charge = root.close_charge * mass
    far_charge = root.far_charge * mass
    position = root.position * mass
    velocity = root.velocity.copy()

    for o in partners:
        mass += o.mass
        close_charge += o.close_charge * o.mass
        far_charge += o.far_charge * o.mass
        position = position + o.position * o.mass
        velocity = velocity + o.velocity * (o.mass / root.mass)
        # o has been absorbed, so it must not become a root later in the pass
        o.merging_with.discard(root)

    merged = Particle(
        mass,
        close_charge / mass,
        far_charge / mass,
        position=position / mass,
        velocity=velocity,
        track_history=root.track_history,
        history_size=root.history_size,
    )
    merged.position_history = root.position_history
    return merged


def remove_indices(particles: list[Particle], indices: list[int]) -> None:
    """
    Remove the given indices by moving the last item into each hole.

    Order of the survivors is not preserved.
    """
    for i in sorted(indices, reverse=True):
        particles[i] = particles[-1]
        particles.pop()


def aggregate_merges(particles: list[Particle]) -> MergeEvent:
    """
    Perform all merges marked during this tick.

    Expects `particles` sorted by descending mass, so the first member of a
    cluster that is visited is its largest and becomes the root. Roots and
    the particles they absorb are removed; the merged particles are appended.

    A particle whose every partner was already absorbed by another root (a
    chain A-B-C where A took B) is left in place with its merge state
    cleared, so mass is never counted twice or lost.

    Returns:
        Summary of the merges, NO_MERGE if there were none.
    """
    consumed: set[Particle] = set()
    added: list[Particle] = []
    multiple = False
    source = partner = result = None

    for p in particles:
        if not p.merging:
            continue
        if p in consumed or not p.merging_with:
            consumed.add(p)
            continue

        # Roster order keeps the float summation deterministic
        partners = [o for o in particles if o in p.merging_with and o not in consumed]
        if not partners:
            p.merging = False
            p.merging_with.clear()
            continue

        merged = merge_cluster(p, partners)
        consumed.add(p)
        consumed.update(partners)
        added.append(merged)

        multiple = multiple or len(partners) > 1
        source, partner, result = p, partners[0], merged
        logger.info(
            "Merged %d particle(s) into %s: %s",
            len(partners) + 1, p.short_string(), merged.short_string(),
        )

    if not consumed:
        return NO_MERGE

    remove_indices(particles, [i for i, q in enumerate(particles) if q in consumed])
    particles.extend(added)

    if not added:
        return NO_MERGE
    return MergeEvent(
        occurred=True,
        multiple=multiple,
        source=source,
        partner=partner,
        result=result,
        count=len(added),
    )
