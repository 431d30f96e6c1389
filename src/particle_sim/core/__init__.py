# MIT License (see LICENSE)
"""
Core physics components.

This subpackage provides:
    - Force model: gravity, close-charge and far-charge accelerations.
    - Integrators: per-tick Euler position update with trail recording.
    - Invariants: total mass, energy, momentum for diagnostics and tests.

Typical usage:
    from particle_sim.core import apply_pairwise_forces, integrate_positions

    apply_pairwise_forces(particles, config)
    integrate_positions(particles)
"""
from .forces import (
    apply_pairwise_forces,
    gravity_acceleration,
    close_charge_acceleration,
    far_charge_acceleration,
)
from .integrators import euler_step, integrate_positions
from .invariants import total_mass, kinetic_energy, linear_momentum, center_of_mass, all_finite

__all__ = [
    # Forces
    "apply_pairwise_forces",
    "gravity_acceleration",
    "close_charge_acceleration",
    "far_charge_acceleration",
    # Integrators
    "euler_step",
    "integrate_positions",
    # Invariants
    "total_mass",
    "kinetic_energy",
    "linear_momentum",
    "center_of_mass",
    "all_finite",
]
